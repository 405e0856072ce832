"""
Preset-specific error types.

All errors inherit from PresetError for easy catching.
Errors are explicit and provide actionable messages.
"""

from pathlib import Path
from typing import Optional, Union


class PresetError(Exception):
    """Base exception for all preset failures."""
    pass


class PresetNotFoundError(PresetError):
    """Raised when a preset file or preset name cannot be found."""

    def __init__(self, name: Union[str, Path]):
        self.name = str(name)
        super().__init__(f"Preset not found: {self.name}")


class PresetDirectoryNotFoundError(PresetError):
    """Raised when the presets directory itself does not exist."""

    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(f"Presets directory not found: {directory}")


class PresetParseError(PresetError):
    """Raised when a preset file contains a line that cannot be parsed."""

    def __init__(self, path: Path, line_number: int, line: str):
        self.path = path
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"{path}:{line_number}: cannot parse preset line: {line.strip()!r}"
        )


class InvalidPresetError(PresetError):
    """Raised when a preset parses but is structurally invalid."""

    def __init__(self, path: Optional[Path], reason: str):
        self.path = path
        self.reason = reason
        where = f"{path}: " if path else ""
        super().__init__(f"{where}{reason}")
