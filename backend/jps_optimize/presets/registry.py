"""
On-disk preset registry.

Presets live as individual files in one directory (by default
/opt/jps-server-tools/config/presets). The registry discovers them,
locates them by name, and validates their structure.

The registry holds no parsed state: every call reads the directory
again, so edits to preset files are picked up without a restart.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import (
    InvalidPresetError,
    PresetDirectoryNotFoundError,
    PresetError,
    PresetNotFoundError,
)
from .models import KNOWN_SECTIONS, Preset
from .parser import parse_preset

logger = logging.getLogger(__name__)


PRESET_SUFFIXES = (".yaml", ".yml", ".preset")


@dataclass(frozen=True)
class PresetSummary:
    """Listing entry for one valid preset file."""
    name: str
    description: str
    path: Path

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        return {
            "name": self.name,
            "description": self.description,
            "path": str(self.path),
        }


def structurally_validate(path: Path, strict: bool = True) -> Preset:
    """
    Check that a preset file is usable.

    A valid preset has a non-empty `name` and at least one section the
    engine knows how to apply (php or lscache).

    Args:
        path: Preset file path
        strict: Parse strictly (malformed lines are errors)

    Returns:
        The parsed Preset

    Raises:
        PresetNotFoundError: File does not exist
        InvalidPresetError: Missing name, no known section, or unparsable
    """
    try:
        preset = parse_preset(path, strict=strict)
    except (PresetNotFoundError, InvalidPresetError):
        raise
    except PresetError as e:
        raise InvalidPresetError(Path(path), str(e)) from e

    if not any(preset.has_section(s) for s in KNOWN_SECTIONS):
        raise InvalidPresetError(
            Path(path),
            f"Preset must have at least one of: {', '.join(KNOWN_SECTIONS)} sections",
        )

    return preset


class PresetRegistry:
    """
    Directory-backed preset registry.

    Args:
        presets_dir: Directory containing preset files
        strict: Parse presets strictly (default)
    """

    def __init__(self, presets_dir: Path, strict: bool = True):
        self.presets_dir = Path(presets_dir)
        self.strict = strict

    def _preset_files(self) -> List[Path]:
        if not self.presets_dir.is_dir():
            raise PresetDirectoryNotFoundError(self.presets_dir)
        return sorted(
            (p for p in self.presets_dir.iterdir()
             if p.is_file() and p.suffix in PRESET_SUFFIXES),
            key=lambda p: p.name,
        )

    def list_presets(self) -> List[PresetSummary]:
        """
        List valid presets, sorted by filename.

        Invalid preset files are skipped with a warning.

        Returns:
            PresetSummary per valid file (empty list for an empty directory)

        Raises:
            PresetDirectoryNotFoundError: If the directory does not exist
        """
        summaries = []
        for path in self._preset_files():
            try:
                preset = structurally_validate(path, strict=self.strict)
            except PresetError as e:
                logger.warning("Skipping invalid preset %s: %s", path.name, e)
                continue
            summaries.append(
                PresetSummary(
                    name=preset.name,
                    description=preset.description or "No description",
                    path=path,
                )
            )
        return summaries

    def locate(self, name: str) -> Path:
        """
        Find the file for a preset.

        Lookup is by file stem first (woo -> woo.yaml), then by the
        `name:` field of each preset file.

        Raises:
            PresetDirectoryNotFoundError: If the directory does not exist
            PresetNotFoundError: If no file matches
        """
        files = self._preset_files()

        for path in files:
            if path.stem == name:
                return path

        for path in files:
            found = self._name_of(path)
            if found == name:
                return path

        raise PresetNotFoundError(name)

    def load(self, name: str) -> Preset:
        """Locate and structurally validate a preset."""
        return structurally_validate(self.locate(name), strict=self.strict)

    def _name_of(self, path: Path) -> Optional[str]:
        try:
            return parse_preset(path, strict=False).name
        except PresetError:
            return None
