"""
Vhost config editing errors.
"""

from pathlib import Path


class VhostError(Exception):
    """Base exception for config-block editing failures."""
    pass


class ConfigNotFoundError(VhostError):
    """The config file to read or edit does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"vhconf.conf not found: {path}")


class BackupError(VhostError):
    """A backup could not be written; the edit was not performed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to back up {path}: {reason}")
