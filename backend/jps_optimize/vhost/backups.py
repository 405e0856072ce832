"""
Backup strategies for config edits.

Every mutating edit asks its BackupStrategy for a copy of the file
before touching it. If the copy cannot be made the edit does not run.

TimestampedBackup writes <file>.bak.<YYYYmmddHHMMSS> next to the file
(or into backup_dir). Two backups taken in the same second get numeric
suffixes (.001, .002, ...) so names sort in creation order and a
backup is never overwritten.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol

from .errors import BackupError

logger = logging.getLogger(__name__)


class BackupStrategy(Protocol):
    """Anything that can copy a file aside before it is edited."""

    def create(self, path: Path) -> Path:
        """Back up path. Returns the backup location; raises BackupError."""
        ...


class TimestampedBackup:
    """
    Copy files to timestamped siblings.

    Args:
        backup_dir: Directory for backups (default: next to the file)
        clock: Time source, injectable for tests
    """

    TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

    def __init__(
        self,
        backup_dir: Optional[Path] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.backup_dir = backup_dir
        self.clock = clock

    def backup_path_for(self, path: Path) -> Path:
        """Next free backup path for a file."""
        directory = self.backup_dir or path.parent
        stamp = self.clock().strftime(self.TIMESTAMP_FORMAT)
        candidate = directory / f"{path.name}.bak.{stamp}"
        counter = 0
        while candidate.exists():
            counter += 1
            candidate = directory / f"{path.name}.bak.{stamp}.{counter:03d}"
        return candidate

    def create(self, path: Path) -> Path:
        try:
            if self.backup_dir is not None:
                self.backup_dir.mkdir(parents=True, exist_ok=True)
            target = self.backup_path_for(path)
            shutil.copy2(path, target)
        except OSError as e:
            raise BackupError(path, str(e)) from e
        logger.debug("Backed up %s to %s", path, target)
        return target
