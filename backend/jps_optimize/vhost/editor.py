"""
Config-block editor.

Targeted, idempotent edits of one directive inside one block of a
vhost config file, e.g. setting `php_value memory_limit 512M` inside
`phpIniOverride { ... }`.

Guarantees:
- The file is backed up before every mutating edit; if the backup
  fails, the file is not touched.
- Only the targeted directive line changes. Every other line, known or
  unknown, is written back exactly as read.
- Writes are atomic (temp file + replace); a failed write removes the
  temp file and leaves the original as it was.

Known limitation: read() and remove() match the key anywhere in the
file, not only inside the targeted block.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .backups import BackupStrategy, TimestampedBackup
from .blocks import ConfigDocument
from .errors import ConfigNotFoundError

logger = logging.getLogger(__name__)


def check_directive(key: str, value: str) -> None:
    """Raise ValueError unless key and value fit on one directive line."""
    if not key or len(key.split()) != 1 or key != key.strip() or any(c in key for c in "{}#"):
        raise ValueError(f"Invalid directive key: {key!r}")
    if not value or value != value.strip():
        raise ValueError(f"Empty or padded value for directive {key!r}")
    if any(c in value for c in "\r\n{}"):
        raise ValueError(f"Value for {key!r} may not contain newlines or braces")


class ConfigBlockEditor:
    """
    Read/modify/write access to directives in a block-structured file.

    Args:
        keyword: Directive keyword ("php_value"); None for plain
            `key value` directives
        backup: Strategy used before every mutation
    """

    def __init__(
        self,
        keyword: Optional[str] = "php_value",
        backup: Optional[BackupStrategy] = None,
    ):
        self.keyword = keyword
        self.backup = backup or TimestampedBackup()

    def load(self, path: Path) -> ConfigDocument:
        """
        Parse a config file.

        Raises:
            ConfigNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigNotFoundError(path)
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return ConfigDocument.parse(f.read(), keyword=self.keyword)

    def _write(self, path: Path, document: ConfigDocument) -> None:
        temp_path = path.with_name(path.name + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(document.render())
            shutil.copymode(path, temp_path)
            os.replace(temp_path, path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def read(self, path: Path, key: str) -> Optional[str]:
        """
        Current value of a directive, searching the whole file.

        Returns:
            Value of the first matching directive, or None if the file or
            the directive does not exist
        """
        try:
            document = self.load(path)
        except ConfigNotFoundError:
            return None
        return document.get_value(key)

    def has_block(self, path: Path, marker: str) -> bool:
        """
        Whether the file contains a block with this marker.

        Raises:
            ConfigNotFoundError: If the file does not exist
        """
        return self.load(path).find_block(marker) is not None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert(self, path: Path, marker: str, key: str, value: str) -> Path:
        """
        Set a directive inside a block, creating the block if needed.

        - No block: a new block with the directive is appended.
        - Directive present in the block: only its value is rewritten.
        - Otherwise: the directive is added before the closing brace.

        Args:
            path: Config file
            marker: Block marker (e.g. "phpIniOverride")
            key: Directive key (e.g. "memory_limit")
            value: New value

        Returns:
            Path of the backup taken before the edit

        Raises:
            ConfigNotFoundError: If the file does not exist
            BackupError: If the backup fails (file left untouched)
            ValueError: If key or value cannot be written as one directive
        """
        path = Path(path)
        check_directive(key, value)
        document = self.load(path)

        backup_path = self.backup.create(path)

        block = document.find_block(marker)
        if block is None:
            document.append_block(marker, key, value)
            logger.debug("Created %s block with %s = %s", marker, key, value)
        else:
            existing = [d for d in block.directives if d.key == key]
            if existing:
                for directive in existing:
                    document.set_value(directive, value)
                logger.debug("Updated %s = %s in %s", key, value, marker)
            else:
                document.insert_directive(block, key, value)
                logger.debug("Added %s = %s to %s", key, value, marker)

        self._write(path, document)
        return backup_path

    def set_values(self, path: Path, marker: str, values: Mapping[str, str]) -> List[Path]:
        """
        Upsert several directives in order, stopping at the first error.

        Returns:
            Backup paths, one per edit
        """
        return [self.upsert(path, marker, key, value) for key, value in values.items()]

    def remove(self, path: Path, key: str) -> int:
        """
        Delete every directive line for key, anywhere in the file.

        Returns:
            Number of lines removed (no backup or write when 0)

        Raises:
            ConfigNotFoundError: If the file does not exist
            BackupError: If the backup fails (file left untouched)
        """
        path = Path(path)
        document = self.load(path)
        if not document.find_directives(key):
            return 0

        self.backup.create(path)
        removed = document.remove_directives(key)
        self._write(path, document)
        logger.debug("Removed %d %s line(s) from %s", removed, key, path)
        return removed

    def snapshot(self, path: Path, keys: List[str]) -> Dict[str, Optional[str]]:
        """Values for several keys from a single read (None when unset)."""
        try:
            document = self.load(path)
        except ConfigNotFoundError:
            return {key: None for key in keys}
        return {key: document.get_value(key) for key in keys}
