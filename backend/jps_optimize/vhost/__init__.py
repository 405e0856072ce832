"""
Vhost config editing.

Parses OpenLiteSpeed vhconf.conf files into a block tree and performs
targeted directive edits that leave unrelated content untouched.
"""

from .errors import VhostError, ConfigNotFoundError, BackupError
from .blocks import ConfigDocument, ConfigBlock, Directive
from .backups import BackupStrategy, TimestampedBackup
from .editor import ConfigBlockEditor

__all__ = [
    "VhostError",
    "ConfigNotFoundError",
    "BackupError",
    "ConfigDocument",
    "ConfigBlock",
    "Directive",
    "BackupStrategy",
    "TimestampedBackup",
    "ConfigBlockEditor",
]
