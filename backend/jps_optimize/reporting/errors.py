"""
Report output errors.

Snapshots themselves never fail; only writing them to disk can.
"""

from pathlib import Path
from typing import Optional


class ReportingError(Exception):
    """Base exception for optimization report failures."""
    pass


class ReportWriteError(ReportingError):
    """A report file or its output directory could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)
