"""
WP-CLI call errors.

A WPCLIError describes one failed call. It never implies anything about
other calls: callers decide whether a failure is fatal for their step.
"""

from typing import List, Optional


class WPCLIError(Exception):
    """A single WP-CLI call failed (non-zero exit, empty output, or no binary)."""

    def __init__(
        self,
        message: str,
        args: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.message = message
        self.command = list(args or [])
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class WPCLINotFoundError(WPCLIError):
    """No WP-CLI binary could be located."""

    def __init__(self):
        super().__init__("WP-CLI not found")


class WPCLITimeoutError(WPCLIError):
    """A WP-CLI call exceeded its timeout and was killed."""

    def __init__(self, args: List[str], timeout: float):
        self.timeout = timeout
        super().__init__(f"WP-CLI call timed out after {timeout:g}s", args=args)
