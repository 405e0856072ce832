"""
WP-CLI collaborator for live WordPress state.
"""

from .errors import WPCLIError, WPCLINotFoundError, WPCLITimeoutError
from .client import (
    WPCLI,
    WPCLIResult,
    LiteSpeedCache,
    PluginStatus,
    find_wp_cli,
)

__all__ = [
    "WPCLIError",
    "WPCLINotFoundError",
    "WPCLITimeoutError",
    "WPCLI",
    "WPCLIResult",
    "LiteSpeedCache",
    "PluginStatus",
    "find_wp_cli",
]
