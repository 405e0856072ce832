"""
Optimization errors.

Only failures that abort a whole operation are raised. Per-setting
failures are recorded as outcomes instead.
"""


class OptimizeError(Exception):
    """Base exception for optimization failures."""
    pass


class SiteNotFoundError(OptimizeError):
    """The target site directory does not exist."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Site not found: {domain}")


class EnableFailedError(OptimizeError):
    """The cache plugin was inactive and could not be activated."""

    def __init__(self, plugin: str, reason: str):
        self.plugin = plugin
        self.reason = reason
        super().__init__(f"Failed to activate {plugin}: {reason}")
