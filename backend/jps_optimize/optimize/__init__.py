"""
Applying presets to sites.
"""

from .errors import OptimizeError, SiteNotFoundError, EnableFailedError
from .models import ApplyStatus, ApplyResult, SettingOutcome
from .applier import (
    LSCACHE_OPTIONS,
    OptionRule,
    apply_lscache_settings,
    apply_php_settings,
    recognized_lscache_settings,
)
from .service import OptimizationRun, optimize_site, editor_for

__all__ = [
    "OptimizeError",
    "SiteNotFoundError",
    "EnableFailedError",
    "ApplyStatus",
    "ApplyResult",
    "SettingOutcome",
    "LSCACHE_OPTIONS",
    "OptionRule",
    "apply_lscache_settings",
    "apply_php_settings",
    "recognized_lscache_settings",
    "OptimizationRun",
    "optimize_site",
    "editor_for",
]
