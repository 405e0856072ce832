"""
Validation of applied optimization settings.
"""

from .models import (
    ValidationStatus,
    ValidationEntry,
    ValidationResult,
    EXIT_CODES,
)
from .validator import validate_optimization, validate_php_settings, validate_lscache

__all__ = [
    "ValidationStatus",
    "ValidationEntry",
    "ValidationResult",
    "EXIT_CODES",
    "validate_optimization",
    "validate_php_settings",
    "validate_lscache",
]
