"""
Preset system for site optimization.

Presets are named bundles of desired settings read from small
hand-authored files. This package parses them, discovers them in the
presets directory, and validates their structure. Presets are pure
data with no side effects; applying them lives in jps_optimize.optimize.
"""

from .errors import (
    PresetError,
    PresetNotFoundError,
    PresetDirectoryNotFoundError,
    PresetParseError,
    InvalidPresetError,
)
from .models import (
    Preset,
    get_value,
    KNOWN_SECTIONS,
    PHP_SECTION,
    LSCACHE_SECTION,
)
from .parser import parse_preset, parse_preset_text
from .registry import PresetRegistry, PresetSummary, structurally_validate

__all__ = [
    "PresetError",
    "PresetNotFoundError",
    "PresetDirectoryNotFoundError",
    "PresetParseError",
    "InvalidPresetError",
    "Preset",
    "get_value",
    "KNOWN_SECTIONS",
    "PHP_SECTION",
    "LSCACHE_SECTION",
    "parse_preset",
    "parse_preset_text",
    "PresetRegistry",
    "PresetSummary",
    "structurally_validate",
]
