"""
Post-apply validation.

Re-reads the vhost config and the live plugin state and compares them
with the preset. Pure read + compare: nothing is written.

Severity policy:
- vhconf.conf or its phpIniOverride block missing  -> ERROR (once)
- PHP value differs from the preset                -> WARN (drift may be
                                                      a deliberate override)
- PHP value matches                                -> OK
- LiteSpeed Cache not installed or unreachable     -> ERROR
- LiteSpeed Cache installed but inactive           -> WARN
- LiteSpeed Cache active                           -> OK
- Not a WordPress site                             -> INFO
"""

import logging
from typing import Optional

from ..presets.models import PHP_SECTION, Preset
from ..sites import Site
from ..vhost.editor import ConfigBlockEditor
from ..vhost.errors import ConfigNotFoundError
from ..wpcli.client import WPCLI, PluginStatus
from .models import ValidationResult, ValidationStatus

logger = logging.getLogger(__name__)


def validate_php_settings(
    site: Site,
    preset: Preset,
    result: ValidationResult,
    editor: ConfigBlockEditor,
    marker: str = "phpIniOverride",
) -> None:
    """Compare the preset's php section with vhconf.conf, adding entries to result."""
    try:
        has_block = editor.has_block(site.vhconf_path, marker)
    except ConfigNotFoundError:
        result.add("vhconf", ValidationStatus.ERROR, "vhconf.conf not found")
        return

    expected = preset.section(PHP_SECTION)
    if not expected:
        return

    if not has_block:
        result.add("vhconf", ValidationStatus.ERROR, f"{marker} block not found in vhconf.conf")
        return

    current = editor.snapshot(site.vhconf_path, list(expected))
    for key, value in expected.items():
        actual = current[key]
        if actual == value:
            result.add(key, ValidationStatus.OK, f"{key} = {actual}")
        else:
            shown = actual if actual is not None else "'not set'"
            result.add(key, ValidationStatus.WARN, f"{key} expected {value}, got {shown}")


def validate_lscache(
    site: Site,
    result: ValidationResult,
    wp: WPCLI,
    plugin: str = "litespeed-cache",
) -> None:
    """Classify the cache plugin state, adding one entry to result."""
    if not site.is_wordpress:
        result.add("lscache", ValidationStatus.INFO, "Not a WordPress site, skipping LSCache validation")
        return

    status = wp.plugin_status(site.html_path, plugin)
    if status == PluginStatus.ACTIVE:
        result.add("lscache", ValidationStatus.OK, "LiteSpeed Cache is active")
    elif status == PluginStatus.INACTIVE:
        result.add("lscache", ValidationStatus.WARN, "LiteSpeed Cache is installed but inactive")
    elif status == PluginStatus.NOT_INSTALLED:
        result.add("lscache", ValidationStatus.ERROR, "LiteSpeed Cache is not installed")
    else:
        result.add("lscache", ValidationStatus.ERROR, "LiteSpeed Cache status unavailable (WP-CLI unreachable)")


def validate_optimization(
    site: Site,
    preset: Preset,
    wp: WPCLI,
    editor: Optional[ConfigBlockEditor] = None,
    marker: str = "phpIniOverride",
    plugin: str = "litespeed-cache",
) -> ValidationResult:
    """
    Verify that a preset's settings are in effect on a site.

    Args:
        site: Target site
        preset: Preset that was applied
        wp: WP-CLI collaborator (read-only calls only)
        editor: Config reader (default: php_value directives)
        marker: PHP override block marker
        plugin: Cache plugin slug

    Returns:
        ValidationResult; use .status / .exit_code for the aggregate
    """
    editor = editor or ConfigBlockEditor()
    result = ValidationResult()

    validate_php_settings(site, preset, result, editor, marker)
    validate_lscache(site, result, wp, plugin)

    logger.debug(
        "Validated %s against %s: %s (%d entries)",
        site.domain,
        preset.name,
        result.status.value,
        len(result.entries),
    )
    return result
