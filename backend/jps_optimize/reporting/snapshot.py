"""
Report generator: snapshot current settings for audit trails.

Uses the same read paths as the validator but never compares and never
fails: every value that cannot be read falls back to a placeholder.
"""

import logging
from typing import Iterable, Optional

from ..sites import Site
from ..vhost.editor import ConfigBlockEditor
from ..wpcli.client import WPCLI
from .models import (
    DEFAULT_SETTING,
    NOT_APPLICABLE,
    UNKNOWN_PRESET,
    OptimizationReport,
    SubsystemReport,
)

logger = logging.getLogger(__name__)


# PHP settings always captured, in report order
REPORT_PHP_KEYS = (
    "memory_limit",
    "max_execution_time",
    "upload_max_filesize",
    "post_max_size",
)


def generate_report(
    site: Site,
    preset_name: Optional[str],
    wp: WPCLI,
    editor: Optional[ConfigBlockEditor] = None,
    extra_keys: Iterable[str] = (),
    plugin: str = "litespeed-cache",
) -> OptimizationReport:
    """
    Capture a site's current PHP overrides and cache plugin status.

    Args:
        site: Target site
        preset_name: Preset recorded in the report ("unknown" if None)
        wp: WP-CLI collaborator
        editor: Config reader
        extra_keys: Additional php_value keys to capture
        plugin: Cache plugin slug

    Returns:
        OptimizationReport (never raises for unreadable state)
    """
    editor = editor or ConfigBlockEditor()

    keys = list(REPORT_PHP_KEYS)
    for key in extra_keys:
        if key not in keys:
            keys.append(key)

    try:
        values = editor.snapshot(site.vhconf_path, keys)
    except (OSError, ValueError) as e:
        logger.warning("Cannot read %s: %s", site.vhconf_path, e)
        values = {}

    settings = {key: values.get(key) or DEFAULT_SETTING for key in keys}

    status = NOT_APPLICABLE
    if site.is_wordpress:
        status = wp.plugin_status(site.html_path, plugin).value

    return OptimizationReport(
        target=site.domain,
        preset=preset_name or UNKNOWN_PRESET,
        settings=settings,
        subsystem=SubsystemReport(status=status),
    )
