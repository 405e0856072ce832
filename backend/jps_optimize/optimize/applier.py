"""
Settings applier.

Applies preset sections to their targets:

- php      -> `php_value` directives in the vhost phpIniOverride block
- lscache  -> LiteSpeed Cache plugin options via WP-CLI

Application is best-effort per key: a failed key is logged and
recorded, and the remaining keys are still applied. Only a failed
plugin activation aborts the cache step.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..presets.models import LSCACHE_SECTION, PHP_SECTION, Preset
from ..sites import Site
from ..vhost.editor import ConfigBlockEditor, check_directive
from ..wpcli.client import WPCLI, LiteSpeedCache
from ..wpcli.errors import WPCLIError
from .errors import EnableFailedError
from .models import ApplyResult, ApplyStatus, SettingOutcome

logger = logging.getLogger(__name__)


DEFAULT_PHP_BLOCK = "phpIniOverride"

TRUE_VALUES = ("true", "yes", "on", "1")


# =============================================================================
# LiteSpeed Cache translation table
# =============================================================================

@dataclass(frozen=True)
class OptionRule:
    """How one preset key maps onto a LiteSpeed Cache option."""
    option: str
    boolean: bool = True

    def translate(self, raw: str) -> str:
        if self.boolean:
            return "1" if raw.strip().lower() in TRUE_VALUES else "0"
        return raw


# Preset key (lscache section) -> plugin option, in application order
LSCACHE_OPTIONS: Dict[str, OptionRule] = {
    # Cache
    "browser_cache": OptionRule("cache-browser"),
    "mobile_cache": OptionRule("cache-mobile"),
    "cache_logged_in": OptionRule("cache-priv"),
    "ttl_public": OptionRule("cache-ttl_pub", boolean=False),
    "ttl_private": OptionRule("cache-ttl_priv", boolean=False),
    # Page optimization
    "css_minify": OptionRule("optm-css_min"),
    "js_minify": OptionRule("optm-js_min"),
    "html_minify": OptionRule("optm-html_min"),
    "css_combine": OptionRule("optm-css_comb"),
    "js_combine": OptionRule("optm-js_comb"),
    # Media
    "lazy_load": OptionRule("media-lazy"),
    "webp": OptionRule("img_optm-webp"),
}


def recognized_lscache_settings(preset: Preset) -> List[SettingOutcome]:
    """
    Translate the preset's lscache section into pending outcomes.

    Keys without a translation rule and keys with empty values are
    ignored. The returned outcomes are not yet applied.
    """
    section = preset.section(LSCACHE_SECTION)
    pending = []
    for key, rule in LSCACHE_OPTIONS.items():
        raw = section.get(key, "")
        if not raw:
            continue
        pending.append(
            SettingOutcome(key=key, target=rule.option, value=rule.translate(raw), applied=False)
        )
    return pending


# =============================================================================
# LiteSpeed Cache
# =============================================================================

def apply_lscache_settings(
    site: Site,
    preset: Preset,
    wp: WPCLI,
    plugin: str = "litespeed-cache",
) -> ApplyResult:
    """
    Configure the LiteSpeed Cache plugin from a preset.

    Steps:
    1. No WordPress at the site root -> NOT_APPLICABLE, nothing is called.
    2. No recognized lscache keys -> EMPTY_PRESET, nothing is called.
    3. Plugin inactive -> one activation attempt; failure aborts.
    4. Each recognized key is set; failures are recorded and skipped.
    5. One purge of all caches; failure is logged only.

    Returns:
        ApplyResult with one outcome per recognized key

    Raises:
        EnableFailedError: Plugin inactive and activation failed
    """
    if not site.is_wordpress:
        logger.info("WordPress not found at %s, skipping LiteSpeed Cache", site.html_path)
        return ApplyResult(
            target=LSCACHE_SECTION,
            status=ApplyStatus.NOT_APPLICABLE,
            message=f"WordPress not found at: {site.html_path}",
        )

    pending = recognized_lscache_settings(preset)
    if not pending:
        logger.warning("Preset %s has no recognized lscache settings", preset.name)
        return ApplyResult(
            target=LSCACHE_SECTION,
            status=ApplyStatus.EMPTY_PRESET,
            message="No recognized lscache settings in preset",
        )

    cache = LiteSpeedCache(wp, site.html_path, plugin)

    try:
        active = cache.is_active()
    except WPCLIError as e:
        raise EnableFailedError(plugin, str(e)) from e

    if not active:
        logger.warning("LiteSpeed Cache plugin is not active")
        logger.info("Attempting to activate LiteSpeed Cache plugin...")
        try:
            cache.activate()
        except WPCLIError as e:
            logger.error("Failed to activate LiteSpeed Cache plugin: %s", e)
            raise EnableFailedError(plugin, str(e)) from e

    for outcome in pending:
        try:
            cache.set_option(outcome.target, outcome.value)
            outcome.applied = True
        except WPCLIError as e:
            outcome.error = str(e)
            logger.warning("Failed to set %s = %s: %s", outcome.target, outcome.value, e)

    result = ApplyResult(target=LSCACHE_SECTION, status=ApplyStatus.APPLIED, outcomes=pending)

    try:
        cache.purge_all()
        result.purged = True
    except WPCLIError as e:
        logger.warning("Cache purge failed: %s", e)

    logger.info(
        "Applied %d LiteSpeed Cache settings from preset: %s",
        result.applied_count,
        preset.name,
    )
    return result


# =============================================================================
# PHP (vhconf.conf phpIniOverride)
# =============================================================================

def apply_php_settings(
    vhconf_path: Path,
    preset: Preset,
    editor: Optional[ConfigBlockEditor] = None,
    marker: str = DEFAULT_PHP_BLOCK,
) -> ApplyResult:
    """
    Write the preset's php section into the vhost phpIniOverride block.

    Keys that cannot be written as a directive are recorded and skipped;
    the rest go through set_values (each edit takes its own backup).

    Returns:
        ApplyResult with one outcome per php key

    Raises:
        ConfigNotFoundError: vhconf.conf does not exist
        BackupError: A backup failed; no further keys are written
    """
    editor = editor or ConfigBlockEditor()
    php = preset.section(PHP_SECTION)

    if not php:
        return ApplyResult(
            target=PHP_SECTION,
            status=ApplyStatus.EMPTY_PRESET,
            message="No php settings in preset",
        )

    result = ApplyResult(target=PHP_SECTION, status=ApplyStatus.APPLIED)

    writable: Dict[str, str] = {}
    for key, value in php.items():
        outcome = SettingOutcome(key=key, target=key, value=value, applied=False)
        result.outcomes.append(outcome)
        try:
            check_directive(key, value)
        except ValueError as e:
            outcome.error = str(e)
            logger.warning("Skipping php setting %s: %s", key, e)
            continue
        writable[key] = value

    if writable:
        result.backups.extend(editor.set_values(vhconf_path, marker, writable))
        for outcome in result.outcomes:
            if outcome.key in writable:
                outcome.applied = True

    logger.info(
        "Applied %d PHP settings to %s from preset: %s",
        result.applied_count,
        vhconf_path,
        preset.name,
    )
    return result
