"""
End-to-end site optimization.

optimize_site() runs the whole flow for one site and one preset:

    locate preset -> structural validation -> apply php -> apply lscache
    -> validate

Callers must ensure at most one optimize_site() runs per site at a
time; nothing here locks.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ToolsConfig
from ..presets.models import Preset
from ..presets.registry import PresetRegistry
from ..sites import Site
from ..validation.models import ValidationResult
from ..validation.validator import validate_optimization
from ..vhost.editor import ConfigBlockEditor
from ..vhost.errors import ConfigNotFoundError
from ..wpcli.client import WPCLI
from .applier import apply_lscache_settings, apply_php_settings
from .errors import SiteNotFoundError
from .models import ApplyResult, ApplyStatus

logger = logging.getLogger(__name__)


@dataclass
class OptimizationRun:
    """Everything one optimize_site() call did."""
    domain: str
    preset: Preset
    php: ApplyResult
    lscache: ApplyResult
    validation: ValidationResult

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "preset": self.preset.name,
            "php": self.php.to_dict(),
            "lscache": self.lscache.to_dict(),
            "validation": self.validation.to_dict(),
        }


def editor_for(config: ToolsConfig) -> ConfigBlockEditor:
    """ConfigBlockEditor using the configured directive keyword."""
    return ConfigBlockEditor(keyword=config.php_directive)


def optimize_site(
    domain: str,
    preset_name: str,
    config: ToolsConfig,
    wp: Optional[WPCLI] = None,
    editor: Optional[ConfigBlockEditor] = None,
) -> OptimizationRun:
    """
    Apply a named preset to a site and validate the result.

    Args:
        domain: Site domain
        preset_name: Preset file stem or `name:` value
        config: Tools configuration
        wp: WP-CLI collaborator (default: from config)
        editor: Config editor (default: from config)

    Returns:
        OptimizationRun with per-step results

    Raises:
        PresetError: Preset missing or invalid
        SiteNotFoundError: Domain invalid or site directory does not exist
        EnableFailedError: Cache plugin could not be activated
        BackupError: A vhconf.conf backup failed
    """
    registry = PresetRegistry(config.presets_dir, strict=config.strict_presets)
    preset = registry.load(preset_name)

    try:
        site = Site.from_config(domain, config)
    except ValueError as e:
        raise SiteNotFoundError(domain) from e
    if not site.exists:
        raise SiteNotFoundError(domain)

    wp = wp or WPCLI.from_config(config)
    editor = editor or editor_for(config)

    logger.info("Applying preset %s to %s", preset.name, domain)

    try:
        php = apply_php_settings(site.vhconf_path, preset, editor, config.php_block_marker)
    except ConfigNotFoundError as e:
        logger.warning("%s; skipping PHP settings", e)
        php = ApplyResult(target="php", status=ApplyStatus.SKIPPED, message=str(e))

    lscache = apply_lscache_settings(site, preset, wp, config.lscache_plugin)

    validation = validate_optimization(
        site,
        preset,
        wp,
        editor,
        marker=config.php_block_marker,
        plugin=config.lscache_plugin,
    )

    return OptimizationRun(
        domain=domain,
        preset=preset,
        php=php,
        lscache=lscache,
        validation=validation,
    )
