"""
Read-only optimization endpoints.

Exposes preset listing, site validation, and settings snapshots as JSON
for dashboards. Applying presets is CLI-only; nothing here writes.

Configuration comes from app.state.config (see jps_optimize.main).
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..config import ToolsConfig
from ..optimize.service import editor_for
from ..presets.errors import PresetDirectoryNotFoundError, PresetError
from ..presets.registry import PresetRegistry
from ..reporting.snapshot import generate_report
from ..sites import Site
from ..validation.validator import validate_optimization
from ..wpcli.client import WPCLI


router = APIRouter()


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": message})


def _resolve_site(domain: str, config: ToolsConfig):
    try:
        site = Site.from_config(domain, config)
    except ValueError:
        return None
    return site if site.exists else None


@router.get("/api/presets")
def list_presets(request: Request):
    """
    List valid presets.

    Example Response:
        {
            "presets": [
                {"name": "woo", "description": "WooCommerce stores", "path": "..."}
            ]
        }
    """
    config: ToolsConfig = request.app.state.config
    registry = PresetRegistry(config.presets_dir, strict=config.strict_presets)
    try:
        presets = registry.list_presets()
    except PresetDirectoryNotFoundError as e:
        return _not_found(str(e))
    return JSONResponse(content={"presets": [p.to_dict() for p in presets]})


@router.get("/api/sites/{domain}/validation")
def get_validation(domain: str, preset: str, request: Request):
    """
    Validate a site against a preset.

    Returns the aggregate status, exit code, and every entry.
    """
    config: ToolsConfig = request.app.state.config
    registry = PresetRegistry(config.presets_dir, strict=config.strict_presets)
    try:
        loaded = registry.load(preset)
    except PresetError as e:
        return _not_found(str(e))

    site = _resolve_site(domain, config)
    if site is None:
        return _not_found(f"Site not found: {domain}")

    result = validate_optimization(
        site,
        loaded,
        WPCLI.from_config(config),
        editor_for(config),
        marker=config.php_block_marker,
        plugin=config.lscache_plugin,
    )
    return JSONResponse(content=result.to_dict())


@router.get("/api/sites/{domain}/report")
def get_report(domain: str, request: Request, preset: Optional[str] = None):
    """Snapshot a site's current settings."""
    config: ToolsConfig = request.app.state.config
    site = _resolve_site(domain, config)
    if site is None:
        return _not_found(f"Site not found: {domain}")

    report = generate_report(
        site,
        preset,
        WPCLI.from_config(config),
        editor_for(config),
        plugin=config.lscache_plugin,
    )
    return JSONResponse(content=report.model_dump(mode="json"))
