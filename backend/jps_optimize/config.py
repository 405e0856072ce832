"""
ToolsConfig: explicit configuration for the optimization engine.

One ToolsConfig is built per invocation and passed to every operation
that needs a path or a collaborator setting. Nothing reads process-wide
variables after load_config() returns.

Sources, in increasing precedence:
1. Built-in defaults (standard OpenLiteSpeed + JPS layout)
2. Shell-style config file (jps-tools.conf, KEY="value" lines)
3. Environment variables
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


DEFAULT_INSTALL_DIR = Path("/opt/jps-server-tools")
DEFAULT_CONFIG_FILE = DEFAULT_INSTALL_DIR / "config" / "jps-tools.conf"

# Config file / environment key -> ToolsConfig field
ENV_FIELDS: Dict[str, str] = {
    "JPS_INSTALL_DIR": "install_dir",
    "JPS_PRESETS_DIR": "presets_dir",
    "WEBSITES_ROOT": "websites_root",
    "VHOSTS_DIR": "vhosts_dir",
    "LOG_DIR": "log_dir",
    "WP_CLI_PATH": "wp_cli_path",
    "WP_CLI_TIMEOUT": "wp_cli_timeout",
}


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""
    pass


class ToolsConfig(BaseModel):
    """
    Immutable configuration for one invocation.

    Paths default to the standard server layout. presets_dir and log_dir
    follow install_dir unless set explicitly.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    install_dir: Path = DEFAULT_INSTALL_DIR
    presets_dir: Path
    websites_root: Path = Path("/usr/local/websites")
    vhosts_dir: Path = Path("/usr/local/lsws/conf/vhosts")
    log_dir: Path

    # WP-CLI collaborator
    wp_cli_path: Optional[Path] = None
    wp_cli_timeout: float = Field(default=60.0, gt=0)
    allow_root: Optional[bool] = None  # None = add --allow-root when euid is 0
    lscache_plugin: str = "litespeed-cache"

    # vhconf.conf layout
    php_block_marker: str = "phpIniOverride"
    php_directive: str = "php_value"

    # Preset parsing
    strict_presets: bool = True

    @field_validator("php_block_marker", "php_directive", "lscache_plugin")
    @classmethod
    def validate_token(cls, v: str) -> str:
        """Markers and names are single non-empty tokens."""
        if not v or not v.strip() or len(v.split()) != 1:
            raise ValueError("must be a single non-empty token")
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_derived_paths(cls, data: Any) -> Any:
        """Derive presets_dir and log_dir from install_dir when unset."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        install_dir = Path(data.get("install_dir") or DEFAULT_INSTALL_DIR)
        if data.get("presets_dir") is None:
            data["presets_dir"] = install_dir / "config" / "presets"
        if data.get("log_dir") is None:
            data["log_dir"] = install_dir / "logs"
        return data

    def site_root(self, domain: str) -> Path:
        """Directory holding a site (<websites_root>/<domain>)."""
        return self.websites_root / domain

    def vhconf_path(self, domain: str) -> Path:
        """OpenLiteSpeed vhost file for a site."""
        return self.vhosts_dir / domain / "vhconf.conf"


def read_config_file(config_file: Path) -> Dict[str, str]:
    """
    Read KEY="value" assignments from a shell-style config file.

    Comments, blank lines, and anything that is not a plain assignment
    (function definitions, exports of expressions) are ignored.

    Args:
        config_file: Path to jps-tools.conf

    Returns:
        Mapping of variable name to unquoted value
    """
    values: Dict[str, str] = {}
    with open(config_file, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            name, sep, rest = line.partition("=")
            if not sep or not name.isidentifier():
                continue
            try:
                parts = shlex.split(rest, comments=True)
            except ValueError:
                logger.debug("Ignoring unparsable config line: %s", line)
                continue
            values[name] = parts[0] if parts else ""
    return values


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ToolsConfig:
    """
    Build a ToolsConfig from defaults, config file, and environment.

    A missing config file is not an error: defaults are used, matching
    how the server tools behave before the installer has run.

    Args:
        config_file: Explicit config file (default: $JPS_CONFIG_FILE or
            /opt/jps-server-tools/config/jps-tools.conf)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated ToolsConfig

    Raises:
        ConfigError: If a value fails validation
    """
    env = os.environ if environ is None else environ

    if config_file is None:
        config_file = Path(env.get("JPS_CONFIG_FILE", str(DEFAULT_CONFIG_FILE)))

    raw: Dict[str, str] = {}
    if config_file.is_file():
        raw.update(read_config_file(config_file))
        logger.debug("Loaded config from: %s", config_file)
    else:
        logger.debug("Config file not found, using defaults: %s", config_file)

    for key in ENV_FIELDS:
        if env.get(key):
            raw[key] = env[key]

    fields = {ENV_FIELDS[k]: v for k, v in raw.items() if k in ENV_FIELDS and v != ""}

    try:
        return ToolsConfig(**fields)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
