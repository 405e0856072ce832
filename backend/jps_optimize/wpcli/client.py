"""
WP-CLI collaborator.

All access to the live WordPress install goes through the `wp`
command-line tool:

    wp --path=<site> [--allow-root] <subcommand> <args...>

Every call is a blocking subprocess with a bounded timeout. A failed or
timed-out call raises WPCLIError for that call only.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from ..config import ToolsConfig
from .errors import WPCLIError, WPCLINotFoundError, WPCLITimeoutError

logger = logging.getLogger(__name__)


# Searched in order before falling back to PATH
WP_CLI_CANDIDATES = [
    Path("/usr/local/bin/wp"),
    Path("/usr/bin/wp"),
    Path.home() / ".wp-cli" / "bin" / "wp",
    Path("/opt/wp-cli/wp"),
]


class PluginStatus(str, Enum):
    """State of a plugin as seen through WP-CLI."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    NOT_INSTALLED = "not_installed"
    UNREACHABLE = "unreachable"


@dataclass
class WPCLIResult:
    """Outcome of one WP-CLI invocation."""
    args: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def find_wp_cli() -> Optional[Path]:
    """Locate the wp binary (known install paths, then PATH)."""
    for candidate in WP_CLI_CANDIDATES:
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    found = shutil.which("wp")
    return Path(found) if found else None


def _running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


class WPCLI:
    """
    Thin wrapper around the wp binary.

    Args:
        binary: wp executable (default: discovered on first call)
        timeout: Seconds before a call is killed
        allow_root: Pass --allow-root (default: when running as root)
        runner: subprocess.run-compatible callable, injectable for tests
    """

    def __init__(
        self,
        binary: Optional[Path] = None,
        timeout: float = 60.0,
        allow_root: Optional[bool] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self._binary = binary
        self.timeout = timeout
        self.allow_root = _running_as_root() if allow_root is None else allow_root
        self.runner = runner

    @classmethod
    def from_config(cls, config: ToolsConfig) -> "WPCLI":
        return cls(
            binary=config.wp_cli_path,
            timeout=config.wp_cli_timeout,
            allow_root=config.allow_root,
        )

    @property
    def binary(self) -> Path:
        """
        Resolved wp executable.

        Raises:
            WPCLINotFoundError: If no binary can be found
        """
        if self._binary is None:
            self._binary = find_wp_cli()
            if self._binary is None:
                raise WPCLINotFoundError()
        return self._binary

    def build_command(self, site_path: Path, args: List[str]) -> List[str]:
        command = [str(self.binary), f"--path={site_path}"]
        if self.allow_root:
            command.append("--allow-root")
        command.extend(args)
        return command

    def run(self, site_path: Path, *args: str, check: bool = True) -> WPCLIResult:
        """
        Run one WP-CLI command against a site.

        Args:
            site_path: WordPress document root
            *args: Subcommand and arguments
            check: Raise WPCLIError on non-zero exit

        Returns:
            WPCLIResult with captured output

        Raises:
            WPCLINotFoundError: No wp binary
            WPCLITimeoutError: Call exceeded the timeout
            WPCLIError: Could not execute, or non-zero exit with check=True
        """
        command = self.build_command(site_path, list(args))
        logger.debug("Running: %s", " ".join(command))

        try:
            completed = self.runner(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise WPCLITimeoutError(command, self.timeout)
        except OSError as e:
            raise WPCLIError(f"Failed to run WP-CLI: {e}", args=command)

        result = WPCLIResult(
            args=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if check and not result.ok:
            raise WPCLIError(
                f"wp {' '.join(args)} exited with code {result.returncode}",
                args=command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result

    # -------------------------------------------------------------------------
    # Plugins
    # -------------------------------------------------------------------------

    def plugin_is_installed(self, site_path: Path, plugin: str) -> bool:
        return self.run(site_path, "plugin", "is-installed", plugin, check=False).ok

    def plugin_is_active(self, site_path: Path, plugin: str) -> bool:
        return self.run(site_path, "plugin", "is-active", plugin, check=False).ok

    def activate_plugin(self, site_path: Path, plugin: str) -> None:
        self.run(site_path, "plugin", "activate", plugin)

    def plugin_status(self, site_path: Path, plugin: str) -> PluginStatus:
        """
        Classify a plugin as active, inactive, not installed, or unreachable.

        Never raises: any WP-CLI failure is reported as UNREACHABLE.
        """
        try:
            if not self.plugin_is_installed(site_path, plugin):
                return PluginStatus.NOT_INSTALLED
            if self.plugin_is_active(site_path, plugin):
                return PluginStatus.ACTIVE
            return PluginStatus.INACTIVE
        except WPCLIError as e:
            logger.warning("Cannot query plugin %s at %s: %s", plugin, site_path, e)
            return PluginStatus.UNREACHABLE


class LiteSpeedCache:
    """
    LiteSpeed Cache plugin operations for one site.

    Args:
        wp: WP-CLI wrapper
        site_path: WordPress document root
        plugin: Plugin slug
    """

    def __init__(self, wp: WPCLI, site_path: Path, plugin: str = "litespeed-cache"):
        self.wp = wp
        self.site_path = site_path
        self.plugin = plugin

    def status(self) -> PluginStatus:
        return self.wp.plugin_status(self.site_path, self.plugin)

    def is_active(self) -> bool:
        return self.wp.plugin_is_active(self.site_path, self.plugin)

    def activate(self) -> None:
        self.wp.activate_plugin(self.site_path, self.plugin)

    def set_option(self, name: str, value: str) -> None:
        self.wp.run(self.site_path, "litespeed-option", "set", name, value)

    def purge_all(self) -> None:
        self.wp.run(self.site_path, "litespeed-purge", "all")
