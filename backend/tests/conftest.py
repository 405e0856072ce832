"""
Shared fixtures for jps_optimize tests.

Sites, vhost files and presets are laid out under tmp_path. WP-CLI is
never executed: WPCLI instances get a FakeRunner that records commands
and answers from a response table.
"""

import subprocess
from pathlib import Path

import pytest

from jps_optimize.config import ToolsConfig
from jps_optimize.sites import Site
from jps_optimize.vhost.errors import BackupError
from jps_optimize.wpcli.client import WPCLI


WP_BINARY = Path("/usr/local/bin/wp")

VHCONF_TEXT = (
    "docRoot                   $VH_ROOT/html/\n"
    "enableGzip                1\n"
    "\n"
    "# PHP overrides\n"
    "phpIniOverride  {\n"
    "  php_value memory_limit 256M\n"
    "  php_value max_execution_time 60\n"
    "}\n"
    "\n"
    "context /wp-admin/ {\n"
    "  allowBrowse 1\n"
    "}\n"
)

WOO_PRESET = (
    "name: woo\n"
    "description: \"WooCommerce stores\"\n"
    "\n"
    "php:\n"
    "  memory_limit: \"512M\"\n"
    "  max_execution_time: \"300\"\n"
    "\n"
    "lscache:\n"
    "  browser_cache: true\n"
    "  css_minify: yes\n"
    "  js_combine: false\n"
)


class FakeRunner:
    """
    subprocess.run stand-in for WPCLI.

    responses maps the WP-CLI arguments (without binary, --path and
    --allow-root) to (returncode, stdout) or to an exception to raise.
    Unlisted calls succeed with empty output.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((list(command), kwargs))
        args = self.strip(command)
        response = self.responses.get(args, (0, ""))
        if isinstance(response, Exception):
            raise response
        returncode, stdout = response
        return subprocess.CompletedProcess(
            command,
            returncode,
            stdout=stdout,
            stderr="" if returncode == 0 else "Error: call failed",
        )

    @staticmethod
    def strip(command):
        return tuple(
            a for a in command[1:]
            if not a.startswith("--path=") and a != "--allow-root"
        )

    @property
    def commands(self):
        """WP-CLI argument tuples in call order."""
        return [self.strip(command) for command, _ in self.calls]

    def count(self, *prefix):
        return sum(1 for c in self.commands if c[:len(prefix)] == prefix)


class RecordingBackup:
    """Backup strategy that records calls without copying anything."""

    def __init__(self):
        self.calls = []

    def create(self, path):
        self.calls.append(Path(path))
        return Path(f"{path}.bak.{len(self.calls)}")


class FailingBackup:
    """Backup strategy that always fails."""

    def __init__(self):
        self.calls = 0

    def create(self, path):
        self.calls += 1
        raise BackupError(Path(path), "disk full")


@pytest.fixture
def config(tmp_path):
    """ToolsConfig rooted entirely under tmp_path."""
    return ToolsConfig(
        install_dir=tmp_path / "jps",
        presets_dir=tmp_path / "presets",
        websites_root=tmp_path / "websites",
        vhosts_dir=tmp_path / "vhosts",
        log_dir=tmp_path / "logs",
        wp_cli_path=WP_BINARY,
        allow_root=False,
    )


@pytest.fixture
def presets_dir(config):
    """Presets directory holding woo.yaml."""
    config.presets_dir.mkdir(parents=True)
    (config.presets_dir / "woo.yaml").write_text(WOO_PRESET)
    return config.presets_dir


@pytest.fixture
def make_site(config):
    """
    Factory: make_site(domain, wordpress=True, vhconf=VHCONF_TEXT).

    Pass vhconf=None to leave the site without a vhconf.conf.
    """
    def _make(domain="example.com", wordpress=True, vhconf=VHCONF_TEXT):
        site = Site.from_config(domain, config)
        site.html_path.mkdir(parents=True)
        if wordpress:
            (site.html_path / "wp-config.php").write_text("<?php\n")
        if vhconf is not None:
            site.vhconf_path.parent.mkdir(parents=True, exist_ok=True)
            with open(site.vhconf_path, "w", newline="") as f:
                f.write(vhconf)
        return site

    return _make


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def wp(runner):
    return WPCLI(binary=WP_BINARY, timeout=5.0, allow_root=False, runner=runner)
