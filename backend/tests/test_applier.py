"""
Tests for applying preset sections.

LiteSpeed Cache:
1. Boolean translation and the option table
2. Best-effort per key, one purge at the end
3. Activation failure aborts before any setting
4. Non-WordPress and empty presets call nothing

PHP:
5. Upserts into phpIniOverride, bad keys recorded, backup failure fatal
"""

import subprocess
from unittest.mock import patch

import pytest

from jps_optimize.optimize.applier import (
    LSCACHE_OPTIONS,
    OptionRule,
    apply_lscache_settings,
    apply_php_settings,
    recognized_lscache_settings,
)
from jps_optimize.optimize.errors import EnableFailedError
from jps_optimize.optimize.models import ApplyStatus
from jps_optimize.presets.parser import parse_preset_text
from jps_optimize.vhost.editor import ConfigBlockEditor
from jps_optimize.vhost.errors import BackupError, ConfigNotFoundError

from conftest import FailingBackup, RecordingBackup


FIVE_BOOLEANS = (
    "name: fast\n"
    "lscache:\n"
    "  browser_cache: true\n"
    "  mobile_cache: yes\n"
    "  css_minify: on\n"
    "  js_minify: 1\n"
    "  lazy_load: false\n"
)


def preset(text):
    return parse_preset_text(text)


class TestOptionRule:
    """Preset value to plugin value translation."""

    @pytest.mark.parametrize("raw", ["true", "TRUE", "yes", "on", "1", " true "])
    def test_truthy(self, raw):
        assert OptionRule("cache-browser").translate(raw) == "1"

    @pytest.mark.parametrize("raw", ["false", "no", "off", "0", "maybe"])
    def test_falsy(self, raw):
        assert OptionRule("cache-browser").translate(raw) == "0"

    def test_non_boolean_passthrough(self):
        assert LSCACHE_OPTIONS["ttl_public"].translate("604800") == "604800"


class TestRecognizedSettings:
    """Only mapped, non-empty keys are applied."""

    def test_unknown_and_empty_keys_ignored(self):
        p = preset("name: x\nlscache:\n  browser_cache: true\n  turbo_mode: true\n  webp:\n")

        pending = recognized_lscache_settings(p)

        assert [(o.key, o.target, o.value) for o in pending] == [
            ("browser_cache", "cache-browser", "1"),
        ]

    def test_table_order(self):
        p = preset("name: x\nlscache:\n  webp: true\n  browser_cache: false\n")

        assert [o.key for o in recognized_lscache_settings(p)] == ["browser_cache", "webp"]


class TestApplyLscache:
    """Plugin configuration through WP-CLI."""

    def test_all_keys_applied(self, make_site, wp, runner):
        site = make_site()

        result = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert result.status == ApplyStatus.APPLIED
        assert result.applied_count == 5
        assert result.failed == []
        assert result.purged
        assert runner.count("litespeed-option", "set") == 5
        assert ("litespeed-option", "set", "media-lazy", "0") in runner.commands

    def test_partial_failures_are_not_fatal(self, make_site, wp, runner):
        site = make_site()
        runner.responses[("litespeed-option", "set", "cache-mobile", "1")] = (1, "")
        runner.responses[("litespeed-option", "set", "optm-js_min", "1")] = (
            subprocess.TimeoutExpired(["wp"], 5.0)
        )

        result = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert result.applied_count == 3
        assert [o.key for o in result.failed] == ["mobile_cache", "js_minify"]
        assert all(o.error for o in result.failed)
        assert runner.count("litespeed-option", "set") == 5

    def test_exactly_one_purge_after_settings(self, make_site, wp, runner):
        site = make_site()

        apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert runner.count("litespeed-purge", "all") == 1
        assert runner.commands[-1] == ("litespeed-purge", "all")

    def test_purge_failure_not_counted(self, make_site, wp, runner):
        site = make_site()
        runner.responses[("litespeed-purge", "all")] = (1, "")

        result = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert result.applied_count == 5
        assert not result.purged

    def test_inactive_plugin_activated_once(self, make_site, wp, runner):
        site = make_site()
        runner.responses[("plugin", "is-active", "litespeed-cache")] = (1, "")

        result = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert runner.count("plugin", "activate") == 1
        assert result.applied_count == 5

    def test_activation_failure_aborts(self, make_site, wp, runner):
        site = make_site()
        runner.responses[("plugin", "is-active", "litespeed-cache")] = (1, "")
        runner.responses[("plugin", "activate", "litespeed-cache")] = (1, "")

        with pytest.raises(EnableFailedError) as exc_info:
            apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert exc_info.value.plugin == "litespeed-cache"
        assert runner.count("plugin", "activate") == 1
        assert runner.count("litespeed-option") == 0
        assert runner.count("litespeed-purge") == 0

    def test_not_wordpress(self, make_site, wp, runner):
        site = make_site(wordpress=False)

        result = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp)

        assert result.status == ApplyStatus.NOT_APPLICABLE
        assert runner.calls == []

    def test_empty_preset(self, make_site, wp, runner):
        site = make_site()

        result = apply_lscache_settings(site, preset("name: x\nphp:\n  memory_limit: 1G\n"), wp)

        assert result.status == ApplyStatus.EMPTY_PRESET
        assert result.applied_count == 0
        assert runner.calls == []

    def test_to_dict(self, make_site, wp):
        site = make_site()

        data = apply_lscache_settings(site, preset(FIVE_BOOLEANS), wp).to_dict()

        assert data["status"] == "applied"
        assert data["applied_count"] == 5
        assert data["purged"] is True
        assert len(data["outcomes"]) == 5


class TestApplyPhp:
    """phpIniOverride directives."""

    def test_settings_written(self, make_site):
        site = make_site()
        backup = RecordingBackup()
        editor = ConfigBlockEditor(backup=backup)
        p = preset("name: x\nphp:\n  memory_limit: 512M\n  upload_max_filesize: 64M\n")

        result = apply_php_settings(site.vhconf_path, p, editor)

        assert result.status == ApplyStatus.APPLIED
        assert result.applied_count == 2
        assert len(result.backups) == 2
        assert editor.read(site.vhconf_path, "memory_limit") == "512M"
        assert editor.read(site.vhconf_path, "upload_max_filesize") == "64M"

    def test_unwritable_value_recorded(self, make_site):
        site = make_site()
        editor = ConfigBlockEditor(backup=RecordingBackup())
        p = preset("name: x\nphp:\n  memory_limit: \"{512M}\"\n  max_execution_time: 300\n")

        result = apply_php_settings(site.vhconf_path, p, editor)

        assert result.applied_count == 1
        assert [o.key for o in result.failed] == ["memory_limit"]
        assert editor.read(site.vhconf_path, "memory_limit") == "256M"

    def test_writable_keys_go_through_set_values(self, make_site):
        site = make_site()
        editor = ConfigBlockEditor(backup=RecordingBackup())
        p = preset("name: x\nphp:\n  memory_limit: \"{512M}\"\n  max_execution_time: 300\n  upload_max_filesize: 64M\n")

        with patch.object(editor, "set_values", wraps=editor.set_values) as set_values:
            result = apply_php_settings(site.vhconf_path, p, editor)

        set_values.assert_called_once_with(
            site.vhconf_path,
            "phpIniOverride",
            {"max_execution_time": "300", "upload_max_filesize": "64M"},
        )
        assert [o.applied for o in result.outcomes] == [False, True, True]
        assert len(result.backups) == 2

    def test_all_keys_unwritable_touches_nothing(self, make_site):
        site = make_site()
        backup = RecordingBackup()
        editor = ConfigBlockEditor(backup=backup)

        result = apply_php_settings(site.vhconf_path, preset("name: x\nphp:\n  memory_limit: \"{1G}\"\n"), editor)

        assert result.applied_count == 0
        assert backup.calls == []

    def test_backup_failure_is_fatal(self, make_site):
        site = make_site()
        failing = FailingBackup()
        editor = ConfigBlockEditor(backup=failing)
        p = preset("name: x\nphp:\n  memory_limit: 512M\n  max_execution_time: 300\n")

        with pytest.raises(BackupError):
            apply_php_settings(site.vhconf_path, p, editor)

        assert failing.calls == 1

    def test_missing_vhconf(self, make_site):
        site = make_site(vhconf=None)

        with pytest.raises(ConfigNotFoundError):
            apply_php_settings(site.vhconf_path, preset("name: x\nphp:\n  memory_limit: 1G\n"))

    def test_no_php_section(self, make_site):
        site = make_site()
        backup = RecordingBackup()

        result = apply_php_settings(
            site.vhconf_path,
            preset(FIVE_BOOLEANS),
            ConfigBlockEditor(backup=backup),
        )

        assert result.status == ApplyStatus.EMPTY_PRESET
        assert backup.calls == []
