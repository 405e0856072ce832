"""
Tests for post-apply validation.

Severity policy:
- drifted PHP value -> WARN, matching -> OK
- vhconf.conf or phpIniOverride block missing -> ERROR
- cache plugin active / inactive / missing -> OK / WARN / ERROR
- non-WordPress site -> INFO (never changes the aggregate)
"""

from unittest.mock import patch

import pytest

from jps_optimize.presets.parser import parse_preset_text
from jps_optimize.validation.models import ValidationResult, ValidationStatus
from jps_optimize.validation.validator import validate_optimization
from jps_optimize.vhost.editor import ConfigBlockEditor

from conftest import RecordingBackup


WANT_512M = parse_preset_text("name: woo\nphp:\n  memory_limit: \"512M\"\n")

ONE_BLOCK = "phpIniOverride  {\n  php_value memory_limit 256M\n}\n"


@pytest.fixture
def editor():
    return ConfigBlockEditor(backup=RecordingBackup())


class TestValidationResult:
    """Aggregation rules."""

    def test_empty_is_ok(self):
        result = ValidationResult()
        assert result.status == ValidationStatus.OK
        assert result.exit_code == 0

    def test_worst_entry_wins(self):
        result = ValidationResult()
        result.add("a", ValidationStatus.OK, "fine")
        result.add("b", ValidationStatus.WARN, "drift")
        assert result.exit_code == 1

        result.add("c", ValidationStatus.ERROR, "broken")
        assert result.status == ValidationStatus.ERROR
        assert result.exit_code == 2

    def test_info_ignored(self):
        result = ValidationResult()
        result.add("lscache", ValidationStatus.INFO, "skipped")
        assert result.status == ValidationStatus.OK

    def test_lines_and_dict(self):
        result = ValidationResult()
        result.add("memory_limit", ValidationStatus.WARN, "memory_limit expected 512M, got 256M")

        assert result.lines() == ["WARN: memory_limit expected 512M, got 256M"]
        data = result.to_dict()
        assert data["status"] == "WARN"
        assert data["exit_code"] == 1
        assert data["summary"]["warnings"] == 1


class TestPhpValidation:
    """vhconf.conf against the preset's php section."""

    def test_drift_is_single_warning(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf=ONE_BLOCK)

        result = validate_optimization(site, WANT_512M, wp, editor)

        warnings = result.entries_for("memory_limit")
        assert len(warnings) == 1
        assert warnings[0].status == ValidationStatus.WARN
        assert warnings[0].message == "memory_limit expected 512M, got 256M"
        assert len(result.warnings) == 1
        assert result.status == ValidationStatus.WARN

    def test_drift_with_active_cache(self, make_site, wp, editor):
        site = make_site(wordpress=True, vhconf=ONE_BLOCK)

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert [e.status for e in result.entries] == [ValidationStatus.WARN, ValidationStatus.OK]
        assert result.status == ValidationStatus.WARN
        assert result.exit_code == 1

    def test_matching_value(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf=ONE_BLOCK.replace("256M", "512M"))

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.lines()[0] == "OK: memory_limit = 512M"
        assert result.status == ValidationStatus.OK

    def test_unset_key(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf="phpIniOverride  {\n}\n")

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.lines()[0] == "WARN: memory_limit expected 512M, got 'not set'"

    def test_missing_vhconf(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf=None)

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert len(result.errors) >= 1
        assert result.errors[0].message == "vhconf.conf not found"
        assert result.exit_code == 2

    def test_missing_block(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf="docRoot $VH_ROOT/html/\n")

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert [e.message for e in result.errors] == ["phpIniOverride block not found in vhconf.conf"]
        assert result.entries_for("memory_limit") == []

    def test_block_and_values_read_through_editor(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf=ONE_BLOCK)

        with patch.object(editor, "has_block", wraps=editor.has_block) as has_block, \
                patch.object(editor, "snapshot", wraps=editor.snapshot) as snapshot:
            result = validate_optimization(site, WANT_512M, wp, editor)

        has_block.assert_called_once_with(site.vhconf_path, "phpIniOverride")
        snapshot.assert_called_once_with(site.vhconf_path, ["memory_limit"])
        assert result.lines()[0] == "WARN: memory_limit expected 512M, got 256M"

    def test_no_php_section(self, make_site, wp, editor):
        site = make_site(wordpress=False, vhconf="docRoot $VH_ROOT/html/\n")
        lscache_only = parse_preset_text("name: x\nlscache:\n  webp: true\n")

        result = validate_optimization(site, lscache_only, wp, editor)

        assert result.status == ValidationStatus.OK

    def test_nothing_written(self, make_site, wp, editor):
        site = make_site(wordpress=True, vhconf=ONE_BLOCK)

        validate_optimization(site, WANT_512M, wp, editor)

        assert site.vhconf_path.read_text() == ONE_BLOCK
        assert editor.backup.calls == []


class TestLscacheValidation:
    """Plugin state classification."""

    MATCHING = ONE_BLOCK.replace("256M", "512M")

    def test_inactive_warns(self, make_site, wp, runner, editor):
        site = make_site(vhconf=self.MATCHING)
        runner.responses[("plugin", "is-active", "litespeed-cache")] = (1, "")

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.entries_for("lscache")[0].status == ValidationStatus.WARN
        assert result.exit_code == 1

    def test_not_installed_errors(self, make_site, wp, runner, editor):
        site = make_site(vhconf=self.MATCHING)
        runner.responses[("plugin", "is-installed", "litespeed-cache")] = (1, "")

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.entries_for("lscache")[0].message == "LiteSpeed Cache is not installed"
        assert result.exit_code == 2

    def test_unreachable_errors(self, make_site, wp, runner, editor):
        site = make_site(vhconf=self.MATCHING)
        runner.responses[("plugin", "is-installed", "litespeed-cache")] = OSError("no such file")

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.entries_for("lscache")[0].status == ValidationStatus.ERROR

    def test_read_only_calls(self, make_site, wp, runner, editor):
        site = make_site(vhconf=self.MATCHING)

        validate_optimization(site, WANT_512M, wp, editor)

        assert {c[:2] for c in runner.commands} <= {("plugin", "is-installed"), ("plugin", "is-active")}

    def test_not_wordpress_is_info(self, make_site, wp, runner, editor):
        site = make_site(wordpress=False, vhconf=self.MATCHING)

        result = validate_optimization(site, WANT_512M, wp, editor)

        assert result.entries_for("lscache")[0].status == ValidationStatus.INFO
        assert result.status == ValidationStatus.OK
        assert runner.calls == []
