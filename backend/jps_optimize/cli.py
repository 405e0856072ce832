#!/usr/bin/env python3
"""
jps-optimize CLI - Thin entrypoint for operator commands.

Commands:
- presets:  List available optimization presets
- show:     Show the settings of one preset
- apply:    Apply a preset to a site, then validate
- validate: Check a site against a preset (no changes)
- report:   Snapshot a site's current settings

Design Principles:
==================
- CLI is a dispatcher only
- No optimization logic inside CLI
- Surface errors verbatim from the engine
- No interactive prompts
- No retry logic

Exit Codes:
===========
- 0: Success / all checks OK
- 1: Warnings (drift, inactive plugin)
- 2: Errors (validation ERROR, apply failure)
- 4: System error (preset, site, directory or config not found)
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from .config import ConfigError, ToolsConfig, load_config
from .optimize.errors import EnableFailedError, SiteNotFoundError
from .optimize.service import editor_for, optimize_site
from .presets.errors import PresetError
from .presets.registry import PresetRegistry
from .reporting.errors import ReportWriteError
from .reporting.snapshot import generate_report
from .reporting.writers import render_json, render_text, write_reports
from .sites import Site
from .validation.validator import validate_optimization
from .vhost.errors import BackupError
from .wpcli.client import WPCLI

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WARN = 1
EXIT_ERROR = 2
EXIT_SYSTEM = 4

LOG_FILENAME = "jps-optimize.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: ToolsConfig, verbose: bool = False) -> None:
    """
    Console logging to stderr plus a log file under config.log_dir.

    The log file is skipped (with a warning) when the directory cannot
    be created or written.
    """
    debug = verbose or os.environ.get("DEBUG") == "1"

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    handlers: List[logging.Handler] = [console]

    file_error = None
    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_dir / LOG_FILENAME, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)
    except OSError as e:
        file_error = e

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=handlers,
        force=True,
    )

    if file_error is not None:
        logger.warning("Cannot write log file in %s: %s", config.log_dir, file_error)


def _fail(message: str, code: int = EXIT_SYSTEM) -> NoReturn:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(code)


def _site_or_exit(domain: str, config: ToolsConfig) -> Site:
    try:
        site = Site.from_config(domain, config)
    except ValueError as e:
        _fail(str(e))
    if not site.exists:
        _fail(f"Site not found: {domain} ({site.root})")
    return site


def _load_preset_or_exit(name: str, config: ToolsConfig):
    registry = PresetRegistry(config.presets_dir, strict=config.strict_presets)
    try:
        return registry.load(name)
    except PresetError as e:
        _fail(str(e))


def cmd_presets(args: argparse.Namespace, config: ToolsConfig) -> NoReturn:
    """
    List available presets.

    Exit codes:
        0: Listed (possibly empty)
        4: Presets directory not found
    """
    registry = PresetRegistry(config.presets_dir, strict=config.strict_presets)
    try:
        presets = registry.list_presets()
    except PresetError as e:
        _fail(str(e))

    if args.json:
        print(json.dumps([p.to_dict() for p in presets], indent=2))
    else:
        for preset in presets:
            print(f"{preset.name:<12}  {preset.description}")
    sys.exit(EXIT_OK)


def cmd_show(args: argparse.Namespace, config: ToolsConfig) -> NoReturn:
    """Print the settings of one preset."""
    preset = _load_preset_or_exit(args.preset, config)

    if args.json:
        print(json.dumps(preset.model_dump(mode="json"), indent=2))
        sys.exit(EXIT_OK)

    print(f"Preset:      {preset.name}")
    print(f"Description: {preset.description or 'No description'}")
    for section, values in preset.sections.items():
        print(f"\n[{section}]")
        for key, value in values.items():
            print(f"  {key:<24} {value}")
    sys.exit(EXIT_OK)


def cmd_apply(args: argparse.Namespace, config: ToolsConfig) -> NoReturn:
    """
    Apply a preset to a site and validate the result.

    Exit codes:
        0: Applied, validation OK
        1: Applied, validation warnings
        2: Validation errors, plugin activation or backup failure
        4: Preset or site not found
    """
    try:
        run = optimize_site(args.domain, args.preset, config)
    except PresetError as e:
        _fail(str(e))
    except SiteNotFoundError as e:
        _fail(str(e))
    except (EnableFailedError, BackupError) as e:
        _fail(str(e), EXIT_ERROR)

    if args.json:
        print(json.dumps(run.to_dict(), indent=2))
    else:
        print(f"PHP:     {run.php.status.value} ({run.php.applied_count} applied)")
        for outcome in run.php.failed:
            print(f"  failed: {outcome.key} ({outcome.error})")
        print(f"LSCache: {run.lscache.status.value} ({run.lscache.applied_count} applied)")
        for outcome in run.lscache.failed:
            print(f"  failed: {outcome.key} -> {outcome.target} ({outcome.error})")
        print("")
        for line in run.validation.lines():
            print(line)
    sys.exit(run.validation.exit_code)


def cmd_validate(args: argparse.Namespace, config: ToolsConfig) -> NoReturn:
    """
    Validate a site against a preset without changing anything.

    Exit codes:
        0: All checks OK
        1: Warnings
        2: Errors
        4: Preset or site not found
    """
    preset = _load_preset_or_exit(args.preset, config)
    site = _site_or_exit(args.domain, config)

    result = validate_optimization(
        site,
        preset,
        WPCLI.from_config(config),
        editor_for(config),
        marker=config.php_block_marker,
        plugin=config.lscache_plugin,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for line in result.lines():
            print(line)
    sys.exit(result.exit_code)


def cmd_report(args: argparse.Namespace, config: ToolsConfig) -> NoReturn:
    """
    Snapshot a site's current settings.

    Prints JSON (default) or text; with --output-dir writes both formats.
    """
    site = _site_or_exit(args.domain, config)

    extra_keys: List[str] = []
    if args.preset:
        extra_keys = _load_preset_or_exit(args.preset, config).list_keys("php")

    report = generate_report(
        site,
        args.preset,
        WPCLI.from_config(config),
        editor_for(config),
        extra_keys=extra_keys,
        plugin=config.lscache_plugin,
    )

    if args.output_dir:
        try:
            paths = write_reports(report, Path(args.output_dir))
        except ReportWriteError as e:
            _fail(str(e))
        for fmt, path in paths.items():
            print(f"{fmt}: {path}")
    elif args.format == "text":
        print(render_text(report), end="")
    else:
        print(render_json(report))
    sys.exit(EXIT_OK)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jps-optimize",
        description="Apply and verify site optimization presets",
    )
    parser.add_argument("--config", help="Path to jps-tools.conf")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to execute")

    parser_presets = subparsers.add_parser("presets", help="List available presets")
    parser_presets.add_argument("--json", action="store_true", help="JSON output")
    parser_presets.set_defaults(func=cmd_presets)

    parser_show = subparsers.add_parser("show", help="Show a preset's settings")
    parser_show.add_argument("preset", help="Preset name")
    parser_show.add_argument("--json", action="store_true", help="JSON output")
    parser_show.set_defaults(func=cmd_show)

    parser_apply = subparsers.add_parser("apply", help="Apply a preset to a site")
    parser_apply.add_argument("domain", help="Site domain")
    parser_apply.add_argument("preset", help="Preset name")
    parser_apply.add_argument("--json", action="store_true", help="JSON output")
    parser_apply.set_defaults(func=cmd_apply)

    parser_validate = subparsers.add_parser("validate", help="Validate a site against a preset")
    parser_validate.add_argument("domain", help="Site domain")
    parser_validate.add_argument("preset", help="Preset name")
    parser_validate.add_argument("--json", action="store_true", help="JSON output")
    parser_validate.set_defaults(func=cmd_validate)

    parser_report = subparsers.add_parser("report", help="Snapshot a site's current settings")
    parser_report.add_argument("domain", help="Site domain")
    parser_report.add_argument("--preset", help="Preset name recorded in the report")
    parser_report.add_argument("--output-dir", help="Write JSON and TXT reports here")
    parser_report.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Output format when printing (default: json)",
    )
    parser_report.set_defaults(func=cmd_report)

    return parser


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """
    Main CLI entrypoint.

    Parses arguments, loads configuration, and dispatches to subcommands.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
    except (ConfigError, OSError) as e:
        _fail(str(e))

    configure_logging(config, args.verbose)
    args.func(args, config)


if __name__ == "__main__":
    main()
