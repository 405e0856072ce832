"""
Report writers: generate JSON and TXT reports on disk.

Writes optimization snapshots in two formats:
- JSON: Machine-readable structured data for archiving and diffing
- TXT: Human-readable summary

All reports written with timestamped filenames to prevent collisions.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict

from .errors import ReportWriteError
from .models import OptimizationReport


def _generate_timestamp() -> str:
    """Generate ISO 8601 timestamp for filenames (e.g., 20251215T143052)."""
    return datetime.now().strftime("%Y%m%dT%H%M%S")


def _report_stem(report: OptimizationReport) -> str:
    return f"optimize_{report.target}_{_generate_timestamp()}"


def render_json(report: OptimizationReport) -> str:
    """Serialize a report to the JSON document format."""
    return json.dumps(report.model_dump(mode="json"), indent=2)


def render_text(report: OptimizationReport) -> str:
    """Render a report as a human-readable summary."""
    lines = [
        "=" * 60,
        "OPTIMIZATION REPORT",
        "=" * 60,
        "",
        f"Site:             {report.target}",
        f"Preset:           {report.preset}",
        f"Timestamp:        {report.timestamp}",
        "",
        "-" * 60,
        "PHP SETTINGS",
        "-" * 60,
    ]
    for key, value in report.settings.items():
        lines.append(f"  {key + ':':<28}{value}")
    lines.extend([
        "",
        "-" * 60,
        "LITESPEED CACHE",
        "-" * 60,
        f"  {'status:':<28}{report.subsystem.status}",
        "=" * 60,
    ])
    return "\n".join(lines) + "\n"


def write_json_report(report: OptimizationReport, output_dir: Path) -> Path:
    """
    Write JSON report with complete structured data.

    Returns path to written JSON file.
    Raises ReportWriteError if write fails.
    """
    filepath = output_dir / f"{_report_stem(report)}.json"

    try:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(render_json(report))
            f.write("\n")
        return filepath

    except OSError as e:
        raise ReportWriteError(f"Failed to write JSON report: {e}", filepath) from e


def write_text_report(report: OptimizationReport, output_dir: Path) -> Path:
    """
    Write human-readable text summary.

    Returns path to written text file.
    Raises ReportWriteError if write fails.
    """
    filepath = output_dir / f"{_report_stem(report)}.txt"

    try:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(render_text(report))
        return filepath

    except OSError as e:
        raise ReportWriteError(f"Failed to write text report: {e}", filepath) from e


def write_reports(report: OptimizationReport, output_dir: Path) -> Dict[str, Path]:
    """
    Write both report formats (JSON, TXT) to output directory.

    Returns:
        Dict mapping format name to written filepath:
        {"json": Path, "txt": Path}

    Raises:
        ReportWriteError: If the directory is unusable or a write fails
    """
    if not output_dir.exists():
        raise ReportWriteError(f"Output directory does not exist: {output_dir}", output_dir)

    if not output_dir.is_dir():
        raise ReportWriteError(f"Output path is not a directory: {output_dir}", output_dir)

    return {
        "json": write_json_report(report, output_dir),
        "txt": write_text_report(report, output_dir),
    }
