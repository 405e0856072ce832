"""
Reporting for site optimization state.

Generate machine-readable and human-readable snapshots of a site's
current settings. Observational only.
"""

from .errors import ReportingError, ReportWriteError
from .models import OptimizationReport, SubsystemReport
from .snapshot import generate_report, REPORT_PHP_KEYS
from .writers import write_reports, write_json_report, write_text_report, render_json, render_text

__all__ = [
    "ReportingError",
    "ReportWriteError",
    "OptimizationReport",
    "SubsystemReport",
    "generate_report",
    "REPORT_PHP_KEYS",
    "write_reports",
    "write_json_report",
    "write_text_report",
    "render_json",
    "render_text",
]
