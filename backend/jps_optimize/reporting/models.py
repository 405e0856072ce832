"""
Immutable report data models.

A report is a point-in-time snapshot of a site's optimization state.
It carries no pass/fail judgement; see jps_optimize.validation for that.
"""

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_SETTING = "default"
NOT_APPLICABLE = "n/a"
UNKNOWN_PRESET = "unknown"


def _now_iso() -> str:
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


class SubsystemReport(BaseModel):
    """Cache plugin state at snapshot time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: str = NOT_APPLICABLE


class OptimizationReport(BaseModel):
    """
    Snapshot of a site's current settings.

    Fields are fixed: target, preset, timestamp, settings, subsystem.
    Unreadable settings hold "default"; the subsystem status is "n/a"
    for non-WordPress sites.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str
    preset: str = UNKNOWN_PRESET
    timestamp: str = Field(default_factory=_now_iso)
    settings: Dict[str, str] = Field(default_factory=dict)
    subsystem: SubsystemReport = Field(default_factory=SubsystemReport)
