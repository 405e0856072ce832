"""
Apply outcomes.

Best-effort application is modelled as one SettingOutcome per key, so
callers can see which settings failed and why, not only how many.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ApplyStatus(str, Enum):
    """Overall outcome of applying one preset section."""
    APPLIED = "applied"
    EMPTY_PRESET = "empty_preset"  # warning: nothing in the preset maps to this target
    NOT_APPLICABLE = "not_applicable"  # target absent, step skipped
    SKIPPED = "skipped"  # config file absent, step skipped


@dataclass
class SettingOutcome:
    """
    Result of applying one preset key.

    Attributes:
        key: Preset key (e.g. "browser_cache")
        target: Name written on the target (option or directive name)
        value: Value sent to the target
        applied: True if the call succeeded
        error: Failure message when not applied
    """
    key: str
    target: str
    value: str
    applied: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "key": self.key,
            "target": self.target,
            "value": self.value,
            "applied": self.applied,
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class ApplyResult:
    """
    Outcome of applying one section of a preset to one target.

    Attributes:
        target: "php" or "lscache"
        status: Overall status
        outcomes: One entry per recognized key, in application order
        purged: Whether the post-apply cache purge succeeded (lscache only)
        message: Explanation for skipped/not-applicable results
    """
    target: str
    status: ApplyStatus
    outcomes: List[SettingOutcome] = field(default_factory=list)
    purged: bool = False
    message: Optional[str] = None
    backups: List[Path] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return sum(1 for o in self.outcomes if o.applied)

    @property
    def failed(self) -> List[SettingOutcome]:
        return [o for o in self.outcomes if not o.applied]

    def to_dict(self) -> dict:
        result = {
            "target": self.target,
            "status": self.status.value,
            "applied_count": self.applied_count,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
        if self.target == "lscache":
            result["purged"] = self.purged
        if self.message:
            result["message"] = self.message
        return result
