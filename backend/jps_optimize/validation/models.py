"""
Validation result models.

A ValidationResult is an ordered list of entries, each classified as
OK, WARN, ERROR, or INFO. The aggregate status is the worst entry; INFO
entries are informational and never change it.

Exit codes follow the CLI convention: OK=0, WARN=1, ERROR=2.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ValidationStatus(str, Enum):
    """Classification of one validation entry."""
    OK = "OK"
    WARN = "WARN"
    ERROR = "ERROR"
    INFO = "INFO"


EXIT_CODES = {
    ValidationStatus.OK: 0,
    ValidationStatus.WARN: 1,
    ValidationStatus.ERROR: 2,
}


@dataclass
class ValidationEntry:
    """
    One validation finding.

    Attributes:
        subject: What was checked (e.g. "memory_limit", "lscache", "vhconf")
        status: OK | WARN | ERROR | INFO
        message: Factual explanation
    """
    subject: str
    status: ValidationStatus
    message: str

    def to_line(self) -> str:
        return f"{self.status.value}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "status": self.status.value,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Ordered validation entries for one site and preset."""
    entries: List[ValidationEntry] = field(default_factory=list)

    def add(self, subject: str, status: ValidationStatus, message: str) -> None:
        self.entries.append(ValidationEntry(subject=subject, status=status, message=message))

    @property
    def status(self) -> ValidationStatus:
        """ERROR if any ERROR, else WARN if any WARN, else OK."""
        statuses = {e.status for e in self.entries}
        if ValidationStatus.ERROR in statuses:
            return ValidationStatus.ERROR
        if ValidationStatus.WARN in statuses:
            return ValidationStatus.WARN
        return ValidationStatus.OK

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]

    @property
    def errors(self) -> List[ValidationEntry]:
        return [e for e in self.entries if e.status == ValidationStatus.ERROR]

    @property
    def warnings(self) -> List[ValidationEntry]:
        return [e for e in self.entries if e.status == ValidationStatus.WARN]

    def entries_for(self, subject: str) -> List[ValidationEntry]:
        return [e for e in self.entries if e.subject == subject]

    def lines(self) -> List[str]:
        """Prefixed output lines (OK:/WARN:/ERROR:/INFO:) in order."""
        return [e.to_line() for e in self.entries]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "summary": {
                "total": len(self.entries),
                "errors": len(self.errors),
                "warnings": len(self.warnings),
            },
            "entries": [e.to_dict() for e in self.entries],
        }
