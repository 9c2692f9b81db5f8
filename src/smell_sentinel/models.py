"""Finding and report model shared by every detector.

Findings are immutable value objects. They carry their own location so the
source tree they were derived from can be dropped as soon as the detectors
for a file have run.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .scanning.syntax import Span

# Process exit status contract
EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


class Severity(str, Enum):
    """Finding severity, ordered info < warning < error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: Severity) -> bool:
        """True when this severity meets or exceeds ``other``."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: Any) -> Severity:
        """Coerce a string (case-insensitive) or Severity into a Severity.

        Raises:
            ValueError: If the value names no severity
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown severity {value!r}, expected one of: {choices}")


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


@dataclass(frozen=True)
class Location:
    """A source range. Lines and columns are 1-based."""

    file: str
    line: int
    end_line: int
    column: int = 1
    end_column: int = 1

    @classmethod
    def from_span(cls, file: str, span: Span) -> Location:
        return cls(
            file=file,
            line=span.line,
            end_line=span.end_line,
            column=span.column,
            end_column=span.end_column,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "end_line": self.end_line,
            "column": self.column,
            "end_column": self.end_column,
        }


@dataclass(frozen=True)
class Finding:
    """One reported instance of a detected code smell.

    Attributes:
        rule_id: Registered rule identifier (see ``rules.RULES``)
        severity: Effective severity after configuration overrides
        location: Where the smell is reported
        message: Human-readable description
        suggested_fix: Optional remediation hint
        related: Supporting evidence locations, e.g. every occurrence
            of a repeated call chain
    """

    rule_id: str
    severity: Severity
    location: Location
    message: str
    suggested_fix: Optional[str] = None
    related: tuple[Location, ...] = ()

    @property
    def is_internal(self) -> bool:
        return self.rule_id.startswith("internal/")

    def to_dict(self) -> dict[str, Any]:
        """Flat record used by the structured (JSON) output."""
        record = self.location.to_dict()
        record.update(
            {
                "rule_id": self.rule_id,
                "severity": self.severity.value,
                "message": self.message,
                "suggested_fix": self.suggested_fix,
                "related": [loc.to_dict() for loc in self.related],
            }
        )
        return record


@dataclass
class AnalysisResult:
    """Aggregated outcome of one analysis run."""

    findings: list[Finding] = field(default_factory=list)
    files_analyzed: int = 0
    files_failed: int = 0
    cancelled: bool = False

    def exit_code(self, min_severity: Severity = Severity.WARNING) -> int:
        """Process status: 0 when nothing reaches ``min_severity``, 1 otherwise."""
        if self.cancelled:
            return EXIT_INTERRUPTED
        if any(f.severity.at_least(min_severity) for f in self.findings):
            return EXIT_FINDINGS
        return EXIT_CLEAN

    def counts_by_severity(self) -> dict[str, int]:
        counts = Counter(f.severity.value for f in self.findings)
        return {s.value: counts.get(s.value, 0) for s in Severity}

    def counts_by_rule(self) -> dict[str, int]:
        return dict(Counter(f.rule_id for f in self.findings))
