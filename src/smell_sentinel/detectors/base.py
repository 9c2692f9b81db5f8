"""Detector protocols and the context shared by every detector run."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from ..config import DEFAULT_SIDE_EFFECT_SELECTORS
from ..models import Finding, Location, Severity
from ..rules import RULES_BY_ID

if TYPE_CHECKING:
    from ..config import AnalysisConfig
    from ..scanning.syntax import SourceUnit, Span


@dataclass(frozen=True)
class DetectorContext:
    """Read-only settings detectors need. Safe to share across threads.

    Attributes:
        severities: Effective severity per rule id
        side_effect_selectors: Selectors ignored when comparing branches
        mutator_prefixes: Selector prefixes that mark a setter
    """

    severities: Mapping[str, Severity] = field(default_factory=dict)
    side_effect_selectors: frozenset[str] = DEFAULT_SIDE_EFFECT_SELECTORS
    mutator_prefixes: tuple[str, ...] = ("set",)

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> DetectorContext:
        return cls(
            severities={rule_id: config.severity_for(rule_id) for rule_id in RULES_BY_ID},
            side_effect_selectors=config.side_effect_selectors,
            mutator_prefixes=config.mutator_prefixes,
        )

    def severity_for(self, rule_id: str) -> Severity:
        severity = self.severities.get(rule_id)
        if severity is None:
            return RULES_BY_ID[rule_id].default_severity
        return severity

    def is_mutator(self, selector: str) -> bool:
        """``setPhase`` is a mutator for prefix ``set``; ``settle`` is not."""
        for prefix in self.mutator_prefixes:
            if (
                selector.startswith(prefix)
                and len(selector) > len(prefix)
                and selector[len(prefix)].isupper()
            ):
                return True
        return False

    def make_finding(
        self,
        rule_id: str,
        path: str,
        span: Span,
        message: str,
        suggested_fix: str | None = None,
        related: Iterable[Location] = (),
    ) -> Finding:
        return Finding(
            rule_id=rule_id,
            severity=self.severity_for(rule_id),
            location=Location.from_span(path, span),
            message=message,
            suggested_fix=suggested_fix,
            related=tuple(related),
        )


class Detector(Protocol):
    """Per-file detectors see one SourceUnit at a time and never share state."""

    name: str
    rules: frozenset[str]  # rule ids this detector may emit

    def detect(self, unit: SourceUnit, context: DetectorContext) -> list[Finding]: ...


class CorpusDetector(Protocol):
    """Whole-corpus detectors run in two passes around a barrier.

    ``collect`` runs per file in pass 1 and returns compact facts.
    ``build_table`` runs once, after every pass-1 task has finished.
    ``detect_sites`` runs per file in pass 2 against the finished table.
    """

    name: str
    rules: frozenset[str]

    def collect(self, unit: SourceUnit, context: DetectorContext) -> Any: ...

    def build_table(self, facts: Iterable[Any]) -> Any: ...

    def detect_sites(self, facts: Any, table: Any, context: DetectorContext) -> list[Finding]: ...
