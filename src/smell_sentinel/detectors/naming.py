"""Advisory naming heuristics. Off by default.

These rules judge wording, not structure, and have a much higher false
positive rate than the core detectors. Methods annotated ``@Override``
are skipped because their names are fixed by the supertype.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..rules import AMBIGUOUS_VERB, CONJUNCTION_NAME

if TYPE_CHECKING:
    from ..models import Finding
    from ..scanning.syntax import SourceUnit
    from .base import DetectorContext

AMBIGUOUS_VERBS = frozenset({"check", "process", "handle", "manage", "do", "perform"})
CONJUNCTIONS = frozenset({"and", "or"})


def split_identifier(name: str) -> list[str]:
    """Split camelCase, PascalCase and snake_case into lowercase words.

    Examples:
        validateAndSave -> ["validate", "and", "save"]
        parseHTTPResponse -> ["parse", "http", "response"]
    """
    words = re.findall(r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\b|_|\d|$)|\d+", name)
    return [w.lower() for w in words]


class NamingAdvisoryDetector:
    """Flags vague leading verbs and names that join two actions."""

    name = "naming"
    rules = frozenset({AMBIGUOUS_VERB, CONJUNCTION_NAME})

    def detect(self, unit: SourceUnit, context: DetectorContext) -> list[Finding]:
        findings: list[Finding] = []
        for function in unit.functions():
            if function.is_constructor or "Override" in function.annotations:
                continue
            words = split_identifier(function.name)
            if not words:
                continue

            if words[0] in AMBIGUOUS_VERBS:
                findings.append(
                    context.make_finding(
                        AMBIGUOUS_VERB,
                        unit.path,
                        function.span,
                        f"{function.name}() starts with the vague verb '{words[0]}'",
                        suggested_fix="Name the method after what it actually decides or changes",
                    )
                )

            joined = [w for w in words[1:-1] if w in CONJUNCTIONS]
            if joined:
                findings.append(
                    context.make_finding(
                        CONJUNCTION_NAME,
                        unit.path,
                        function.span,
                        f"{function.name}() joins two actions with '{joined[0]}'",
                        suggested_fix=f"Split {function.name}() into one method per action",
                    )
                )
        return findings
