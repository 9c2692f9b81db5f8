"""Rule registry.

The registry order is also the tie-break order used when sorting findings
that share a location, so it must stay stable.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Severity

NULLABLE_RETURN = "nullable-return"
NULL_COLLECTION_RETURN = "null-collection-return"
FLAG_PARAMETER = "flag-parameter"
LOOP_INVARIANT = "loop-invariant-reevaluation"
INCOMPLETE_CONSTRUCTION = "incomplete-construction"
PARSE_FAILURE = "internal/parse-failure"
IO_FAILURE = "internal/io-failure"
DETECTOR_FAILURE = "internal/detector-failure"
AMBIGUOUS_VERB = "advisory/ambiguous-verb"
CONJUNCTION_NAME = "advisory/conjunction-name"


@dataclass(frozen=True)
class RuleInfo:
    """Static description of a rule."""

    rule_id: str
    default_severity: Severity
    category: str
    summary: str
    enabled_by_default: bool = True

    @property
    def is_internal(self) -> bool:
        return self.category == "internal"


RULES: tuple[RuleInfo, ...] = (
    RuleInfo(
        PARSE_FAILURE,
        Severity.ERROR,
        "internal",
        "Source file has malformed syntax and was not analyzed",
    ),
    RuleInfo(
        IO_FAILURE,
        Severity.ERROR,
        "internal",
        "Source file could not be read",
    ),
    RuleInfo(
        DETECTOR_FAILURE,
        Severity.ERROR,
        "internal",
        "A detector crashed while analyzing the file",
    ),
    RuleInfo(
        NULLABLE_RETURN,
        Severity.WARNING,
        "null-handling",
        "Method returns null without documenting it as a valid result",
    ),
    RuleInfo(
        NULL_COLLECTION_RETURN,
        Severity.ERROR,
        "null-handling",
        "Method with a container return type returns null instead of an empty container",
    ),
    RuleInfo(
        FLAG_PARAMETER,
        Severity.WARNING,
        "parameters",
        "Boolean parameter selects between structurally different behaviour",
    ),
    RuleInfo(
        LOOP_INVARIANT,
        Severity.INFO,
        "performance",
        "Loop body re-evaluates the same call chain on every iteration",
    ),
    RuleInfo(
        INCOMPLETE_CONSTRUCTION,
        Severity.WARNING,
        "construction",
        "Object built via setters misses a setter called at every other construction site",
    ),
    RuleInfo(
        AMBIGUOUS_VERB,
        Severity.INFO,
        "advisory",
        "Method name starts with a vague verb such as check or process",
        enabled_by_default=False,
    ),
    RuleInfo(
        CONJUNCTION_NAME,
        Severity.INFO,
        "advisory",
        "Method name joins two actions with And/Or",
        enabled_by_default=False,
    ),
)

RULES_BY_ID: dict[str, RuleInfo] = {rule.rule_id: rule for rule in RULES}

_RULE_ORDER: dict[str, int] = {rule.rule_id: index for index, rule in enumerate(RULES)}

INTERNAL_RULES = frozenset(rule.rule_id for rule in RULES if rule.is_internal)

DEFAULT_ENABLED_RULES = frozenset(
    rule.rule_id for rule in RULES if rule.enabled_by_default and not rule.is_internal
)


def get_rule(rule_id: str) -> RuleInfo:
    """Look up a rule by id.

    Raises:
        KeyError: If the rule id is not registered
    """
    return RULES_BY_ID[rule_id]


def rule_order(rule_id: str) -> int:
    """Registry position of a rule, unknown ids sort last."""
    return _RULE_ORDER.get(rule_id, len(_RULE_ORDER))
