"""INCOMPLETE_CONSTRUCTION: objects built via setters that skip a setter.

This is the one whole-corpus rule. What counts as "mandatory" for a type is
learned from the corpus itself: the union of setters invoked right after
construction at any eligible call site. It runs as an explicit two-phase
analysis:

    pass 1  collect()        per file, parallel: call sites and declared setters
    barrier build_table()    once, over every file's facts
    pass 2  detect_sites()   per file, parallel: sites missing observed setters

``build_table`` must only be called once every pass-1 task has finished.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..rules import INCOMPLETE_CONSTRUCTION
from ..scanning.syntax import (
    Assignment,
    Block,
    ConstructorCallSite,
    ExprStmt,
    LocalVarDecl,
    MethodCall,
    ObjectCreation,
    SwitchCase,
    VariableRef,
    mentioned_names,
    walk,
)

if TYPE_CHECKING:
    from ..models import Finding
    from ..scanning.syntax import SourceUnit, Statement
    from .base import DetectorContext


@dataclass(frozen=True)
class ConstructionFacts:
    """Pass-1 output for one file. Small enough to keep for the whole run.

    Attributes:
        path: File the facts came from
        sites: Constructor call sites bound to a local
        declared_mutators: Type simple name -> number of distinct setter
            methods the file declares for it
    """

    path: str
    sites: tuple[ConstructorCallSite, ...] = ()
    declared_mutators: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MandatorySetTable:
    """Per-type observed mandatory setter sets, built after the barrier."""

    observed: Mapping[str, frozenset[str]] = field(default_factory=dict)
    declared_mutators: Mapping[str, int] = field(default_factory=dict)

    def is_eligible(self, site: ConstructorCallSite) -> bool:
        return is_eligible(site, self.declared_mutators)

    def mandatory_for(self, type_name: str) -> frozenset[str]:
        return self.observed.get(type_name, frozenset())

    def missing(self, site: ConstructorCallSite) -> list[str]:
        """Observed setters this site does not call, sorted."""
        return sorted(self.mandatory_for(site.type_name) - set(site.mutators))


def is_eligible(site: ConstructorCallSite, declared_mutators: Mapping[str, int]) -> bool:
    """Whether a site is built via setters rather than its constructor.

    For a type declared in the corpus the constructor must take fewer
    arguments than the type has setters. Types from outside the corpus
    only qualify with a no-argument constructor.
    """
    declared = declared_mutators.get(site.type_name)
    if declared is None:
        return site.argument_count == 0
    return site.argument_count < declared


def _construction(stmt: Statement) -> Optional[tuple[str, ObjectCreation]]:
    """(binding, creation) for ``T x = new T(..)`` or ``x = new T(..)``."""
    if isinstance(stmt, LocalVarDecl) and isinstance(stmt.value, ObjectCreation):
        return stmt.name, stmt.value
    if (
        isinstance(stmt, ExprStmt)
        and isinstance(stmt.expression, Assignment)
        and stmt.expression.operator == "="
        and isinstance(stmt.expression.target, VariableRef)
        and isinstance(stmt.expression.value, ObjectCreation)
    ):
        return stmt.expression.target.name, stmt.expression.value
    return None


def _following_mutators(
    statements: tuple, binding: str, context: DetectorContext
) -> tuple[str, ...]:
    """Setters called on ``binding`` until it is used any other way."""
    mutators: list[str] = []
    for stmt in statements:
        if (
            isinstance(stmt, ExprStmt)
            and isinstance(stmt.expression, MethodCall)
            and stmt.expression.receiver == VariableRef(binding)
            and context.is_mutator(stmt.expression.name)
            and not any(binding in mentioned_names(a) for a in stmt.expression.arguments)
        ):
            mutators.append(stmt.expression.name)
            continue
        if binding in mentioned_names(stmt):
            break
    return tuple(mutators)


def call_sites_in(
    statements: tuple, path: str, context: DetectorContext
) -> list[ConstructorCallSite]:
    sites: list[ConstructorCallSite] = []
    for index, stmt in enumerate(statements):
        found = _construction(stmt)
        if found is None:
            continue
        binding, creation = found
        if creation.has_body:
            continue
        sites.append(
            ConstructorCallSite(
                type_name=creation.type_ref.simple_name,
                argument_count=len(creation.arguments),
                binding=binding,
                mutators=_following_mutators(statements[index + 1 :], binding, context),
                path=path,
                span=stmt.span,
            )
        )
    return sites


class IncompleteConstructionDetector:
    """Two-pass corpus detector for setter-built objects missing a setter."""

    name = "incomplete_construction"
    rules = frozenset({INCOMPLETE_CONSTRUCTION})

    def collect(self, unit: SourceUnit, context: DetectorContext) -> ConstructionFacts:
        """Pass 1: call sites and declared setter counts for one file."""
        declared: dict[str, int] = {}
        for type_decl in unit.iter_types():
            if type_decl.kind in ("anonymous", "enum_constant"):
                continue
            setters = {
                f.name
                for f in type_decl.functions
                if not f.is_constructor and context.is_mutator(f.name)
            }
            declared[type_decl.name] = max(declared.get(type_decl.name, 0), len(setters))

        sites: list[ConstructorCallSite] = []
        for function in unit.functions():
            if function.body is None:
                continue
            for node in walk(function.body):
                if isinstance(node, Block):
                    sites.extend(call_sites_in(node.statements, unit.path, context))
                elif isinstance(node, SwitchCase):
                    sites.extend(call_sites_in(node.body, unit.path, context))

        return ConstructionFacts(unit.path, tuple(sites), declared)

    def build_table(self, facts: Iterable[ConstructionFacts]) -> MandatorySetTable:
        """Barrier step: fold every file's facts into one table."""
        facts = list(facts)
        declared: dict[str, int] = {}
        for file_facts in facts:
            for type_name, count in file_facts.declared_mutators.items():
                declared[type_name] = max(declared.get(type_name, 0), count)

        observed: dict[str, set[str]] = {}
        for file_facts in facts:
            for site in file_facts.sites:
                if is_eligible(site, declared):
                    observed.setdefault(site.type_name, set()).update(site.mutators)

        return MandatorySetTable(
            observed={name: frozenset(setters) for name, setters in observed.items()},
            declared_mutators=declared,
        )

    def detect_sites(
        self, facts: ConstructionFacts, table: MandatorySetTable, context: DetectorContext
    ) -> list[Finding]:
        """Pass 2: report eligible sites that miss observed setters."""
        findings: list[Finding] = []
        for site in facts.sites:
            if not table.is_eligible(site):
                continue
            missing = table.missing(site)
            if not missing:
                continue
            names = ", ".join(missing)
            findings.append(
                context.make_finding(
                    INCOMPLETE_CONSTRUCTION,
                    facts.path,
                    site.span,
                    f"{site.type_name} '{site.binding}' is never given {names}, which is "
                    f"set after construction elsewhere",
                    suggested_fix=(
                        f"Call {names} on '{site.binding}', or require the values in the "
                        f"{site.type_name} constructor"
                    ),
                )
            )
        return findings
