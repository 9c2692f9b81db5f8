"""LOOP_INVARIANT_REEVALUATION: the same call chain evaluated repeatedly per iteration.

Within one loop body, a chain such as ``config.getEntities().getDownload()``
that is rooted at a variable the loop never rebinds yields the same value
each time it is written. When it appears more than once it should be
hoisted into a local before the loop.

Only bounded iteration (``for`` and enhanced ``for``) is considered. Inner
loops are analysed before the loops that contain them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..models import Location
from ..rules import LOOP_INVARIANT
from ..scanning.render import render_chain
from ..scanning.syntax import (
    Assignment,
    CallChain,
    ExprStmt,
    FieldAccess,
    ForEachStmt,
    ForStmt,
    MethodCall,
    assigned_names,
    chain_of,
    child_nodes,
    mentioned_names,
    walk,
)

if TYPE_CHECKING:
    from ..models import Finding
    from ..scanning.syntax import Node, SourceUnit, Span
    from .base import DetectorContext


BOUNDED_LOOPS = (ForStmt, ForEachStmt)


def loops_innermost_first(node: Node) -> Iterator:
    """Post-order: every loop comes after the loops nested inside it."""
    for child in child_nodes(node):
        yield from loops_innermost_first(child)
    if isinstance(node, BOUNDED_LOOPS):
        yield node


def loop_variables(loop) -> set[str]:
    if isinstance(loop, ForEachStmt):
        return {loop.name}
    names: set[str] = set()
    for stmt in loop.init:
        names |= assigned_names(stmt)
    for expr in loop.update:
        names |= assigned_names(expr)
    return names


def _arguments_reference(chain: CallChain, names: set[str]) -> bool:
    for selector in chain.selectors:
        for argument in selector.arguments or ():
            if mentioned_names(argument) & names:
                return True
    return False


def chain_occurrences(loop) -> dict[CallChain, list[Span]]:
    """Candidate invariant chains in the loop body, with every occurrence."""
    excluded = loop_variables(loop) | assigned_names(loop.body)
    skipped: set[int] = set()
    occurrences: dict[CallChain, list[Span]] = {}

    for node in walk(loop.body):
        if isinstance(node, ExprStmt):
            # the statement's own value is discarded; its receivers still count
            skipped.add(id(node.expression))
        elif isinstance(node, Assignment):
            skipped.add(id(node.target))
        elif isinstance(node, (MethodCall, FieldAccess)) and id(node) not in skipped:
            chain = chain_of(node)
            if chain is None or not chain.has_call:
                continue
            if chain.root in excluded or _arguments_reference(chain, excluded):
                continue
            occurrences.setdefault(chain, []).append(node.span)

    return occurrences


def repeated_chains(loop) -> list[tuple[CallChain, list[Span]]]:
    """Chains written more than once, keeping only the longest of a family.

    A repeated chain is dropped when a longer repeated chain extends it
    with the same number of occurrences, so ``a.b().c()`` written three
    times is reported once rather than also as ``a.b()``.
    """
    repeated = {c: spans for c, spans in chain_occurrences(loop).items() if len(spans) > 1}
    kept = [
        (chain, spans)
        for chain, spans in repeated.items()
        if not any(
            other.extends(chain) and len(other_spans) == len(spans)
            for other, other_spans in repeated.items()
        )
    ]
    kept.sort(key=lambda item: (item[1][0].line, item[1][0].column, render_chain(item[0])))
    return kept


class LoopInvariantDetector:
    """Reports call chains re-evaluated on every loop iteration."""

    name = "loop_invariant"
    rules = frozenset({LOOP_INVARIANT})

    def detect(self, unit: SourceUnit, context: DetectorContext) -> list[Finding]:
        findings: list[Finding] = []
        for function in unit.functions():
            if function.body is None:
                continue
            reported: set[tuple] = set()
            for loop in loops_innermost_first(function.body):
                for chain, spans in repeated_chains(loop):
                    spans = sorted(spans, key=lambda s: (s.line, s.column))
                    key = tuple(spans)
                    if key in reported:
                        continue
                    reported.add(key)
                    text = render_chain(chain)
                    lines = ", ".join(str(s.line) for s in spans)
                    findings.append(
                        context.make_finding(
                            LOOP_INVARIANT,
                            unit.path,
                            spans[0],
                            f"'{text}' is evaluated {len(spans)} times in the loop at line "
                            f"{loop.span.line} (lines {lines})",
                            suggested_fix=f"Assign {text} to a local variable before the loop",
                            related=tuple(Location.from_span(unit.path, s) for s in spans),
                        )
                    )
        return findings
