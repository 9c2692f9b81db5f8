"""FLAG_PARAMETER: boolean parameters that fork a method's behaviour.

A boolean is a flag when some conditional in the body tests it and the two
branches then do structurally different things. Branch comparison ignores
logging and printing calls (the configured side-effect selectors) and
assertions, so a boolean that only changes what gets logged is inert.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..models import Location
from ..rules import FLAG_PARAMETER
from ..scanning.render import render_expression, render_statement
from ..scanning.syntax import (
    Block,
    Conditional,
    ExprStmt,
    IfStmt,
    MethodCall,
    ObjectCreation,
    OtherStmt,
    referenced_names,
    walk,
)

if TYPE_CHECKING:
    from ..models import Finding
    from ..scanning.syntax import FunctionDecl, Parameter, SourceUnit, Span, Statement
    from .base import DetectorContext


@dataclass(frozen=True)
class Divergence:
    """First pair of differing branch items for a flag-tested conditional."""

    first: str
    second: str
    span: Span


def _branch(stmt: Optional[Statement]) -> tuple:
    if stmt is None:
        return ()
    if isinstance(stmt, Block):
        return stmt.statements
    return (stmt,)


def _is_side_effect_only(stmt: Statement, selectors: frozenset[str]) -> bool:
    if isinstance(stmt, OtherStmt) and stmt.kind == "assert":
        return True
    return (
        isinstance(stmt, ExprStmt)
        and isinstance(stmt.expression, MethodCall)
        and stmt.expression.name in selectors
    )


def significant_statements(stmt: Optional[Statement], selectors: frozenset[str]) -> tuple:
    """Branch statements that matter for comparison."""
    return tuple(s for s in _branch(stmt) if not _is_side_effect_only(s, selectors))


def _has_effect(expr) -> bool:
    return any(isinstance(n, (MethodCall, ObjectCreation)) for n in walk(expr))


def find_divergence(
    body: Statement, name: str, selectors: frozenset[str]
) -> Optional[Divergence]:
    """First conditional testing ``name`` whose branches differ, in source order."""
    for node in walk(body):
        if isinstance(node, IfStmt):
            if name not in referenced_names(node.condition):
                continue
            then_branch = significant_statements(node.consequence, selectors)
            else_branch = significant_statements(node.alternative, selectors)
            if then_branch == else_branch:
                continue
            index = 0
            while (
                index < min(len(then_branch), len(else_branch))
                and then_branch[index] == else_branch[index]
            ):
                index += 1
            first = then_branch[index] if index < len(then_branch) else None
            second = else_branch[index] if index < len(else_branch) else None
            return Divergence(render_statement(first), render_statement(second), node.span)

        if isinstance(node, Conditional):
            if name not in referenced_names(node.condition):
                continue
            if node.consequence == node.alternative:
                continue
            if not (_has_effect(node.consequence) or _has_effect(node.alternative)):
                continue
            return Divergence(
                render_expression(node.consequence),
                render_expression(node.alternative),
                node.span,
            )
    return None


def is_boolean_flag(
    function: FunctionDecl, parameter: Parameter, selectors: frozenset[str]
) -> bool:
    """The derived flag judgement for one parameter."""
    if not parameter.is_boolean or function.body is None:
        return False
    return find_divergence(function.body, parameter.name, selectors) is not None


class FlagParameterDetector:
    """Reports boolean parameters that select between two behaviours."""

    name = "flag_parameter"
    rules = frozenset({FLAG_PARAMETER})

    def detect(self, unit: SourceUnit, context: DetectorContext) -> list[Finding]:
        findings: list[Finding] = []
        for function in unit.functions():
            if function.body is None:
                continue
            for parameter in function.parameters:
                if not parameter.is_boolean:
                    continue
                divergence = find_divergence(
                    function.body, parameter.name, context.side_effect_selectors
                )
                if divergence is None:
                    continue
                findings.append(
                    context.make_finding(
                        FLAG_PARAMETER,
                        unit.path,
                        parameter.span,
                        f"Boolean parameter '{parameter.name}' of {function.name}() selects "
                        f"between different behaviour at line {divergence.span.line}: "
                        f"'{divergence.first}' vs '{divergence.second}'",
                        suggested_fix=(
                            f"Split {function.name}() into two methods, one per behaviour"
                        ),
                        related=(Location.from_span(unit.path, divergence.span),),
                    )
                )
        return findings
