"""NULLABLE_RETURN / NULL_COLLECTION_RETURN: methods that hand out null.

A method whose declared contract does not say null is a valid result
should return a documented sentinel (or an Optional) instead. Container
return types never get that exemption: an empty container is always the
better answer.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..rules import NULL_COLLECTION_RETURN, NULLABLE_RETURN
from ..scanning.syntax import (
    Block,
    Conditional,
    ForEachStmt,
    ForStmt,
    IfStmt,
    JumpStmt,
    Literal,
    Opaque,
    OtherStmt,
    ReturnStmt,
    SwitchStmt,
    ThrowStmt,
    TryStmt,
    WhileStmt,
)

if TYPE_CHECKING:
    from ..models import Finding
    from ..scanning.syntax import Expression, FunctionDecl, SourceUnit, Statement
    from .base import DetectorContext


def yields_null(expr: Expression) -> bool:
    """True when the expression can evaluate to a literal null."""
    if isinstance(expr, Literal):
        return expr.is_null
    if isinstance(expr, Conditional):
        return yields_null(expr.consequence) or yields_null(expr.alternative)
    if isinstance(expr, Opaque) and expr.kind == "cast":
        return bool(expr.children) and yields_null(expr.children[0])
    if isinstance(expr, Opaque) and expr.kind == "switch":
        return any(yields_null(result) for result in expr.children[1:])
    return False


def completes_abruptly(stmt: Statement) -> bool:
    """Statements after this one in the same block are unreachable."""
    if isinstance(stmt, (ReturnStmt, ThrowStmt, JumpStmt)):
        return True
    if isinstance(stmt, Block):
        return any(completes_abruptly(s) for s in stmt.statements)
    if isinstance(stmt, IfStmt):
        return (
            stmt.alternative is not None
            and completes_abruptly(stmt.consequence)
            and completes_abruptly(stmt.alternative)
        )
    return False


def _reachable_in_sequence(statements) -> Iterator[ReturnStmt]:
    for stmt in statements:
        yield from reachable_returns(stmt)
        if completes_abruptly(stmt):
            break


def reachable_returns(stmt: Statement) -> Iterator[ReturnStmt]:
    """Every return statement reachable in this function's own body."""
    if isinstance(stmt, ReturnStmt):
        yield stmt
    elif isinstance(stmt, Block):
        yield from _reachable_in_sequence(stmt.statements)
    elif isinstance(stmt, IfStmt):
        yield from reachable_returns(stmt.consequence)
        if stmt.alternative is not None:
            yield from reachable_returns(stmt.alternative)
    elif isinstance(stmt, (WhileStmt, ForStmt, ForEachStmt)):
        yield from reachable_returns(stmt.body)
    elif isinstance(stmt, TryStmt):
        yield from reachable_returns(stmt.body)
        for catch in stmt.catches:
            yield from reachable_returns(catch.body)
        if stmt.finally_block is not None:
            yield from reachable_returns(stmt.finally_block)
    elif isinstance(stmt, SwitchStmt):
        for case in stmt.cases:
            yield from _reachable_in_sequence(case.body)
    elif isinstance(stmt, OtherStmt):
        for body in stmt.bodies:
            yield from reachable_returns(body)
    # LocalVarDecl, ExprStmt, ThrowStmt, JumpStmt contain no returns


class NullableReturnDetector:
    """Flags ``return null`` in methods whose contract does not allow it."""

    name = "nullable_return"
    rules = frozenset({NULLABLE_RETURN, NULL_COLLECTION_RETURN})

    def detect(self, unit: SourceUnit, context: DetectorContext) -> list[Finding]:
        findings: list[Finding] = []
        for function in unit.functions():
            findings.extend(self._check_function(unit.path, function, context))
        return findings

    def _check_function(
        self, path: str, function: FunctionDecl, context: DetectorContext
    ) -> list[Finding]:
        return_type = function.return_type
        if function.is_constructor or function.body is None or return_type is None:
            return []
        if not return_type.is_reference or return_type.is_optional_like:
            return []

        container = return_type.is_container
        if not container and function.documented_nullable:
            return []

        name = function.qualified_name
        findings: list[Finding] = []
        for ret in reachable_returns(function.body):
            if ret.value is None or not yields_null(ret.value):
                continue
            if container:
                findings.append(
                    context.make_finding(
                        NULL_COLLECTION_RETURN,
                        path,
                        ret.span,
                        f"{name}() returns null for container type {return_type}",
                        suggested_fix="Return an empty container instead of null",
                    )
                )
            else:
                findings.append(
                    context.make_finding(
                        NULLABLE_RETURN,
                        path,
                        ret.span,
                        f"{name}() returns null but its contract does not say "
                        f"{return_type} may be null",
                        suggested_fix=(
                            "Return a documented sentinel value or Optional<"
                            f"{return_type}> instead of null"
                        ),
                    )
                )
        return findings
