"""Compact source-like rendering of structural trees for finding messages."""

from __future__ import annotations

from .syntax import (
    ArrayAccess,
    Assignment,
    BinaryOp,
    Block,
    CallChain,
    Conditional,
    ExprStmt,
    FieldAccess,
    ForEachStmt,
    ForStmt,
    IfStmt,
    JumpStmt,
    Literal,
    LocalVarDecl,
    MethodCall,
    ObjectCreation,
    Opaque,
    OtherStmt,
    ReturnStmt,
    SwitchStmt,
    ThrowStmt,
    TryStmt,
    UnaryOp,
    VariableRef,
    WhileStmt,
)

MAX_WIDTH = 80


def _clip(text: str, width: int = MAX_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def _args(arguments) -> str:
    return ", ".join(render_expression(a) for a in arguments)


def render_expression(expr) -> str:
    if isinstance(expr, Literal):
        return expr.text
    if isinstance(expr, VariableRef):
        return expr.name
    if isinstance(expr, FieldAccess):
        return f"{render_expression(expr.target)}.{expr.name}"
    if isinstance(expr, MethodCall):
        call = f"{expr.name}({_args(expr.arguments)})"
        if expr.receiver is None:
            return call
        return f"{render_expression(expr.receiver)}.{call}"
    if isinstance(expr, BinaryOp):
        return f"{render_expression(expr.left)} {expr.operator} {render_expression(expr.right)}"
    if isinstance(expr, Conditional):
        return (
            f"{render_expression(expr.condition)} ? {render_expression(expr.consequence)}"
            f" : {render_expression(expr.alternative)}"
        )
    if isinstance(expr, UnaryOp):
        return f"{expr.operator}{render_expression(expr.operand)}"
    if isinstance(expr, Assignment):
        if expr.value is None:
            return f"{render_expression(expr.target)}{expr.operator}"
        return f"{render_expression(expr.target)} {expr.operator} {render_expression(expr.value)}"
    if isinstance(expr, ObjectCreation):
        body = " {...}" if expr.has_body else ""
        return f"new {expr.type_ref}({_args(expr.arguments)}){body}"
    if isinstance(expr, ArrayAccess):
        return f"{render_expression(expr.array)}[{render_expression(expr.index)}]"
    if isinstance(expr, Opaque):
        if expr.kind in ("lambda", "method_reference"):
            return _clip(expr.text)
        return f"<{expr.kind}>"
    return "<?>"


def render_statement(stmt) -> str:
    """One-line summary of a statement, clipped to a readable width."""
    if stmt is None:
        return "(nothing)"
    if isinstance(stmt, Block):
        if not stmt.statements:
            return "{}"
        return render_statement(stmt.statements[0])
    if isinstance(stmt, LocalVarDecl):
        text = f"{stmt.type_ref} {stmt.name}"
        if stmt.value is not None:
            text += f" = {render_expression(stmt.value)}"
        return _clip(text + ";")
    if isinstance(stmt, ExprStmt):
        return _clip(render_expression(stmt.expression) + ";")
    if isinstance(stmt, ReturnStmt):
        if stmt.value is None:
            return "return;"
        return _clip(f"return {render_expression(stmt.value)};")
    if isinstance(stmt, ThrowStmt):
        return _clip(f"throw {render_expression(stmt.value)};")
    if isinstance(stmt, JumpStmt):
        return f"{stmt.kind} {stmt.label};" if stmt.label else f"{stmt.kind};"
    if isinstance(stmt, IfStmt):
        return _clip(f"if ({render_expression(stmt.condition)}) ...")
    if isinstance(stmt, WhileStmt):
        return _clip(f"while ({render_expression(stmt.condition)}) ...")
    if isinstance(stmt, (ForStmt, ForEachStmt)):
        return "for (...) ..."
    if isinstance(stmt, TryStmt):
        return "try {...}"
    if isinstance(stmt, SwitchStmt):
        return _clip(f"switch ({render_expression(stmt.subject)}) ...")
    if isinstance(stmt, OtherStmt):
        return f"{stmt.kind} ..."
    return "<?>"


def render_chain(chain: CallChain) -> str:
    parts = [chain.root]
    for selector in chain.selectors:
        if selector.is_call:
            parts.append(f"{selector.name}({_args(selector.arguments)})")
        else:
            parts.append(selector.name)
    return _clip(".".join(parts))
