"""Tests for structural tree nodes and traversal helpers."""

import pytest

from smell_sentinel.scanning.render import render_chain, render_expression, render_statement
from smell_sentinel.scanning.syntax import (
    Assignment,
    Block,
    CallChain,
    CatchClause,
    ExprStmt,
    FieldAccess,
    ForEachStmt,
    IfStmt,
    Literal,
    LocalVarDecl,
    MethodCall,
    ReturnStmt,
    Selector,
    Span,
    TypeRef,
    VariableRef,
    assigned_names,
    chain_of,
    child_nodes,
    referenced_names,
    walk,
)


def _call(receiver, name, *args):
    return MethodCall(receiver, name, tuple(args))


class TestSpans:
    """Test span conversion and equality semantics."""

    def test_from_points_is_one_based(self):
        span = Span.from_points((0, 4), (2, 10))
        assert span == Span(1, 5, 3, 10)

    def test_spans_do_not_affect_equality(self):
        a = VariableRef("x", span=Span(1, 1, 1, 1))
        b = VariableRef("x", span=Span(9, 4, 9, 5))
        assert a == b
        assert hash(a) == hash(b)

    def test_different_structure_is_not_equal(self):
        assert _call(VariableRef("a"), "run") != _call(VariableRef("a"), "stop")


class TestTypeRef:
    """Test type classification properties."""

    def test_container_types(self):
        assert TypeRef("List", (TypeRef("String"),)).is_container
        assert TypeRef("java.util.Map").is_container
        assert TypeRef("int", dimensions=1, primitive=True).is_container
        assert not TypeRef("String").is_container

    def test_optional_like(self):
        assert TypeRef("Optional", (TypeRef("Direction"),)).is_optional_like
        assert TypeRef("java.util.OptionalInt").is_optional_like
        assert not TypeRef("Optional", dimensions=1).is_optional_like

    def test_reference_and_boolean(self):
        assert not TypeRef("int", primitive=True).is_reference
        assert TypeRef("int", dimensions=1, primitive=True).is_reference
        assert TypeRef("boolean", primitive=True).is_boolean
        assert TypeRef("Boolean").is_boolean
        assert TypeRef("void", primitive=True).is_void

    def test_str(self):
        ref = TypeRef("Map", (TypeRef("String"), TypeRef("Integer", dimensions=1)))
        assert str(ref) == "Map<String, Integer[]>"


class TestChains:
    """Test call-chain extraction."""

    def test_chain_of_method_calls(self):
        expr = _call(_call(VariableRef("config"), "getEntities"), "getDownload")
        chain = chain_of(expr)
        assert chain == CallChain(
            "config", (Selector("getEntities", ()), Selector("getDownload", ()))
        )
        assert chain.has_call

    def test_chain_with_field_access(self):
        chain = chain_of(FieldAccess(_call(VariableRef("a"), "b"), "c"))
        assert chain.selectors == (Selector("b", ()), Selector("c"))
        assert not chain.selectors[1].is_call

    def test_bare_variable_is_not_a_chain(self):
        assert chain_of(VariableRef("x")) is None

    def test_unqualified_call_has_no_root(self):
        assert chain_of(_call(_call(None, "helper"), "get")) is None

    def test_extends(self):
        short = CallChain("a", (Selector("b", ()),))
        long = CallChain("a", (Selector("b", ()), Selector("c", ())))
        other_root = CallChain("z", (Selector("b", ()), Selector("c", ())))
        assert long.extends(short)
        assert not short.extends(long)
        assert not short.extends(short)
        assert not other_root.extends(short)

    def test_render_chain(self):
        chain = CallChain(
            "config",
            (Selector("getEntities", ()), Selector("get", (Literal("number", "3"),))),
        )
        assert render_chain(chain) == "config.getEntities().get(3)"


class TestTraversal:
    """Test child_nodes, walk and name helpers."""

    def test_child_nodes_rejects_unknown_kinds(self):
        with pytest.raises(TypeError, match="Unknown syntax node"):
            child_nodes("not a node")

    def test_walk_is_pre_order(self):
        inner = _call(VariableRef("a"), "b", VariableRef("x"))
        stmt = ExprStmt(inner)
        kinds = [type(n).__name__ for n in walk(Block((stmt,)))]
        assert kinds == ["Block", "ExprStmt", "MethodCall", "VariableRef", "VariableRef"]

    def test_referenced_names(self):
        expr = _call(VariableRef("a"), "b", VariableRef("x"), Literal("null", "null"))
        assert referenced_names(expr) == {"a", "x"}

    def test_assigned_names(self):
        body = Block(
            (
                LocalVarDecl(TypeRef("int", primitive=True), "count", Literal("number", "0")),
                ExprStmt(Assignment(VariableRef("total"), "+=", VariableRef("count"))),
                ExprStmt(
                    Assignment(
                        FieldAccess(VariableRef("self"), "size"), "=", Literal("number", "1")
                    )
                ),
                ForEachStmt(TypeRef("String"), "item", VariableRef("items"), Block()),
                IfStmt(VariableRef("flag"), ReturnStmt()),
            )
        )
        assert assigned_names(body) == {"count", "total", "item"}

    def test_catch_parameter_is_assigned(self):
        clause = CatchClause((TypeRef("IOException"),), "e", Block())
        assert assigned_names(clause) == {"e"}


class TestRender:
    """Test message rendering of expressions and statements."""

    def test_render_expression(self):
        expr = _call(VariableRef("out"), "write", Literal("string", '"hi"'), VariableRef("n"))
        assert render_expression(expr) == 'out.write("hi", n)'

    def test_render_statement(self):
        assert render_statement(ExprStmt(_call(None, "flush"))) == "flush();"
        assert render_statement(ReturnStmt(Literal("null", "null"))) == "return null;"
        assert render_statement(None) == "(nothing)"

    def test_long_statements_are_clipped(self):
        stmt = ExprStmt(_call(None, "x" * 200))
        text = render_statement(stmt)
        assert len(text) == 80
        assert text.endswith("...")
