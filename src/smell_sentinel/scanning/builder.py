"""SourceModelBuilder: converts tree-sitter Java trees to SourceUnit.

This module is the only place that knows tree-sitter-java node type names.
Everything downstream works on the structural tree in ``syntax``.

Usage:
    builder = SourceModelBuilder()
    unit = builder.build(source_text, "src/Foo.java")
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import ParsingError
from ..logging_config import get_logger
from .syntax import (
    ArrayAccess,
    Assignment,
    BinaryOp,
    Block,
    CatchClause,
    Conditional,
    ExprStmt,
    FieldAccess,
    ForEachStmt,
    ForStmt,
    FunctionDecl,
    IfStmt,
    JumpStmt,
    Literal,
    LocalVarDecl,
    MethodCall,
    ObjectCreation,
    Opaque,
    OtherStmt,
    Parameter,
    ReturnStmt,
    SourceUnit,
    Span,
    SwitchCase,
    SwitchStmt,
    ThrowStmt,
    TryStmt,
    TypeDecl,
    TypeRef,
    UnaryOp,
    VariableRef,
    WhileStmt,
)
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

TYPE_DECLARATIONS = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "annotation_type_declaration",
    }
)

FUNCTION_DECLARATIONS = frozenset(
    {"method_declaration", "constructor_declaration", "compact_constructor_declaration"}
)

COMMENTS = frozenset({"line_comment", "block_comment"})

NULLABLE_ANNOTATIONS = frozenset(
    {"Nullable", "CheckForNull", "CanBeNull", "MaybeNull", "NullableDecl", "PolyNull"}
)

_NUMBER_LITERALS = frozenset(
    {
        "decimal_integer_literal",
        "hex_integer_literal",
        "octal_integer_literal",
        "binary_integer_literal",
        "decimal_floating_point_literal",
        "hex_floating_point_literal",
    }
)

_PRIMITIVE_TYPES = frozenset({"integral_type", "floating_point_type", "boolean_type", "void_type"})

# Parents under which a switch_expression node is a switch statement
_STATEMENT_PARENTS = frozenset(
    {
        "block",
        "switch_block_statement_group",
        "switch_rule",
        "labeled_statement",
        "if_statement",
        "while_statement",
        "do_statement",
        "enhanced_for_statement",
    }
)

# Javadoc sections after these tags describe something other than the result
_IGNORED_DOC_TAGS = re.compile(r"^\s*\*?\s*@(param|throws|exception|see|since|author)\b", re.M)
_DOC_TAG = re.compile(r"^\s*\*?\s*@\w+", re.M)
_NOT_NULL_PHRASE = re.compile(
    r"\b(?:never|not|non|cannot|can't|won't|will\s+not)"
    r"(?:\s+(?:be|returns?|return))?[\s-]+(?:\{@code\s+)?null\b",
    re.I,
)
_NULL_WORD = re.compile(r"\bnull\b", re.I)


def doc_allows_null(doc: Optional[str]) -> bool:
    """True when a Javadoc says the result may be null.

    Only the description and ``@return`` sections are considered, and
    negated phrases such as "never null" or "non-null" do not count.
    """
    if not doc:
        return False
    kept: list[str] = []
    tags = list(_DOC_TAG.finditer(doc))
    kept.append(doc[: tags[0].start()] if tags else doc)
    for index, tag in enumerate(tags):
        end = tags[index + 1].start() if index + 1 < len(tags) else len(doc)
        if not _IGNORED_DOC_TAGS.match(doc, tag.start()):
            kept.append(doc[tag.start() : end])
    text = _NOT_NULL_PHRASE.sub(" ", " ".join(kept))
    return bool(_NULL_WORD.search(text))


def _first_error(node: Any) -> Optional[Any]:
    """Pre-order search for the first ERROR or missing node."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(reversed([c for c in current.children if c.has_error or c.is_missing]))
    return None


class SourceModelBuilder:
    """Builds SourceUnit trees from Java source text.

    The builder is stateless apart from its parser, which hands out one
    tree-sitter parser per thread, so a single instance can be shared by
    all worker threads.
    """

    def __init__(self, parser: Optional[TreeSitterParser] = None) -> None:
        self._parser = parser or TreeSitterParser()

    @property
    def languages(self) -> list[str]:
        return self._parser.languages

    def build(
        self, source: Union[str, bytes], path: Union[str, Path], language: str = "java"
    ) -> SourceUnit:
        """Parse source text into a SourceUnit.

        Args:
            source: File contents
            path: Path recorded in the unit and in finding locations
            language: Language identifier

        Returns:
            SourceUnit for the file

        Raises:
            UnsupportedLanguageError: If language has no grammar
            ParsingError: If the source has malformed syntax
        """
        path_str = Path(path).as_posix()
        code = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(code, language)
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root) or root
            line, column = bad.start_point[0] + 1, bad.start_point[1] + 1
            if bad.is_missing:
                reason = f"missing '{bad.type}' at line {line}, column {column}"
            else:
                token = _text(bad).strip().splitlines()[0][:40] if _text(bad).strip() else ""
                reason = f"unexpected '{token}' at line {line}, column {column}"
            raise ParsingError(Path(path_str), language, reason, line=line, column=column)

        try:
            types = tuple(_Converter().type_decls(root, owner=""))
        except RecursionError:
            raise ParsingError(Path(path_str), language, "source nesting is too deep")

        line_count = code.count(b"\n") + (0 if code.endswith(b"\n") or not code else 1)
        unit = SourceUnit(path=path_str, language=language, types=types, line_count=line_count)
        logger.debug("Built %s: %d types", path_str, len(types))
        return unit


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def _span(node: Any) -> Span:
    return Span.from_points(node.start_point, node.end_point)


def _named(node: Any) -> list[Any]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type not in COMMENTS]


class _Converter:
    """Recursive tree-sitter node to syntax-node conversion."""

    # -- declarations --

    def type_decls(self, parent: Any, owner: str) -> list[TypeDecl]:
        return [self.type_decl(c, owner) for c in _named(parent) if c.type in TYPE_DECLARATIONS]

    def type_decl(self, node: Any, owner: str) -> TypeDecl:
        name_node = node.child_by_field_name("name")
        name = _text(name_node) if name_node is not None else "<anonymous>"
        return self.class_body(
            node.child_by_field_name("body"),
            name,
            node.type.removesuffix("_declaration"),
            owner,
            _span(node),
        )

    def class_body(
        self, body: Optional[Any], name: str, kind: str, owner: str, span: Span
    ) -> TypeDecl:
        qualified = f"{owner}.{name}" if owner else name

        functions: list[FunctionDecl] = []
        nested: list[TypeDecl] = []
        for member in self._members(body):
            if member.type in TYPE_DECLARATIONS:
                nested.append(self.type_decl(member, qualified))
                continue
            if member.type in FUNCTION_DECLARATIONS:
                functions.append(self.function(member, qualified))
            nested.extend(self.embedded_types(member, qualified))

        return TypeDecl(
            name=name,
            kind=kind,
            functions=tuple(functions),
            types=tuple(nested),
            span=span,
        )

    def embedded_types(self, node: Any, owner: str) -> list[TypeDecl]:
        """Classes declared inside a member, such as local or anonymous classes.

        They become nested types of the enclosing class. Function bodies
        never contain them as statements or expressions.
        """
        found: list[TypeDecl] = []
        stack = [node]
        while stack:
            current = stack.pop()
            kind = current.type
            if current is not node and kind in TYPE_DECLARATIONS:
                found.append(self.type_decl(current, owner))
                continue
            children = _named(current)
            if kind in ("object_creation_expression", "enum_constant"):
                body = next((c for c in children if c.type == "class_body"), None)
                if body is not None:
                    if kind == "enum_constant":
                        name = _text(current.child_by_field_name("name"))
                        decl_kind = "enum_constant"
                    else:
                        name, decl_kind = "<anonymous>", "anonymous"
                    found.append(self.class_body(body, name, decl_kind, owner, _span(current)))
                    children = [c for c in children if c.type != "class_body"]
            stack.extend(reversed(children))
        return found

    def _members(self, body: Optional[Any]) -> list[Any]:
        if body is None:
            return []
        members: list[Any] = []
        for child in _named(body):
            if child.type == "enum_body_declarations":
                members.extend(_named(child))
            else:
                members.append(child)
        return members

    def function(self, node: Any, owner: str) -> FunctionDecl:
        is_constructor = node.type != "method_declaration"
        name = _text(node.child_by_field_name("name"))
        return_type = None
        if not is_constructor:
            return_type = self.type_ref(node.child_by_field_name("type"))
            dims = node.child_by_field_name("dimensions")
            if dims is not None:
                return_type = _with_dimensions(return_type, _text(dims).count("["))

        parameters: tuple[Parameter, ...] = ()
        params_node = node.child_by_field_name("parameters")
        if params_node is not None:
            parameters = self.parameters(params_node)

        body_node = node.child_by_field_name("body")
        body = self.block(body_node) if body_node is not None else None

        annotations = self.annotations(node)
        doc = self.javadoc(node)
        documented_nullable = bool(
            (return_type is not None and return_type.is_optional_like)
            or NULLABLE_ANNOTATIONS.intersection(annotations)
            or doc_allows_null(doc)
        )

        return FunctionDecl(
            name=name,
            owner=owner,
            return_type=return_type,
            parameters=parameters,
            body=body,
            documented_nullable=documented_nullable,
            annotations=annotations,
            doc=doc,
            is_constructor=is_constructor,
            span=_span(node),
        )

    def parameters(self, node: Any) -> tuple[Parameter, ...]:
        params: list[Parameter] = []
        for child in _named(node):
            if child.type == "formal_parameter":
                type_ref = self.type_ref(child.child_by_field_name("type"))
                dims = child.child_by_field_name("dimensions")
                if dims is not None:
                    type_ref = _with_dimensions(type_ref, _text(dims).count("["))
                name_node = child.child_by_field_name("name")
                params.append(
                    Parameter(_text(name_node), type_ref, len(params), span=_span(child))
                )
            elif child.type == "spread_parameter":
                parts = _named(child)
                type_node = next(
                    (c for c in parts if c.type not in ("modifiers", "variable_declarator")), None
                )
                declarator = next((c for c in parts if c.type == "variable_declarator"), None)
                name_node = declarator.child_by_field_name("name") if declarator else None
                type_ref = self.type_ref(type_node) if type_node is not None else TypeRef("Object")
                params.append(
                    Parameter(
                        _text(name_node) if name_node is not None else "args",
                        _with_dimensions(type_ref, 1),
                        len(params),
                        varargs=True,
                        span=_span(child),
                    )
                )
            # receiver parameters (``Foo this``) are not real parameters
        return tuple(params)

    def annotations(self, node: Any) -> tuple[str, ...]:
        names: list[str] = []
        for child in _named(node):
            if child.type != "modifiers":
                continue
            for modifier in _named(child):
                if modifier.type in ("marker_annotation", "annotation"):
                    name_node = modifier.child_by_field_name("name")
                    if name_node is not None:
                        names.append(_text(name_node).rsplit(".", 1)[-1])
        return tuple(names)

    def javadoc(self, node: Any) -> Optional[str]:
        sibling = node.prev_named_sibling
        if sibling is not None and sibling.type == "block_comment":
            text = _text(sibling)
            if text.startswith("/**"):
                return text
        return None

    # -- types --

    def type_ref(self, node: Optional[Any]) -> TypeRef:
        if node is None:
            return TypeRef("Object")
        kind = node.type
        if kind in _PRIMITIVE_TYPES:
            return TypeRef(_text(node), primitive=True)
        if kind == "generic_type":
            base = next(c for c in _named(node) if c.type != "type_arguments")
            args_node = next((c for c in _named(node) if c.type == "type_arguments"), None)
            arguments = tuple(self.type_ref(a) for a in _named(args_node)) if args_node else ()
            return TypeRef(self.type_ref(base).name, arguments)
        if kind == "array_type":
            element = self.type_ref(node.child_by_field_name("element"))
            dims = node.child_by_field_name("dimensions")
            return _with_dimensions(element, _text(dims).count("[") if dims is not None else 1)
        if kind == "annotated_type":
            inner = [c for c in _named(node) if c.type not in ("marker_annotation", "annotation")]
            return self.type_ref(inner[-1] if inner else None)
        if kind == "wildcard":
            return TypeRef("?")
        # type_identifier, scoped_type_identifier and anything unusual
        return TypeRef(re.sub(r"\s+", "", _text(node)))

    # -- statements --

    def block(self, node: Any) -> Block:
        if node.type in ("block", "constructor_body"):
            return Block(tuple(self.statement_list(_named(node))), span=_span(node))
        return Block((self.statement(node),), span=_span(node))

    def statement_list(self, nodes: list[Any]) -> list:
        statements: list = []
        for child in nodes:
            if child.type == "local_variable_declaration":
                statements.extend(self.local_variables(child))
            else:
                statements.append(self.statement(child))
        return statements

    def local_variables(self, node: Any) -> list[LocalVarDecl]:
        type_ref = self.type_ref(node.child_by_field_name("type"))
        decls: list[LocalVarDecl] = []
        for declarator in node.children_by_field_name("declarator"):
            var_type = type_ref
            dims = declarator.child_by_field_name("dimensions")
            if dims is not None:
                var_type = _with_dimensions(type_ref, _text(dims).count("["))
            value_node = declarator.child_by_field_name("value")
            decls.append(
                LocalVarDecl(
                    var_type,
                    _text(declarator.child_by_field_name("name")),
                    self.expression(value_node) if value_node is not None else None,
                    span=_span(node),
                )
            )
        return decls

    def statement(self, node: Any):
        kind = node.type
        span = _span(node)

        if kind in ("block", "constructor_body"):
            return self.block(node)
        if kind == "local_variable_declaration":
            decls = self.local_variables(node)
            return decls[0] if len(decls) == 1 else Block(tuple(decls), span=span)
        if kind == "expression_statement":
            return ExprStmt(self.expression(_named(node)[0]), span=span)
        if kind == "if_statement":
            alternative = node.child_by_field_name("alternative")
            return IfStmt(
                self.expression(node.child_by_field_name("condition")),
                self.statement(node.child_by_field_name("consequence")),
                self.statement(alternative) if alternative is not None else None,
                span=span,
            )
        if kind == "while_statement":
            return WhileStmt(
                self.expression(node.child_by_field_name("condition")),
                self.statement(node.child_by_field_name("body")),
                span=span,
            )
        if kind == "do_statement":
            return WhileStmt(
                self.expression(node.child_by_field_name("condition")),
                self.statement(node.child_by_field_name("body")),
                post_test=True,
                span=span,
            )
        if kind == "for_statement":
            return self.for_statement(node)
        if kind == "enhanced_for_statement":
            type_ref = self.type_ref(node.child_by_field_name("type"))
            dims = node.child_by_field_name("dimensions")
            if dims is not None:
                type_ref = _with_dimensions(type_ref, _text(dims).count("["))
            return ForEachStmt(
                type_ref,
                _text(node.child_by_field_name("name")),
                self.expression(node.child_by_field_name("value")),
                self.statement(node.child_by_field_name("body")),
                span=span,
            )
        if kind == "return_statement":
            values = _named(node)
            return ReturnStmt(self.expression(values[0]) if values else None, span=span)
        if kind == "throw_statement":
            return ThrowStmt(self.expression(_named(node)[0]), span=span)
        if kind in ("break_statement", "continue_statement"):
            labels = [c for c in _named(node) if c.type == "identifier"]
            return JumpStmt(
                kind.removesuffix("_statement"), _text(labels[0]) if labels else None, span=span
            )
        if kind in ("try_statement", "try_with_resources_statement"):
            return self.try_statement(node)
        if kind in ("switch_expression", "switch_statement"):
            return self.switch(node)
        if kind == "synchronized_statement":
            lock = next((c for c in _named(node) if c.type == "parenthesized_expression"), None)
            return OtherStmt(
                "synchronized",
                (self.expression(lock),) if lock is not None else (),
                (self.statement(node.child_by_field_name("body")),),
                span=span,
            )
        if kind == "labeled_statement":
            inner = [c for c in _named(node) if c.type != "identifier"]
            return OtherStmt(
                "labeled", (), tuple(self.statement(c) for c in inner[-1:]), span=span
            )
        if kind == "assert_statement":
            return OtherStmt(
                "assert", tuple(self.expression(c) for c in _named(node)), (), span=span
            )
        if kind == "yield_statement":
            return OtherStmt(
                "yield", tuple(self.expression(c) for c in _named(node)), (), span=span
            )
        if kind == "explicit_constructor_invocation":
            args_node = node.child_by_field_name("arguments")
            return OtherStmt("constructor_invocation", self.arguments(args_node), (), span=span)
        if kind in TYPE_DECLARATIONS or kind == "local_class_declaration":
            return OtherStmt("local_type", (), (), span=span)
        return OtherStmt(kind, (), (), span=span)

    def for_statement(self, node: Any) -> ForStmt:
        init: list = []
        for child in node.children_by_field_name("init"):
            if child.type == "local_variable_declaration":
                init.extend(self.local_variables(child))
            else:
                init.append(ExprStmt(self.expression(child), span=_span(child)))
        condition = node.child_by_field_name("condition")
        return ForStmt(
            tuple(init),
            self.expression(condition) if condition is not None else None,
            tuple(self.expression(u) for u in node.children_by_field_name("update")),
            self.statement(node.child_by_field_name("body")),
            span=_span(node),
        )

    def try_statement(self, node: Any) -> TryStmt:
        resources: list = []
        resource_list = node.child_by_field_name("resources")
        if resource_list is not None:
            for resource in _named(resource_list):
                if resource.type != "resource":
                    continue
                name_node = resource.child_by_field_name("name")
                value_node = resource.child_by_field_name("value")
                if name_node is not None:
                    resources.append(
                        LocalVarDecl(
                            self.type_ref(resource.child_by_field_name("type")),
                            _text(name_node),
                            self.expression(value_node) if value_node is not None else None,
                            span=_span(resource),
                        )
                    )
                else:
                    inner = _named(resource)
                    if inner:
                        resources.append(ExprStmt(self.expression(inner[-1]), span=_span(resource)))

        catches: list[CatchClause] = []
        finally_block: Optional[Block] = None
        for child in _named(node):
            if child.type == "catch_clause":
                catches.append(self.catch_clause(child))
            elif child.type == "finally_clause":
                inner = next((c for c in _named(child) if c.type == "block"), None)
                if inner is not None:
                    finally_block = self.block(inner)

        return TryStmt(
            self.block(node.child_by_field_name("body")),
            tuple(catches),
            finally_block,
            tuple(resources),
            span=_span(node),
        )

    def catch_clause(self, node: Any) -> CatchClause:
        param = next((c for c in _named(node) if c.type == "catch_formal_parameter"), None)
        types: tuple[TypeRef, ...] = ()
        name = "_"
        if param is not None:
            catch_type = next((c for c in _named(param) if c.type == "catch_type"), None)
            if catch_type is not None:
                types = tuple(self.type_ref(t) for t in _named(catch_type))
            name_node = param.child_by_field_name("name")
            if name_node is not None:
                name = _text(name_node)
        return CatchClause(
            types, name, self.block(node.child_by_field_name("body")), span=_span(node)
        )

    def switch(self, node: Any) -> SwitchStmt:
        cases: list[SwitchCase] = []
        body = node.child_by_field_name("body")
        for group in _named(body) if body is not None else []:
            if group.type not in ("switch_block_statement_group", "switch_rule"):
                continue
            children = _named(group)
            labels = tuple(
                re.sub(r"\s+", " ", _text(c)) for c in children if c.type == "switch_label"
            )
            statements = [c for c in children if c.type != "switch_label"]
            cases.append(
                SwitchCase(
                    labels,
                    tuple(self.statement_list(statements)),
                    arrow=group.type == "switch_rule",
                    span=_span(group),
                )
            )
        return SwitchStmt(
            self.expression(node.child_by_field_name("condition")),
            tuple(cases),
            span=_span(node),
        )

    # -- expressions --

    def arguments(self, node: Optional[Any]) -> tuple:
        if node is None:
            return ()
        return tuple(self.expression(c) for c in _named(node))

    def expression(self, node: Any):
        kind = node.type
        span = _span(node)

        if kind == "parenthesized_expression":
            inner = _named(node)
            return self.expression(inner[0]) if inner else Opaque("empty", span=span)
        if kind == "null_literal":
            return Literal("null", "null", span=span)
        if kind in ("true", "false"):
            return Literal("boolean", kind, span=span)
        if kind in _NUMBER_LITERALS:
            return Literal("number", _text(node), span=span)
        if kind in ("string_literal", "text_block"):
            return Literal("string", _text(node), span=span)
        if kind == "character_literal":
            return Literal("char", _text(node), span=span)
        if kind == "class_literal":
            return Literal("class", _text(node), span=span)
        if kind in ("identifier", "this", "super"):
            return VariableRef(_text(node), span=span)
        if kind == "field_access":
            return FieldAccess(
                self.expression(node.child_by_field_name("object")),
                _text(node.child_by_field_name("field")),
                span=span,
            )
        if kind == "method_invocation":
            receiver_node = node.child_by_field_name("object")
            return MethodCall(
                self.expression(receiver_node) if receiver_node is not None else None,
                _text(node.child_by_field_name("name")),
                self.arguments(node.child_by_field_name("arguments")),
                span=span,
            )
        if kind == "binary_expression":
            return BinaryOp(
                _text(node.child_by_field_name("operator")),
                self.expression(node.child_by_field_name("left")),
                self.expression(node.child_by_field_name("right")),
                span=span,
            )
        if kind == "ternary_expression":
            return Conditional(
                self.expression(node.child_by_field_name("condition")),
                self.expression(node.child_by_field_name("consequence")),
                self.expression(node.child_by_field_name("alternative")),
                span=span,
            )
        if kind == "unary_expression":
            return UnaryOp(
                _text(node.child_by_field_name("operator")),
                self.expression(node.child_by_field_name("operand")),
                span=span,
            )
        if kind == "update_expression":
            operand = _named(node)[0]
            operator = "++" if "++" in _text(node) else "--"
            return Assignment(self.expression(operand), operator, None, span=span)
        if kind == "assignment_expression":
            return Assignment(
                self.expression(node.child_by_field_name("left")),
                _text(node.child_by_field_name("operator")),
                self.expression(node.child_by_field_name("right")),
                span=span,
            )
        if kind == "object_creation_expression":
            return ObjectCreation(
                self.type_ref(node.child_by_field_name("type")),
                self.arguments(node.child_by_field_name("arguments")),
                has_body=any(c.type == "class_body" for c in _named(node)),
                span=span,
            )
        if kind == "array_access":
            return ArrayAccess(
                self.expression(node.child_by_field_name("array")),
                self.expression(node.child_by_field_name("index")),
                span=span,
            )
        if kind == "cast_expression":
            type_text = " & ".join(_normalise(t) for t in node.children_by_field_name("type"))
            return Opaque(
                "cast",
                (self.expression(node.child_by_field_name("value")),),
                text=type_text,
                span=span,
            )
        if kind == "instanceof_expression":
            left = node.child_by_field_name("left")
            tested = _normalise(node)[len(_normalise(left)) :].strip()
            return Opaque(
                "instanceof",
                (self.expression(left),),
                text=tested.removeprefix("instanceof").strip(),
                span=span,
            )
        if kind in ("lambda_expression", "method_reference"):
            return Opaque(kind.removesuffix("_expression"), text=_normalise(node), span=span)
        if kind == "array_creation_expression":
            children: list = []
            for child in _named(node):
                if child.type == "dimensions_expr":
                    children.extend(self.expression(c) for c in _named(child))
                elif child.type == "array_initializer":
                    children.append(self.expression(child))
            element = node.child_by_field_name("type")
            return Opaque(
                "array_creation",
                tuple(children),
                text=_normalise(element) if element is not None else "",
                span=span,
            )
        if kind == "array_initializer":
            return Opaque(
                "array_initializer", tuple(self.expression(c) for c in _named(node)), span=span
            )
        if kind == "switch_expression":
            subject = self.expression(node.child_by_field_name("condition"))
            results = tuple(self.expression(r) for r in _switch_results(node))
            return Opaque("switch", (subject, *results), text=_normalise(node), span=span)
        return Opaque(kind, text=_normalise(node), span=span)


def _normalise(node: Any) -> str:
    return re.sub(r"\s+", " ", _text(node)).strip()


def _switch_results(node: Any) -> list[Any]:
    """Expression nodes a switch expression can evaluate to.

    Arrow arms contribute their expression. Block arms and old-style groups
    contribute the values of their ``yield`` statements. Yields inside a
    nested switch expression, lambda or class body belong to that construct.
    """
    results: list[Any] = []
    body = node.child_by_field_name("body")
    for arm in _named(body) if body is not None else []:
        if arm.type not in ("switch_rule", "switch_block_statement_group"):
            continue
        parts = [c for c in _named(arm) if c.type != "switch_label"]
        if arm.type == "switch_rule" and parts and parts[0].type == "expression_statement":
            results.extend(_named(parts[0])[:1])
            continue
        stack = list(reversed(parts))
        while stack:
            current = stack.pop()
            if current.type == "yield_statement":
                results.extend(_named(current)[:1])
                continue
            if current.type in ("lambda_expression", "class_body"):
                continue
            in_statement = current.type in _STATEMENT_PARENTS
            stack.extend(
                c
                for c in reversed(_named(current))
                if c.type != "switch_expression" or in_statement
            )
    return results


def _with_dimensions(type_ref: TypeRef, extra: int) -> TypeRef:
    return TypeRef(
        type_ref.name, type_ref.arguments, type_ref.dimensions + extra, type_ref.primitive
    )
