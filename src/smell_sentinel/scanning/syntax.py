"""Language-neutral structural tree for parsed source files.

Every node is a frozen dataclass. Spans are excluded from equality and
hashing, so two subtrees compare equal when they are written the same way
regardless of where they appear. Detectors rely on that for branch and
call-chain comparison.

The node kinds form a closed union. ``child_nodes`` matches them
exhaustively and raises ``TypeError`` on anything else, so a new node kind
cannot be skipped silently by a traversal.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class Span:
    """Source range. Lines and columns are 1-based, end column inclusive."""

    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def from_points(cls, start: tuple[int, int], end: tuple[int, int]) -> Span:
        """Build from tree-sitter (row, column) points, which are 0-based."""
        return cls(start[0] + 1, start[1] + 1, end[0] + 1, max(end[1], 1))


UNKNOWN_SPAN = Span(1, 1, 1, 1)


def _span() -> Span:
    return field(default=UNKNOWN_SPAN, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

CONTAINER_TYPES = frozenset(
    {
        "Iterable",
        "Collection",
        "List",
        "Set",
        "SortedSet",
        "NavigableSet",
        "Queue",
        "Deque",
        "Map",
        "SortedMap",
        "NavigableMap",
        "ArrayList",
        "LinkedList",
        "CopyOnWriteArrayList",
        "HashSet",
        "LinkedHashSet",
        "TreeSet",
        "EnumSet",
        "ArrayDeque",
        "PriorityQueue",
        "HashMap",
        "LinkedHashMap",
        "TreeMap",
        "EnumMap",
        "ConcurrentHashMap",
        "ConcurrentMap",
        "Multimap",
        "ImmutableList",
        "ImmutableSet",
        "ImmutableMap",
    }
)

OPTIONAL_TYPES = frozenset({"Optional", "OptionalInt", "OptionalLong", "OptionalDouble"})

BOOLEAN_TYPES = frozenset({"boolean", "Boolean", "java.lang.Boolean"})


@dataclass(frozen=True)
class TypeRef:
    """A type as written in source.

    Attributes:
        name: Type name without type arguments, possibly qualified
        arguments: Generic type arguments
        dimensions: Array dimensions
        primitive: True for primitive types and void
    """

    name: str
    arguments: tuple[TypeRef, ...] = ()
    dimensions: int = 0
    primitive: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_void(self) -> bool:
        return self.name == "void" and self.dimensions == 0

    @property
    def is_reference(self) -> bool:
        return not self.primitive or self.dimensions > 0

    @property
    def is_boolean(self) -> bool:
        return self.dimensions == 0 and self.name in BOOLEAN_TYPES

    @property
    def is_container(self) -> bool:
        return self.dimensions > 0 or self.simple_name in CONTAINER_TYPES

    @property
    def is_optional_like(self) -> bool:
        return self.dimensions == 0 and self.simple_name in OPTIONAL_TYPES

    def __str__(self) -> str:
        text = self.name
        if self.arguments:
            text += "<" + ", ".join(str(arg) for arg in self.arguments) + ">"
        return text + "[]" * self.dimensions


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """Literal value. ``kind`` is null, boolean, number, string, char or class."""

    kind: str
    text: str
    span: Span = _span()

    @property
    def is_null(self) -> bool:
        return self.kind == "null"


@dataclass(frozen=True)
class VariableRef:
    """Bare name: a local, parameter, field, or ``this``/``super``."""

    name: str
    span: Span = _span()


@dataclass(frozen=True)
class FieldAccess:
    target: Expression
    name: str
    span: Span = _span()


@dataclass(frozen=True)
class MethodCall:
    """Method invocation. ``receiver`` is None for unqualified calls."""

    receiver: Optional[Expression]
    name: str
    arguments: tuple[Expression, ...] = ()
    span: Span = _span()


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: Expression
    right: Expression
    span: Span = _span()


@dataclass(frozen=True)
class Conditional:
    """Ternary ``condition ? consequence : alternative``."""

    condition: Expression
    consequence: Expression
    alternative: Expression
    span: Span = _span()


@dataclass(frozen=True)
class UnaryOp:
    operator: str
    operand: Expression
    span: Span = _span()


@dataclass(frozen=True)
class Assignment:
    """Assignment, compound assignment, or ``++``/``--`` (value is None)."""

    target: Expression
    operator: str
    value: Optional[Expression] = None
    span: Span = _span()


@dataclass(frozen=True)
class ObjectCreation:
    """``new T(args)``. ``has_body`` marks an anonymous class."""

    type_ref: TypeRef
    arguments: tuple[Expression, ...] = ()
    has_body: bool = False
    span: Span = _span()


@dataclass(frozen=True)
class ArrayAccess:
    array: Expression
    index: Expression
    span: Span = _span()


@dataclass(frozen=True)
class Opaque:
    """Any other expression (casts, lambdas, array creation, switch, ...).

    Only sub-expressions evaluated in the enclosing function are kept as
    children. Lambda and method-reference bodies are not; their
    whitespace-normalised source is kept in ``text`` instead, so two
    different lambdas never compare equal. For casts, ``instanceof`` and
    array creation ``text`` is the type involved.
    """

    kind: str
    children: tuple[Expression, ...] = ()
    text: str = ""
    span: Span = _span()


Expression = Union[
    Literal,
    VariableRef,
    FieldAccess,
    MethodCall,
    BinaryOp,
    Conditional,
    UnaryOp,
    Assignment,
    ObjectCreation,
    ArrayAccess,
    Opaque,
]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Block:
    statements: tuple[Statement, ...] = ()
    span: Span = _span()


@dataclass(frozen=True)
class LocalVarDecl:
    """One declared local. Multi-declarator statements are split."""

    type_ref: TypeRef
    name: str
    value: Optional[Expression] = None
    span: Span = _span()


@dataclass(frozen=True)
class ExprStmt:
    expression: Expression
    span: Span = _span()


@dataclass(frozen=True)
class IfStmt:
    condition: Expression
    consequence: Statement
    alternative: Optional[Statement] = None
    span: Span = _span()


@dataclass(frozen=True)
class WhileStmt:
    """``while`` loop, or ``do``/``while`` when ``post_test`` is set."""

    condition: Expression
    body: Statement
    post_test: bool = False
    span: Span = _span()


@dataclass(frozen=True)
class ForStmt:
    init: tuple[Statement, ...]
    condition: Optional[Expression]
    update: tuple[Expression, ...]
    body: Statement
    span: Span = _span()


@dataclass(frozen=True)
class ForEachStmt:
    type_ref: TypeRef
    name: str
    iterable: Expression
    body: Statement
    span: Span = _span()


@dataclass(frozen=True)
class ReturnStmt:
    value: Optional[Expression] = None
    span: Span = _span()


@dataclass(frozen=True)
class ThrowStmt:
    value: Expression
    span: Span = _span()


@dataclass(frozen=True)
class JumpStmt:
    """``break`` or ``continue``."""

    kind: str
    label: Optional[str] = None
    span: Span = _span()


@dataclass(frozen=True)
class CatchClause:
    types: tuple[TypeRef, ...]
    name: str
    body: Block
    span: Span = _span()


@dataclass(frozen=True)
class TryStmt:
    body: Block
    catches: tuple[CatchClause, ...] = ()
    finally_block: Optional[Block] = None
    resources: tuple[Statement, ...] = ()
    span: Span = _span()


@dataclass(frozen=True)
class SwitchCase:
    """One ``case``/``default`` group. ``arrow`` marks ``case X ->`` rules."""

    labels: tuple[str, ...]
    body: tuple[Statement, ...]
    arrow: bool = False
    span: Span = _span()


@dataclass(frozen=True)
class SwitchStmt:
    subject: Expression
    cases: tuple[SwitchCase, ...] = ()
    span: Span = _span()


@dataclass(frozen=True)
class OtherStmt:
    """assert, synchronized, labeled, yield, this()/super() calls, local types."""

    kind: str
    expressions: tuple[Expression, ...] = ()
    bodies: tuple[Statement, ...] = ()
    span: Span = _span()


Statement = Union[
    Block,
    LocalVarDecl,
    ExprStmt,
    IfStmt,
    WhileStmt,
    ForStmt,
    ForEachStmt,
    ReturnStmt,
    ThrowStmt,
    JumpStmt,
    TryStmt,
    SwitchStmt,
    OtherStmt,
]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Parameter:
    name: str
    type_ref: TypeRef
    position: int
    varargs: bool = False
    span: Span = _span()

    @property
    def is_boolean(self) -> bool:
        return not self.varargs and self.type_ref.is_boolean


@dataclass(frozen=True)
class FunctionDecl:
    """A method or constructor.

    Attributes:
        name: Method name (the type name for constructors)
        owner: Qualified name of the declaring type, e.g. ``Outer.Inner``
        return_type: Declared return type, None for constructors
        parameters: Ordered parameters
        body: Method body, None for abstract and interface methods
        documented_nullable: The declared contract says null is a valid
            result (Optional-like return type, nullable annotation, or a
            Javadoc that says so)
        annotations: Simple names of the method's annotations
        doc: Raw Javadoc comment, if any
        is_constructor: True for constructors
    """

    name: str
    owner: str
    return_type: Optional[TypeRef]
    parameters: tuple[Parameter, ...] = ()
    body: Optional[Block] = None
    documented_nullable: bool = False
    annotations: tuple[str, ...] = ()
    doc: Optional[str] = None
    is_constructor: bool = False
    span: Span = _span()

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.name}" if self.owner else self.name


@dataclass(frozen=True)
class TypeDecl:
    """A class, interface, enum or record with its members.

    Classes declared inside members are nested types too. Anonymous classes
    have kind ``anonymous`` and enum constants with a body have kind
    ``enum_constant``.
    """

    name: str
    kind: str
    functions: tuple[FunctionDecl, ...] = ()
    types: tuple[TypeDecl, ...] = ()
    span: Span = _span()

    def iter_types(self) -> Iterator[TypeDecl]:
        yield self
        for nested in self.types:
            yield from nested.iter_types()


@dataclass(frozen=True)
class SourceUnit:
    """One parsed file."""

    path: str
    language: str
    types: tuple[TypeDecl, ...] = ()
    line_count: int = 0

    def iter_types(self) -> Iterator[TypeDecl]:
        for type_decl in self.types:
            yield from type_decl.iter_types()

    def functions(self) -> Iterator[FunctionDecl]:
        """Every function of every type, in declaration order."""
        for type_decl in self.iter_types():
            yield from type_decl.functions


# ---------------------------------------------------------------------------
# Derived facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Selector:
    """One link of a call chain. ``arguments`` is None for a field access."""

    name: str
    arguments: Optional[tuple[Expression, ...]] = None

    @property
    def is_call(self) -> bool:
        return self.arguments is not None


@dataclass(frozen=True)
class CallChain:
    """A receiver-rooted chain such as ``config.getEntities().getDownload()``."""

    root: str
    selectors: tuple[Selector, ...]

    @property
    def has_call(self) -> bool:
        return any(s.is_call for s in self.selectors)

    def extends(self, other: CallChain) -> bool:
        """True when ``other`` is a strict prefix of this chain."""
        n = len(other.selectors)
        return (
            self.root == other.root
            and len(self.selectors) > n
            and self.selectors[:n] == other.selectors
        )


@dataclass(frozen=True)
class ConstructorCallSite:
    """A ``new T(...)`` bound to a local, with the setters that follow it.

    Attributes:
        type_name: Simple name of the constructed type
        argument_count: Number of constructor arguments
        binding: Local variable the new object is assigned to
        mutators: Setter selectors invoked on the binding directly after
            construction, in order, within the same block
        path: File the site is in
        span: Location of the construction statement
    """

    type_name: str
    argument_count: int
    binding: str
    mutators: tuple[str, ...]
    path: str
    span: Span = _span()


def chain_of(expr: Expression) -> Optional[CallChain]:
    """Unwind a FieldAccess/MethodCall chain down to its root variable.

    Returns None when the chain is not rooted at a plain name (for example
    an unqualified call or a call on a ``new`` expression).
    """
    selectors: list[Selector] = []
    node: Optional[Expression] = expr
    while True:
        if isinstance(node, MethodCall):
            selectors.append(Selector(node.name, node.arguments))
            node = node.receiver
        elif isinstance(node, FieldAccess):
            selectors.append(Selector(node.name))
            node = node.target
        elif isinstance(node, VariableRef):
            if not selectors:
                return None
            return CallChain(node.name, tuple(reversed(selectors)))
        else:
            return None


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

Node = Union[
    Expression,
    Statement,
    CatchClause,
    SwitchCase,
    Parameter,
    FunctionDecl,
    TypeDecl,
    SourceUnit,
]


def _present(*nodes) -> tuple:
    return tuple(n for n in nodes if n is not None)


def child_nodes(node: Node) -> tuple:
    """Direct children of a node, in source order.

    Raises:
        TypeError: For a node kind this traversal does not know
    """
    # Expressions
    if isinstance(node, (Literal, VariableRef)):
        return ()
    if isinstance(node, FieldAccess):
        return (node.target,)
    if isinstance(node, MethodCall):
        return _present(node.receiver) + node.arguments
    if isinstance(node, BinaryOp):
        return (node.left, node.right)
    if isinstance(node, Conditional):
        return (node.condition, node.consequence, node.alternative)
    if isinstance(node, UnaryOp):
        return (node.operand,)
    if isinstance(node, Assignment):
        return _present(node.target, node.value)
    if isinstance(node, ObjectCreation):
        return node.arguments
    if isinstance(node, ArrayAccess):
        return (node.array, node.index)
    if isinstance(node, Opaque):
        return node.children

    # Statements
    if isinstance(node, Block):
        return node.statements
    if isinstance(node, LocalVarDecl):
        return _present(node.value)
    if isinstance(node, ExprStmt):
        return (node.expression,)
    if isinstance(node, IfStmt):
        return _present(node.condition, node.consequence, node.alternative)
    if isinstance(node, WhileStmt):
        if node.post_test:
            return (node.body, node.condition)
        return (node.condition, node.body)
    if isinstance(node, ForStmt):
        return node.init + _present(node.condition) + node.update + (node.body,)
    if isinstance(node, ForEachStmt):
        return (node.iterable, node.body)
    if isinstance(node, ReturnStmt):
        return _present(node.value)
    if isinstance(node, ThrowStmt):
        return (node.value,)
    if isinstance(node, JumpStmt):
        return ()
    if isinstance(node, TryStmt):
        return node.resources + (node.body,) + node.catches + _present(node.finally_block)
    if isinstance(node, CatchClause):
        return (node.body,)
    if isinstance(node, SwitchStmt):
        return (node.subject,) + node.cases
    if isinstance(node, SwitchCase):
        return node.body
    if isinstance(node, OtherStmt):
        return node.expressions + node.bodies

    # Declarations
    if isinstance(node, Parameter):
        return ()
    if isinstance(node, FunctionDecl):
        return node.parameters + _present(node.body)
    if isinstance(node, TypeDecl):
        return node.functions + node.types
    if isinstance(node, SourceUnit):
        return node.types

    raise TypeError(f"Unknown syntax node: {type(node).__name__}")


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of ``node`` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(child_nodes(current)))


def referenced_names(node: Node) -> set[str]:
    """Names of every VariableRef under ``node``."""
    return {n.name for n in walk(node) if isinstance(n, VariableRef)}


_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")


def mentioned_names(node: Node) -> set[str]:
    """Like ``referenced_names`` but also counts identifiers in lambda text.

    Lambda and method-reference bodies are not modelled as subtrees, so a
    local captured by one only shows up as a token of ``Opaque.text``.
    """
    names = referenced_names(node)
    for n in walk(node):
        if isinstance(n, Opaque) and n.kind in ("lambda", "method_reference"):
            names.update(_IDENTIFIER.findall(n.text))
    return names


def assigned_names(node: Node) -> set[str]:
    """Locals declared, assigned, incremented or caught under ``node``.

    Only plain-name targets count. ``a.b = x`` mutates ``a`` but does not
    rebind it.
    """
    names: set[str] = set()
    for n in walk(node):
        if isinstance(n, Assignment) and isinstance(n.target, VariableRef):
            names.add(n.target.name)
        elif isinstance(n, LocalVarDecl):
            names.add(n.name)
        elif isinstance(n, ForEachStmt):
            names.add(n.name)
        elif isinstance(n, CatchClause):
            names.add(n.name)
    return names
