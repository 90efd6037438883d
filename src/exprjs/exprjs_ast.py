"""
Defines the typed expression tree consumed by the exprjs JavaScript compiler.

The tree is built by the caller (a query builder, a DSL, a test) and is never
modified by the compiler. Every node is a frozen dataclass with a class-level
`kind` string; the emitter dispatches on it (`emit_<kind>`), the same way
conversion extensions match on the node classes.

Node kinds:
    constant, parameter, member, binary, unary, conditional, call, invocation,
    lambda, new, new_array, list_init, member_init, default, joined_str,
    formatted_value

Statement kinds (rejected by the emitter):
    block, loop, try, switch, goto, label, type_test

Static types are ordinary Python type objects (`int`, `str`, `list[Phone]`,
an `enum.Flag` subclass, a user class). `type(None)` stands for "void".

Example:
    doc = Parameter("doc", Person)
    body = Binary(ExprType.GREATER_THAN, Member(doc, "Age", int), Constant(18))
    tree = Lambda((doc,), body)   # doc => doc.Age > 18
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar

from exprjs.exprjs_constants import COMPARISON_OPERATORS, ExprType

NoneType = type(None)


def _type_name(type_: Any) -> Any:
    if isinstance(type_, type):
        return type_.__qualname__
    if type_ is None:
        return None
    return repr(type_)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    if isinstance(value, ExprType):
        return value.value
    if isinstance(value, type):
        return _type_name(value)
    return value


@dataclass(frozen=True, repr=False)
class Node:
    """Base class of all expression tree nodes.

    Subclasses declare their fields as dataclass fields and set `kind`.
    Sequence fields are normalized to tuples so nodes stay hashable.
    """

    kind: ClassVar[str] = "node"

    def _freeze(self, name: str) -> None:
        object.__setattr__(self, name, tuple(getattr(self, name)))

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        parts: list[str] = []
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None or value == ():
                continue
            if isinstance(value, tuple):
                preview = ", ".join(repr(v) for v in value[:3])
                if len(value) > 3:
                    preview += ", ..."
                parts.append(f"{f.name}=[{preview}]")
            elif isinstance(value, ExprType):
                parts.append(f"{f.name}={value.value}")
            elif isinstance(value, type) or f.name in ("type_", "declaring_type"):
                continue
            else:
                parts.append(f"{f.name}={value!r}")
        return f"{type(self).__name__}({', '.join(parts)})"

    def to_dict(self) -> dict[str, Any]:
        """Converts the node (and all descendants) into plain dictionaries.

        Types are rendered by qualified name and operators by their value, so
        the result can be dumped as JSON for debugging.
        """
        result: dict[str, Any] = {"kind": self.kind}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name in ("type_", "declaring_type", "element_type", "return_type"):
                result[f.name.rstrip("_")] = _type_name(value)
            else:
                result[f.name] = _to_plain(value)
        return result


@dataclass(frozen=True, repr=False)
class Constant(Node):
    kind: ClassVar[str] = "constant"
    value: Any
    type_: Any = None

    def __post_init__(self) -> None:
        if self.type_ is None:
            self._set("type_", type(self.value))


@dataclass(frozen=True, repr=False)
class Parameter(Node):
    kind: ClassVar[str] = "parameter"
    name: str
    type_: Any = object
    by_ref: bool = False


@dataclass(frozen=True, repr=False)
class Member(Node):
    """Field or property read. `expr` is None for static members, in which
    case `declaring_type` names the owner (a class or a module)."""

    kind: ClassVar[str] = "member"
    expr: Node | None
    name: str
    type_: Any = object
    declaring_type: Any = None

    def __post_init__(self) -> None:
        if self.declaring_type is None and self.expr is not None:
            self._set("declaring_type", getattr(self.expr, "type_", None))


def _infer_binary_type(op: ExprType, left: Node, right: Node) -> Any:
    if op in COMPARISON_OPERATORS and op not in (ExprType.AND_ALSO, ExprType.OR_ELSE):
        return bool
    left_type = getattr(left, "type_", object)
    right_type = getattr(right, "type_", object)
    if op is ExprType.ADD and (left_type is str or right_type is str):
        return str
    if op is ExprType.DIVIDE:
        return float
    if op is ExprType.ARRAY_INDEX:
        args = getattr(left_type, "__args__", None)
        return args[0] if args else object
    if op is ExprType.ASSIGN:
        return left_type
    if float in (left_type, right_type) and op not in (ExprType.AND, ExprType.OR):
        return float
    return left_type


@dataclass(frozen=True, repr=False)
class Binary(Node):
    kind: ClassVar[str] = "binary"
    op: ExprType
    left: Node
    right: Node
    type_: Any = None

    def __post_init__(self) -> None:
        if self.type_ is None:
            self._set("type_", _infer_binary_type(self.op, self.left, self.right))


@dataclass(frozen=True, repr=False)
class Unary(Node):
    kind: ClassVar[str] = "unary"
    op: ExprType
    operand: Node
    type_: Any = None

    def __post_init__(self) -> None:
        if self.type_ is None:
            if self.op is ExprType.NOT:
                inferred: Any = bool
            elif self.op is ExprType.ARRAY_LENGTH:
                inferred = int
            else:
                inferred = getattr(self.operand, "type_", object)
            self._set("type_", inferred)


@dataclass(frozen=True, repr=False)
class Conditional(Node):
    kind: ClassVar[str] = "conditional"
    test: Node
    if_true: Node
    if_false: Node
    type_: Any = None

    def __post_init__(self) -> None:
        if self.type_ is None:
            self._set("type_", getattr(self.if_true, "type_", object))


@dataclass(frozen=True, repr=False)
class Call(Node):
    """Method or function call.

    `obj` is the receiver for instance methods and None for static calls,
    where `declaring_type` is the owning class or module (`builtins` for the
    built-in functions).
    """

    kind: ClassVar[str] = "call"
    obj: Node | None
    method: str
    args: tuple[Node, ...] = ()
    declaring_type: Any = None
    type_: Any = object

    def __post_init__(self) -> None:
        self._freeze("args")
        if self.declaring_type is None and self.obj is not None:
            self._set("declaring_type", getattr(self.obj, "type_", None))

    @property
    def is_static(self) -> bool:
        return self.obj is None


@dataclass(frozen=True, repr=False)
class Invocation(Node):
    kind: ClassVar[str] = "invocation"
    expr: Node
    args: tuple[Node, ...] = ()
    type_: Any = object

    def __post_init__(self) -> None:
        self._freeze("args")


@dataclass(frozen=True, repr=False)
class Lambda(Node):
    kind: ClassVar[str] = "lambda"
    params: tuple[Parameter, ...]
    body: Node
    return_type: Any = None

    def __post_init__(self) -> None:
        self._freeze("params")
        if self.return_type is None:
            self._set("return_type", getattr(self.body, "type_", object))

    @property
    def type_(self) -> Any:
        return Lambda


@dataclass(frozen=True, repr=False)
class New(Node):
    """Object construction.

    With `members` set the construction is keyed (an anonymous record): each
    argument initializes the member of the same position.
    """

    kind: ClassVar[str] = "new"
    type_: Any
    args: tuple[Node, ...] = ()
    members: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        self._freeze("args")
        if self.members is not None:
            self._freeze("members")
            if len(self.members) != len(self.args):
                raise ValueError("New: members and args must have the same length")


@dataclass(frozen=True, repr=False)
class NewArray(Node):
    kind: ClassVar[str] = "new_array"
    items: tuple[Node, ...] = ()
    element_type: Any = object

    def __post_init__(self) -> None:
        self._freeze("items")

    @property
    def type_(self) -> Any:
        return list[self.element_type]  # type: ignore[name-defined]


@dataclass(frozen=True, repr=False)
class ElementInit(Node):
    """One `add` call of a collection initializer: one argument for lists,
    a key and a value for dictionaries."""

    kind: ClassVar[str] = "element_init"
    args: tuple[Node, ...]

    def __post_init__(self) -> None:
        self._freeze("args")


@dataclass(frozen=True, repr=False)
class ListInit(Node):
    kind: ClassVar[str] = "list_init"
    new: New
    initializers: tuple[ElementInit, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("initializers")

    @property
    def type_(self) -> Any:
        return self.new.type_


@dataclass(frozen=True, repr=False)
class MemberAssignment(Node):
    kind: ClassVar[str] = "member_assignment"
    name: str
    expr: Node


@dataclass(frozen=True, repr=False)
class MemberListBinding(Node):
    kind: ClassVar[str] = "member_list_binding"
    name: str
    initializers: tuple[ElementInit, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("initializers")


@dataclass(frozen=True, repr=False)
class MemberInit(Node):
    kind: ClassVar[str] = "member_init"
    new: New
    bindings: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("bindings")

    @property
    def type_(self) -> Any:
        return self.new.type_


@dataclass(frozen=True, repr=False)
class Default(Node):
    kind: ClassVar[str] = "default"
    type_: Any


@dataclass(frozen=True, repr=False)
class FormattedValue(Node):
    """A value rendered through a format spec, as inside an f-string."""

    kind: ClassVar[str] = "formatted_value"
    value: Node
    format_spec: str | None = None

    @property
    def type_(self) -> Any:
        return str if self.format_spec else getattr(self.value, "type_", object)


@dataclass(frozen=True, repr=False)
class JoinedStr(Node):
    """String concatenation of all `values`, left to right."""

    kind: ClassVar[str] = "joined_str"
    values: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        self._freeze("values")

    @property
    def type_(self) -> Any:
        return str


# Statement-shaped nodes. They exist so callers can hand over whatever their
# front-end produced; the emitter rejects every one of them.


@dataclass(frozen=True, repr=False)
class Block(Node):
    kind: ClassVar[str] = "block"
    expressions: tuple[Node, ...] = ()


@dataclass(frozen=True, repr=False)
class Loop(Node):
    kind: ClassVar[str] = "loop"
    body: Node | None = None


@dataclass(frozen=True, repr=False)
class Try(Node):
    kind: ClassVar[str] = "try"
    body: Node | None = None
    handlers: tuple[Node, ...] = ()


@dataclass(frozen=True, repr=False)
class Switch(Node):
    kind: ClassVar[str] = "switch"
    value: Node | None = None
    cases: tuple[Node, ...] = ()


@dataclass(frozen=True, repr=False)
class Goto(Node):
    kind: ClassVar[str] = "goto"
    target: str = ""


@dataclass(frozen=True, repr=False)
class Label(Node):
    kind: ClassVar[str] = "label"
    name: str = ""


@dataclass(frozen=True, repr=False)
class TypeTest(Node):
    kind: ClassVar[str] = "type_test"
    expr: Node | None = None
    type_operand: Any = field(default=object)


STATEMENT_KINDS = frozenset(
    cls.kind for cls in (Block, Loop, Try, Switch, Goto, Label, TypeTest)
)
