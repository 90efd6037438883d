"""
Translates exprjs expression trees into JavaScript source text.

This module defines the `JavascriptEmitter` class, the default per-node-kind
emission logic of the compiler. It is driven by `JsCompiler`, but can be used
directly to render sub-expressions.

Supported Features:
    - Literals: numbers, booleans, strings, null, enums, regular expressions,
      list/tuple/dict constants, values read through closure roots
    - Operators: arithmetic, bitwise, logical, comparison, membership (`in`),
      nullish coalescing, indexing, assignment, prefix/postfix unary operators
    - Conditionals, lambdas (arrow or `function` form), invocations
    - Object/array shapes: keyed construction, `new`, array and collection
      initializers
    - Standard-library rewrites: string methods, indexers, `len()`, `str()`,
      `format()` number formatting, `re.compile`

Behavior:
    - Every node is first offered to the conversion extensions of the active
      options, in order; the built-in `emit_<kind>` method only runs when no
      extension called `prevent_default()`.
    - Parentheses come from the writer's precedence stack: each construct
      enters the scope of its operation type and children are emitted as if
      they were top-level expressions.

Raises:
    - `UnsupportedConstructError`: statement-shaped or unknown node kinds.
    - `UnsupportedInstanceMethodError`: instance methods without a rewrite rule.
    - `UnsupportedMemberInitError`: member initialization without an extension.
    - `UnresolvableConstantError`: constants with no literal representation.
    - `ByRefParameterError`: by-reference lambda parameters.
    - `InvalidRegexError`: constant patterns that are not valid ECMAScript.
"""

import enum
import fractions
import re
from typing import Any, Iterable

from exprjs.exprjs_ast import (
    STATEMENT_KINDS,
    Binary,
    Call,
    Conditional,
    Constant,
    Default,
    FormattedValue,
    Invocation,
    JoinedStr,
    Lambda,
    ListInit,
    Member,
    MemberInit,
    New,
    NewArray,
    Node,
    NoneType,
    Parameter,
    Unary,
)
from exprjs.exprjs_constants import (
    IDENTIFIER_PATTERN,
    POSTFIX_OPERATORS,
    TRANSPARENT_UNARY_OPERATORS,
    ExprType,
    OperationType,
    operation_for,
)
from exprjs.exprjs_context import ConversionContext
from exprjs.exprjs_errors import (
    ByRefParameterError,
    NotSupportedError,
    UnresolvableConstantError,
    UnsupportedConstructError,
    UnsupportedInstanceMethodError,
    UnsupportedMemberInitError,
)
from exprjs.exprjs_metadata import resolve_member_name
from exprjs.exprjs_options import CompilationOptions
from exprjs.exprjs_regex import regex_flags, regex_literal
from exprjs.exprjs_script_version import (
    JavascriptApiFeature,
    JavascriptSyntaxFeature,
)
from exprjs.exprjs_types import (
    Closure,
    is_builtins,
    is_closure_root_type,
    is_dictionary_type,
    is_enum_type,
    is_list_type,
    is_numeric_type,
    qualified_name,
)
from exprjs.exprjs_writer import JavascriptWriter

_ENUM_COMPARABLE_OPERATORS = frozenset(
    {
        ExprType.EQUAL,
        ExprType.NOT_EQUAL,
        ExprType.IS,
        ExprType.IS_NOT,
        ExprType.AND,
        ExprType.OR,
        ExprType.EXCLUSIVE_OR,
    }
)

# Python str method -> (JavaScript method, required feature)
_STRING_METHODS: dict[str, tuple[str, JavascriptApiFeature]] = {
    "startswith": ("startsWith", JavascriptApiFeature.STRING_PROTOTYPE_STARTS_WITH),
    "endswith": ("endsWith", JavascriptApiFeature.STRING_PROTOTYPE_ENDS_WITH),
    "lower": ("toLowerCase", JavascriptApiFeature.STRING_PROTOTYPE_TO_LOWER_CASE),
    "upper": ("toUpperCase", JavascriptApiFeature.STRING_PROTOTYPE_TO_UPPER_CASE),
    "find": ("indexOf", JavascriptApiFeature.STRING_PROTOTYPE_INDEX_OF),
    "rfind": ("lastIndexOf", JavascriptApiFeature.STRING_PROTOTYPE_LAST_INDEX_OF),
    "rjust": ("padStart", JavascriptApiFeature.STRING_PROTOTYPE_PAD_START),
    "ljust": ("padEnd", JavascriptApiFeature.STRING_PROTOTYPE_PAD_END),
}

# strip variants: standard name first, legacy alias second
_TRIM_METHODS: dict[str, tuple[tuple[str, JavascriptApiFeature], ...]] = {
    "strip": (("trim", JavascriptApiFeature.STRING_PROTOTYPE_TRIM),),
    "lstrip": (
        ("trimStart", JavascriptApiFeature.STRING_PROTOTYPE_TRIM_START),
        ("trimLeft", JavascriptApiFeature.STRING_PROTOTYPE_TRIM_LEFT),
    ),
    "rstrip": (
        ("trimEnd", JavascriptApiFeature.STRING_PROTOTYPE_TRIM_END),
        ("trimRight", JavascriptApiFeature.STRING_PROTOTYPE_TRIM_RIGHT),
    ),
}

_COUNT_MEMBERS = frozenset({"Count", "Length"})

_NUMBER_FORMAT = re.compile(
    r"^(?P<grouping>,)?(?:\.(?P<digits>\d+))?(?P<code>[dDeEfFgGnNxX])?$"
)


def _enum_type_of(node: Node) -> Any:
    if isinstance(node, Unary) and node.op is ExprType.CONVERT:
        return _enum_type_of(node.operand)
    type_ = getattr(node, "type_", None)
    return type_ if is_enum_type(type_) else None


def _as_enum_constant(node: Node, enum_type: Any) -> Node:
    if not isinstance(node, Constant) or isinstance(node.value, enum.Enum):
        return node
    if isinstance(node.value, bool) or not isinstance(node.value, int):
        return node
    try:
        return Constant(enum_type(node.value), enum_type)
    except ValueError:
        return node


def normalize_enum_operands(node: Binary) -> Binary:
    """Retypes a numeric constant compared with (or combined with) an enum
    operand, so that both sides render through the same enum rules."""
    if node.op not in _ENUM_COMPARABLE_OPERATORS:
        return node
    left_enum = _enum_type_of(node.left)
    right_enum = _enum_type_of(node.right)
    left, right = node.left, node.right
    if left_enum is not None and right_enum is None:
        right = _as_enum_constant(right, left_enum)
    elif right_enum is not None and left_enum is None:
        left = _as_enum_constant(left, right_enum)
    if left is node.left and right is node.right:
        return node
    return Binary(node.op, left, right, node.type_)


class _NotRooted:
    pass


_NOT_ROOTED = _NotRooted()


class JavascriptEmitter:
    """Emits JavaScript code from exprjs expression trees.

    One emitter serves one compile call: it owns the writer (and with it the
    precedence stack) and the list of scope members used so far.

    Attributes:
        options (CompilationOptions): The active compilation options.
        writer (JavascriptWriter): The output buffer.
        scope_parameter (Parameter | None): The lambda parameter whose members
            are written as bare identifiers.
        used_scope_members (list[str]): Distinct scope members, in first-use order.
        placeholders (dict[str, Node]): Arguments lifted out of the code by
            extensions, keyed by the placeholder written in their place.
    """

    def __init__(
        self,
        options: CompilationOptions | None = None,
        writer: JavascriptWriter | None = None,
        scope_parameter: Parameter | None = None,
    ) -> None:
        self.options = options or CompilationOptions()
        self.writer = writer if writer is not None else JavascriptWriter()
        self.scope_parameter = scope_parameter
        self.used_scope_members: list[str] = []
        self.placeholders: dict[str, Node] = {}
        self._metadata = self.options.get_metadata_provider()

    def get_output(self) -> str:
        return self.writer.get_output()

    def supports(self, feature: JavascriptApiFeature | JavascriptSyntaxFeature) -> bool:
        return self.options.script_version.supports(feature)

    def visit(self, node: Node) -> None:
        """
        Dispatches a node through the extensions, then to its `emit_*` method.

        Parameters
        ----------
        node : Node
            The node to emit.

        Raises
        ------
        TypeError
            If `node` is not an expression tree node.
        UnsupportedConstructError
            If the node is statement-shaped or has no emitter.
        """
        if not isinstance(node, Node):
            raise TypeError(f"Expected an expression tree node, got {type(node).__name__}")
        if isinstance(node, Binary):
            node = normalize_enum_operands(node)

        if self.options.extensions:
            context = ConversionContext(self, node)
            for extension in self.options.extensions:
                extension.convert_to_javascript(context)
                if context.default_prevented:
                    return

        if node.kind in STATEMENT_KINDS:
            raise UnsupportedConstructError(
                f"Statement node '{node.kind}' cannot be converted to a JavaScript expression",
                node,
            )
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise UnsupportedConstructError(f"No emitter method for node kind '{node.kind}'", node)
        method(node)

    # helpers

    def member_name(self, declaring_type: Any, name: str) -> str:
        return resolve_member_name(self._metadata, declaring_type, name)

    def write_separated(self, separator: str, nodes: Iterable[Node]) -> None:
        start = len(self.writer)
        for node in nodes:
            if len(self.writer) > start:
                self.writer.write(separator)
            self.visit(node)

    def write_arguments(self, args: Iterable[Node]) -> None:
        self.writer.write("(")
        with self.writer.operation(OperationType.NO_OP):
            self.write_separated(",", args)
        self.writer.write(")")

    def write_method_call(self, receiver: Node, method: str, args: Iterable[Node] = ()) -> None:
        """Writes `receiver.method(args)` with the receiver in accessor position."""
        with self.writer.operation(OperationType.CALL):
            with self.writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(receiver)
            self.writer.write(".").write(method)
            self.write_arguments(args)

    def write_object_key(self, name: str) -> None:
        if IDENTIFIER_PATTERN.match(name):
            self.writer.write(name)
        else:
            self.writer.write_string_literal(name)

    # literals

    def emit_constant(self, node: Constant) -> None:
        value = node.value
        if is_enum_type(node.type_) and not isinstance(value, enum.Enum) and value is not None:
            try:
                value = node.type_(value)
            except ValueError:
                pass  # not a declared member: written as the raw value

        if value is None:
            self.writer.write("null")
        elif isinstance(value, Closure) or is_closure_root_type(node.type_):
            pass  # the root is transparent; its members are read below it
        elif isinstance(value, enum.Enum):
            with self.writer.operation(OperationType.LITERAL):
                raw = value.value
                if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                    self.writer.write_literal(raw)
                else:
                    self.writer.write_number(raw)
        elif isinstance(value, (bool, int, float, str)) or is_numeric_type(type(value)):
            if isinstance(value, fractions.Fraction):
                value = float(value)
            with self.writer.operation(OperationType.LITERAL):
                self.writer.write_literal(value)
        elif isinstance(value, re.Pattern):
            with self.writer.operation(OperationType.LITERAL):
                self.writer.write(
                    regex_literal(value.pattern, value.flags, self.options.script_version)
                )
        elif isinstance(value, (list, tuple)):
            with self.writer.operation(OperationType.NO_OP):
                self.writer.write("[")
                self.write_separated(",", (Constant(item) for item in value))
                self.writer.write("]")
        elif isinstance(value, dict) and all(isinstance(k, str) for k in value):
            with self.writer.operation(OperationType.NO_OP):
                self.writer.write("{")
                start = len(self.writer)
                for key, item in value.items():
                    if len(self.writer) > start:
                        self.writer.write(",")
                    self.write_object_key(key)
                    self.writer.write(":")
                    self.visit(Constant(item))
                self.writer.write("}")
        else:
            raise UnresolvableConstantError(
                f"The constant value is not supported: {value!r} ({type(value).__name__})",
                node,
            )

    def emit_default(self, node: Default) -> None:
        if node.type_ is bool:
            self.writer.write("false")
        elif is_numeric_type(node.type_) or is_enum_type(node.type_):
            self.writer.write("0")
        elif node.type_ is NoneType:
            self.writer.write(self.options.undefined_literal)
        else:
            self.writer.write("null")

    def emit_parameter(self, node: Parameter) -> None:
        self.writer.write(node.name)

    # member access

    def _closure_value(self, node: Node) -> Any:
        """Value of a member chain rooted at a closure, or `_NOT_ROOTED`."""
        if isinstance(node, Constant):
            return node.value if isinstance(node.value, Closure) else _NOT_ROOTED
        if not isinstance(node, Member) or node.expr is None:
            return _NOT_ROOTED
        base = self._closure_value(node.expr)
        if base is _NOT_ROOTED:
            return _NOT_ROOTED
        try:
            if isinstance(base, Closure):
                return base.read(node.name)
            return getattr(base, node.name)
        except (KeyError, AttributeError) as e:
            raise UnresolvableConstantError(
                f"Captured value '{node.name}' could not be read", node
            ) from e

    def emit_member(self, node: Member) -> None:
        """
        Emits a member read.

        Parameters
        ----------
        node : Member
            A static member (no receiver), a captured value (receiver rooted at
            a closure), a scope member, or a plain `receiver.member` read.
        """
        writer = self.writer
        expr = node.expr

        if expr is None:
            with writer.operation(OperationType.INDEXER_PROPERTY):
                writer.write(qualified_name(node.declaring_type))
                writer.write_accessor(self.member_name(node.declaring_type, node.name))
            return

        value = self._closure_value(node)
        if value is not _NOT_ROOTED:
            static_type = node.type_ if node.type_ is not object else None
            self.visit(Constant(value, static_type))
            return

        if self.scope_parameter is not None and expr == self.scope_parameter:
            name = self.member_name(node.declaring_type, node.name)
            with writer.operation(OperationType.INDEXER_PROPERTY):
                writer.write(name)
            if name not in self.used_scope_members:
                self.used_scope_members.append(name)
            return

        if node.name in _COUNT_MEMBERS and (
            is_list_type(expr.type_) or expr.type_ is str
        ):
            name = "length"
        else:
            name = self.member_name(node.declaring_type, node.name)
        with writer.operation(OperationType.INDEXER_PROPERTY):
            self.visit(expr)
            writer.write_accessor(name)

    # operators

    def emit_binary(self, node: Binary) -> None:
        writer = self.writer
        op = node.op

        if op is ExprType.ARRAY_INDEX:
            with writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(node.left)
                writer.write("[")
                with writer.operation(OperationType.NO_OP):
                    self.visit(node.right)
                writer.write("]")
            return

        if op is ExprType.POWER:
            with writer.operation(OperationType.CALL):
                writer.write("Math.pow")
                self.write_arguments((node.left, node.right))
            return

        if op is ExprType.FLOOR_DIVIDE:
            with writer.operation(OperationType.CALL):
                writer.write("Math.floor(")
                with writer.operation(OperationType.NO_OP):
                    with writer.operation(OperationType.MULTIPLICATIVE):
                        self.visit(node.left)
                        writer.write("/")
                        writer.mark_right_operand()
                        self.visit(node.right)
                writer.write(")")
            return

        if op in (ExprType.IN, ExprType.NOT_IN):
            self.write_contains(node.right, node.left, negate=op is ExprType.NOT_IN, node=node)
            return

        if op is ExprType.COALESCE and not self.supports(
            JavascriptSyntaxFeature.NULLISH_COALESCING
        ):
            raise NotSupportedError(
                "The `??` operator needs ES2020; the target version does not support it",
                node,
            )

        with writer.operation(operation_for(op, node.type_)):
            self.visit(node.left)
            writer.write_operator(op)
            writer.mark_right_operand()
            self.visit(node.right)

    def emit_unary(self, node: Unary) -> None:
        writer = self.writer
        op = node.op
        if op in TRANSPARENT_UNARY_OPERATORS:
            self.visit(node.operand)
            return
        if op is ExprType.ARRAY_LENGTH:
            with writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(node.operand)
                writer.write(".length")
            return
        with writer.operation(operation_for(op)):
            if op in POSTFIX_OPERATORS:
                self.visit(node.operand)
                writer.write_operator(op)
            else:
                writer.write_operator(op)
                self.visit(node.operand)

    def emit_conditional(self, node: Conditional) -> None:
        writer = self.writer
        with writer.operation(OperationType.TERNARY_OP):
            with writer.operation(OperationType.TERNARY_TEST):
                self.visit(node.test)
            writer.write("?")
            with writer.operation(OperationType.TERNARY_TRUE_VALUE):
                self.visit(node.if_true)
            writer.write(":")
            with writer.operation(OperationType.TERNARY_FALSE_VALUE):
                self.visit(node.if_false)

    def write_contains(
        self, container: Node, item: Node, negate: bool = False, node: Node | None = None
    ) -> None:
        """Writes a membership test: key test for dicts, substring or element
        test for strings and lists."""
        writer = self.writer
        container_type = getattr(container, "type_", object)

        if negate:
            with writer.operation(OperationType.UNARY):
                writer.write("!")
                self.write_contains(container, item, node=node)
            return

        if is_dictionary_type(container_type):
            self.write_method_call(container, "hasOwnProperty", (item,))
            return

        if container_type is str:
            includes = JavascriptApiFeature.STRING_PROTOTYPE_INCLUDES
            index_of = JavascriptApiFeature.STRING_PROTOTYPE_INDEX_OF
        elif is_list_type(container_type):
            includes = JavascriptApiFeature.ARRAY_PROTOTYPE_INCLUDES
            index_of = JavascriptApiFeature.ARRAY_PROTOTYPE_INDEX_OF
        else:
            raise NotSupportedError(
                f"Membership test on {container_type!r} is not supported", node
            )

        if self.supports(includes):
            self.write_method_call(container, "includes", (item,))
        elif self.supports(index_of):
            with writer.operation(OperationType.COMPARISON):
                self.write_method_call(container, "indexOf", (item,))
                writer.write(">=0")
        else:
            raise NotSupportedError(
                f"No membership test available for {self.options.script_version!r}", node
            )

    # calls

    def emit_call(self, node: Call) -> None:
        """
        Emits a method or function call.

        Static calls render as `qualified.owner.method(args)`. Instance calls
        are only supported through the rewrite rules for indexers, membership,
        `str` methods and number formatting.

        Raises
        ------
        UnsupportedInstanceMethodError
            If an instance method has no rewrite rule.
        """
        owner = node.declaring_type
        method = node.method

        if method == "__getitem__" and node.obj is not None:
            self.write_indexer_get(node)
            return
        if method == "__setitem__" and node.obj is not None:
            self.write_indexer_set(node)
            return
        if method == "__contains__" and node.obj is not None:
            self.write_contains(node.obj, node.args[0], node=node)
            return

        if node.is_static:
            if is_builtins(owner):
                self.write_builtin_call(node)
            elif owner is re and method == "compile":
                self.write_regex(node.args, node)
            else:
                with self.writer.operation(OperationType.CALL):
                    with self.writer.operation(OperationType.INDEXER_PROPERTY):
                        self.writer.write(qualified_name(owner)).write_accessor(method)
                    self.write_arguments(node.args)
            return

        receiver = self._receiver(node)
        if method == "__str__" and not node.args:
            self.write_to_string(receiver)
            return
        if method == "__format__" and len(node.args) == 1:
            self.write_number_format(receiver, self._constant_text(node.args[0], node), node)
            return
        if owner is str and self.write_string_method(node):
            return
        if is_list_type(owner) and method == "index" and len(node.args) == 1:
            self.write_method_call(receiver, "indexOf", node.args)
            return

        raise UnsupportedInstanceMethodError(
            f"The instance method {getattr(owner, '__name__', owner)}.{method} cannot be "
            "converted to JavaScript",
            node,
        )

    def _receiver(self, node: Call) -> Node:
        if node.obj is None:
            raise TypeError(f"Expected an instance call for {node.method!r}, got a static call")
        return node.obj

    def _constant_text(self, arg: Node, node: Node) -> str:
        if not isinstance(arg, Constant) or not isinstance(arg.value, str):
            raise NotSupportedError("Format specs must be constant strings", node)
        return arg.value

    def write_string_method(self, node: Call) -> bool:
        """Writes a rewritten `str` method; returns False if the method is not
        covered by a rule."""
        receiver = self._receiver(node)
        version = self.options.script_version
        method = node.method

        if method in _TRIM_METHODS:
            if node.args:
                raise NotSupportedError(f"str.{method}() with arguments is not supported", node)
            for js_name, feature in _TRIM_METHODS[method]:
                if version.supports(feature):
                    self.write_method_call(receiver, js_name)
                    return True
            raise UnsupportedInstanceMethodError(
                f"str.{method}() has no equivalent in {version!r}", node
            )

        if method in _STRING_METHODS:
            js_name, feature = _STRING_METHODS[method]
            if not version.supports(feature):
                raise UnsupportedInstanceMethodError(
                    f"str.{method}() needs {feature.value}, not available in {version!r}",
                    node,
                )
            self.write_method_call(receiver, js_name, node.args)
            return True

        return False

    def write_indexer_get(self, node: Call) -> None:
        receiver = self._receiver(node)
        (key,) = node.args
        if isinstance(key, Constant) and isinstance(key.value, slice):
            self.write_slice(receiver, key.value, node)
            return
        with self.writer.operation(OperationType.INDEXER_PROPERTY):
            self.visit(receiver)
            self.writer.write("[")
            with self.writer.operation(OperationType.NO_OP):
                self.visit(key)
            self.writer.write("]")

    def write_indexer_set(self, node: Call) -> None:
        receiver = self._receiver(node)
        key, value = node.args
        writer = self.writer
        with writer.operation(OperationType.ASSIGN_RHS):
            with writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(receiver)
                writer.write("[")
                with writer.operation(OperationType.NO_OP):
                    self.visit(key)
                writer.write("]")
            writer.write("=")
            writer.mark_right_operand()
            self.visit(value)

    def write_slice(self, receiver: Node, bounds: slice, node: Node) -> None:
        """Writes a constant slice. `substring` swaps reversed bounds where a
        slice yields nothing, so it is only used for ordered non-negative bounds."""
        if bounds.step is not None:
            raise NotSupportedError("Slices with a step are not supported", node)
        start = bounds.start or 0
        stop = bounds.stop
        args: list[Node] = [Constant(start)]
        if stop is not None:
            args.append(Constant(stop))
        ordered = start >= 0 and (stop is None or 0 <= start <= stop)
        receiver_type = getattr(receiver, "type_", object)
        if receiver_type is str and ordered:
            if not self.supports(JavascriptApiFeature.STRING_PROTOTYPE_SUBSTRING):
                raise UnsupportedInstanceMethodError("String.prototype.substring is not available", node)
            self.write_method_call(receiver, "substring", args)
        else:
            self.write_method_call(receiver, "slice", args)

    def write_to_string(self, value: Node) -> None:
        if getattr(value, "type_", None) is str:
            self.visit(value)
        else:
            self.write_method_call(value, "toString")

    def write_number_format(self, value: Node, spec: str, node: Node) -> None:
        """
        Writes a number formatted with a format spec.

        The presentation type selects the JavaScript call (`d` -> toString(),
        `e` -> toExponential(N), `f`/`g` -> toFixed(N), `n` or `,` grouping ->
        toLocaleString, `x` -> toString(16)); the precision, when given, is N.

        Raises
        ------
        NotSupportedError
            If the format spec uses anything else (fill, alignment, width, sign).
        """
        match = _NUMBER_FORMAT.match(spec)
        if not spec or match is None:
            raise NotSupportedError(f"Format spec {spec!r} is not supported", node)
        digits = match.group("digits") or ""
        code = (match.group("code") or "").lower()
        if match.group("grouping") or code == "n":
            if digits:
                call = (
                    f"toLocaleString({self.options.undefined_literal},"
                    f"{{minimumFractionDigits:{digits}}})"
                )
            else:
                call = "toLocaleString()"
        elif code == "d":
            call = "toString()"
        elif code == "e":
            call = f"toExponential({digits})"
        elif code in ("f", "g"):
            call = f"toFixed({digits})"
        elif code == "x":
            call = "toString(16)"
        else:
            raise NotSupportedError(f"Format spec {spec!r} is not supported", node)

        with self.writer.operation(OperationType.CALL):
            with self.writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(value)
            self.writer.write(".").write(call)

    def write_builtin_call(self, node: Call) -> None:
        method = node.method
        args = node.args
        if method == "len" and len(args) == 1:
            (value,) = args
            with self.writer.operation(OperationType.INDEXER_PROPERTY):
                if is_dictionary_type(getattr(value, "type_", object)):
                    self.writer.write("Object.keys")
                    self.write_arguments(args)
                else:
                    self.visit(value)
                self.writer.write(".length")
            return
        if method == "str" and len(args) == 1:
            self.write_to_string(args[0])
            return
        if method == "format" and len(args) == 2:
            self.write_number_format(args[0], self._constant_text(args[1], node), node)
            return
        raise NotSupportedError(
            f"The built-in function {method}() cannot be converted to JavaScript "
            "without a matching extension",
            node,
        )

    def write_regex(self, args: tuple[Node, ...], node: Node) -> None:
        """Writes `re.compile(pattern, flags)`: a literal for constant patterns,
        `new RegExp(pattern,'flags')` otherwise."""
        if not 1 <= len(args) <= 2:
            raise NotSupportedError("Regular expressions take a pattern and optional flags", node)
        version = self.options.script_version
        pattern, *rest = args
        flags_node = rest[0] if rest else Constant(0)
        if not isinstance(flags_node, Constant):
            raise NotSupportedError("Regular expression flags must be constant", node)
        flags = int(flags_node.value)

        if isinstance(pattern, Constant) and isinstance(pattern.value, str):
            with self.writer.operation(OperationType.LITERAL):
                self.writer.write(regex_literal(pattern.value, flags, version))
            return

        with self.writer.operation(OperationType.NEW):
            self.writer.write("new RegExp(")
            with self.writer.operation(OperationType.NO_OP):
                self.visit(pattern)
            self.writer.write(f",'{regex_flags(flags, version)}')")

    def emit_invocation(self, node: Invocation) -> None:
        with self.writer.operation(OperationType.CALL):
            with self.writer.operation(OperationType.INDEXER_PROPERTY):
                self.visit(node.expr)
            self.write_arguments(node.args)

    # functions

    def emit_lambda(self, node: Lambda) -> None:
        """
        Emits a lambda as an arrow function when the target supports it, else
        as `function(params){return body;}`.

        Raises
        ------
        ByRefParameterError
            If any parameter is passed by reference.
        """
        writer = self.writer
        for param in node.params:
            if param.by_ref:
                raise ByRefParameterError(
                    f"Parameter '{param.name}' is passed by reference; JavaScript cannot do that",
                    node,
                )
        names = ",".join(param.name for param in node.params)

        with writer.operation(OperationType.ASSIGN_RHS):
            if self.supports(JavascriptSyntaxFeature.ARROW_FUNCTION):
                writer.write(names if len(node.params) == 1 else f"({names})")
                writer.write("=>")
                with writer.operation(OperationType.PARAM_ISOLATED_LHS):
                    mark = len(writer)
                    self.visit(node.body)
                    if writer.text_since(mark).startswith("{"):
                        writer.wrap_since(mark)
            else:
                writer.write(f"function({names}){{")
                with writer.operation(OperationType.NO_OP):
                    if node.return_type is not NoneType:
                        writer.write("return ")
                    self.visit(node.body)
                writer.write(";}")

    # object and array shapes

    def emit_new(self, node: New) -> None:
        writer = self.writer
        if node.members is not None:
            with writer.operation(OperationType.NO_OP):
                writer.write("{")
                for index, (member, value) in enumerate(zip(node.members, node.args)):
                    if index:
                        writer.write(",")
                    self.write_object_key(self.member_name(node.type_, member))
                    writer.write(":")
                    self.visit(value)
                writer.write("}")
            return

        if node.type_ is re.Pattern:
            self.write_regex(node.args, node)
            return

        if is_list_type(node.type_) or is_dictionary_type(node.type_):
            if node.args:
                raise NotSupportedError(
                    "Collections can only be created empty or through initializers", node
                )
            writer.write("[]" if is_list_type(node.type_) else "{}")
            return

        with writer.operation(OperationType.NEW):
            writer.write("new ").write(qualified_name(node.type_))
            self.write_arguments(node.args)

    def emit_new_array(self, node: NewArray) -> None:
        with self.writer.operation(OperationType.NO_OP):
            self.writer.write("[")
            self.write_separated(",", node.items)
            self.writer.write("]")

    def emit_list_init(self, node: ListInit) -> None:
        """
        Emits a collection initializer: `{key:value,...}` for dictionaries,
        `[item,...]` for lists.

        Raises
        ------
        NotSupportedError
            If a dictionary key is not a constant string, an initializer has the
            wrong arity, or the collection type is neither a list nor a dict.
        """
        writer = self.writer
        if is_dictionary_type(node.type_):
            with writer.operation(OperationType.NO_OP):
                writer.write("{")
                start = len(writer)
                for init in node.initializers:
                    if len(writer) > start:
                        writer.write(",")
                    if len(init.args) != 2:
                        raise NotSupportedError(
                            "Objects can only be initialized with key/value pairs", node
                        )
                    key, value = init.args
                    if not isinstance(key, Constant) or not isinstance(key.value, str):
                        raise NotSupportedError(
                            "The key of an object must be a constant string", node
                        )
                    self.write_object_key(key.value)
                    writer.write(":")
                    self.visit(value)
                writer.write("}")
            return

        if is_list_type(node.type_):
            with writer.operation(OperationType.NO_OP):
                writer.write("[")
                start = len(writer)
                for init in node.initializers:
                    if len(writer) > start:
                        writer.write(",")
                    if len(init.args) != 1:
                        raise NotSupportedError(
                            "Arrays can only be initialized with one value per element", node
                        )
                    self.visit(init.args[0])
                writer.write("]")
            return

        raise UnsupportedConstructError(
            f"Collection initializer of {node.type_!r} is not supported", node
        )

    def emit_member_init(self, node: MemberInit) -> None:
        raise UnsupportedMemberInitError(
            "Member initialization is not supported by default; register an extension "
            "such as MemberInitAsJson to convert it",
            node,
        )

    # strings

    def emit_joined_str(self, node: JoinedStr) -> None:
        writer = self.writer
        if not node.values:
            with writer.operation(OperationType.LITERAL):
                writer.write("''")
            return
        with writer.operation(OperationType.CONCAT):
            if getattr(node.values[0], "type_", object) is not str:
                writer.write("''+")
                writer.mark_right_operand()
            for index, value in enumerate(node.values):
                if index:
                    writer.write("+")
                    writer.mark_right_operand()
                self.visit(value)

    def emit_formatted_value(self, node: FormattedValue) -> None:
        if node.format_spec:
            self.write_number_format(node.value, node.format_spec, node)
        else:
            self.visit(node.value)
