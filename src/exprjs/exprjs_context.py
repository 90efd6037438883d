"""
Conversion extension interface and the per-node context handed to extensions.

Before the built-in emitter handles a node, every registered extension is
offered the node in registration order. An extension either ignores the node,
or writes its own output and calls `context.prevent_default()`, which skips the
remaining extensions and the built-in emission for that node.

Example:
    class XptoMethods:
        def convert_to_javascript(self, context: ConversionContext) -> None:
            node = context.node
            if isinstance(node, Call) and node.declaring_type is Xpto:
                context.prevent_default()
                with context.operation(OperationType.CALL):
                    with context.operation(OperationType.INDEXER_PROPERTY):
                        context.write("Xpto").write_accessor(node.method)
                    context.write_many_isolated("(", ")", ",", node.args)
"""

from typing import TYPE_CHECKING, Any, Iterable, Protocol

from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_metadata import resolve_member_name
from exprjs.exprjs_writer import JavascriptWriter, PrecedenceController

if TYPE_CHECKING:  # pragma: no cover
    from exprjs.emitters.js_emitter import JavascriptEmitter
    from exprjs.exprjs_ast import Lambda, Node
    from exprjs.exprjs_options import CompilationOptions


class ConversionExtension(Protocol):  # pragma: no cover
    """Protocol for pluggable node handlers.

    Methods:
        convert_to_javascript(context): Inspects `context.node` and optionally
            writes output and calls `context.prevent_default()`.
    """

    def convert_to_javascript(self, context: "ConversionContext") -> None: ...


class ConversionContext:
    """State shared by all extensions while one node is being offered.

    A context is created lazily for each visited node and must not be kept
    after `convert_to_javascript` returns.

    Attributes:
        node: The node being converted. Extensions must not modify it.
        emitter: The emitter, for re-entrant visits of arbitrary nodes.
        default_prevented (bool): Set by `prevent_default()`.
    """

    def __init__(self, emitter: "JavascriptEmitter", node: "Node"):
        self.node = node
        self.emitter = emitter
        self.default_prevented = False

    @property
    def options(self) -> "CompilationOptions":
        return self.emitter.options

    def prevent_default(self) -> None:
        """Marks the node as handled by the calling extension."""
        self.default_prevented = True

    def get_writer(self) -> JavascriptWriter:
        return self.emitter.writer

    def operation(self, op: OperationType | int) -> PrecedenceController:
        return self.emitter.writer.operation(op)

    def write(self, text: Any) -> "ConversionContext":
        self.emitter.writer.write(text)
        return self

    def write_accessor(self, name: str) -> "ConversionContext":
        self.emitter.writer.write_accessor(name)
        return self

    def write_node(self, node: "Node") -> "ConversionContext":
        """Visits a node through the full pipeline, extensions included."""
        self.emitter.visit(node)
        return self

    def write_lambda(self, lambda_: "Lambda") -> "ConversionContext":
        return self.write_node(lambda_)

    def write_expression(self, lambda_: "Lambda") -> "ConversionContext":
        """Writes only the body of a lambda."""
        return self.write_node(lambda_.body)

    def write_many(self, separator: str, nodes: Iterable["Node"]) -> "ConversionContext":
        """Visits nodes in order, writing `separator` between non-empty outputs."""
        writer = self.emitter.writer
        start = len(writer)
        for node in nodes:
            if len(writer) > start:
                writer.write(separator)
            self.emitter.visit(node)
        return self

    def write_many_isolated(
        self, open_: str, close: str, separator: str, nodes: Iterable["Node"]
    ) -> "ConversionContext":
        """Like `write_many`, between `open_` and `close` in an isolated scope."""
        writer = self.emitter.writer
        writer.write(open_)
        with writer.operation(OperationType.NO_OP):
            self.write_many(separator, nodes)
        writer.write(close)
        return self

    def add_placeholder(self, node: "Node", prefix: str = "arg_") -> str:
        """Registers `node` as a placeholder of the current compile call and
        returns the name to write in its place (`arg_0`, `arg_1`, ...)."""
        placeholders = self.emitter.placeholders
        name = f"{prefix}{len(placeholders)}"
        placeholders[name] = node
        return name

    def get_member_name(self, declaring_type: Any, name: str) -> str:
        return resolve_member_name(
            self.options.get_metadata_provider(), declaring_type, name
        )
