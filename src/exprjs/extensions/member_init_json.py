"""
Renders member initialization as a plain object literal.

    MemberInit(New(Person), (MemberAssignment("name", x),))   ->  {name:x}

Only initializations that call a parameterless constructor and assign members
directly are converted; anything else is left to the default emitter, which
rejects it.
"""

from typing import Any, Callable

from exprjs.exprjs_ast import MemberAssignment, MemberInit
from exprjs.exprjs_constants import IDENTIFIER_PATTERN, OperationType
from exprjs.exprjs_context import ConversionContext


class MemberInitAsJson:
    """Conversion extension for member initialization.

    Built for an explicit list of types, for the types accepted by a predicate,
    or for every type with `MemberInitAsJson.for_all_types()`.

    Raises:
        ValueError: If constructed with neither types nor a predicate.
    """

    def __init__(self, *types: type, predicate: Callable[[Any], bool] | None = None):
        if not types and predicate is None:
            raise ValueError(
                "At least one type or a predicate is required; "
                "use MemberInitAsJson.for_all_types() to accept every type"
            )
        self.types = types
        self.predicate = predicate

    @classmethod
    def for_all_types(cls) -> "MemberInitAsJson":
        return cls(predicate=lambda type_: True)

    def accepts(self, type_: Any) -> bool:
        if type_ in self.types:
            return True
        return self.predicate is not None and bool(self.predicate(type_))

    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if not isinstance(node, MemberInit) or not self.accepts(node.type_):
            return
        if node.new.args:
            return
        if not all(isinstance(binding, MemberAssignment) for binding in node.bindings):
            return

        context.prevent_default()
        writer = context.get_writer()
        with writer.operation(OperationType.NO_OP):
            writer.write("{")
            start = len(writer)
            for binding in node.bindings:
                if len(writer) > start:
                    writer.write(",")
                name = context.get_member_name(node.type_, binding.name)
                if IDENTIFIER_PATTERN.match(name):
                    writer.write(name)
                else:
                    writer.write_string_literal(name)
                writer.write(":")
                context.write_node(binding.expr)
            writer.write("}")
