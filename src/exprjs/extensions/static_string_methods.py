"""Conversion of `str.join`, called either way:

    ", ".join(x.Names)           ->  Names.join(", ")
    str.join(", ", x.Names)      ->  Names.join(", ")
"""

from exprjs.exprjs_ast import Call
from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_context import ConversionContext
from exprjs.exprjs_errors import NotSupportedError


class StaticStringMethods:
    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if not isinstance(node, Call) or node.declaring_type is not str or node.method != "join":
            return

        args = node.args if node.obj is None else (node.obj, *node.args)
        if len(args) != 2:
            raise NotSupportedError("This form of str.join is not supported", node)
        separator, items = args

        context.prevent_default()
        with context.operation(OperationType.CALL):
            with context.operation(OperationType.INDEXER_PROPERTY):
                context.write_node(items)
                context.write(".join")
            context.write_many_isolated("(", ")", ",", (separator,))
