"""
Renames instance methods through a decorator and lifts their arguments into
named placeholders.

    class JsArray:
        @js_method("splice", positional_arguments=(0, 1))
        def remove_at(self, index: int) -> "JsArray": ...

    array.remove_at(2)   ->  array.splice(arg_0, 1)     placeholders == {"arg_0": Constant(2)}

Positional defaults fill the argument positions the call does not supply. With
`inline_arguments=True` the arguments are written in place instead of being
replaced by placeholders. Placeholders are numbered per compile call and
returned in `CompilationResult.placeholders`.
"""

from typing import Any, Callable, Sequence

from exprjs.exprjs_ast import Call, Constant
from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_context import ConversionContext

JS_METHOD_ATTRIBUTE = "__js_method__"


class JsMethodName:
    def __init__(self, name: str, positional_arguments: Sequence[Any] | None = None):
        self.name = name
        self.positional_arguments = tuple(positional_arguments or ())

    def __repr__(self) -> str:
        return f"JsMethodName({self.name!r}, {self.positional_arguments!r})"


def js_method(
    name: str, positional_arguments: Sequence[Any] | None = None
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator giving a method its JavaScript name and default arguments."""

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, JS_METHOD_ATTRIBUTE, JsMethodName(name, positional_arguments))
        return func

    return decorate


def get_js_method_name(declaring_type: Any, method: str) -> JsMethodName | None:
    marker = getattr(getattr(declaring_type, method, None), JS_METHOD_ATTRIBUTE, None)
    return marker if isinstance(marker, JsMethodName) else None


class CustomMethods:
    """Conversion extension for methods decorated with `js_method`.

    Attributes:
        inline_arguments (bool): Write arguments in place of placeholders.
    """

    def __init__(self, inline_arguments: bool = False) -> None:
        self.inline_arguments = inline_arguments

    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if not isinstance(node, Call) or node.obj is None:
            return
        marker = get_js_method_name(node.declaring_type, node.method)
        if marker is None:
            return

        context.prevent_default()
        with context.operation(OperationType.CALL):
            with context.operation(OperationType.INDEXER_PROPERTY):
                context.write_node(node.obj)
            context.write(".").write(marker.name).write("(")
            with context.operation(OperationType.NO_OP):
                for index, arg in enumerate(node.args):
                    if index:
                        context.write(", ")
                    if self.inline_arguments:
                        context.write_node(arg)
                    else:
                        context.write(context.add_placeholder(arg))
                for index in range(len(node.args), len(marker.positional_arguments)):
                    if index:
                        context.write(", ")
                    context.write_node(Constant(marker.positional_arguments[index]))
            context.write(")")
