"""
Maps the sequence built-ins onto `Array.prototype` methods.

    filter(fn, xs)      ->  xs.filter(fn)
    map(fn, xs)         ->  xs.map(fn)
    any(map(fn, xs))    ->  xs.some(fn)
    all(map(fn, xs))    ->  xs.every(fn)
    any(xs) / all(xs)   ->  xs.some(Boolean) / xs.every(Boolean)
    list(xs)            ->  xs.slice()      ([...xs] when spread is available)
    sum(xs)             ->  xs.reduce(function(a,b){return a+b;},0)
"""

import builtins

from exprjs.exprjs_ast import Call, Constant, Node
from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_context import ConversionContext
from exprjs.exprjs_errors import NotSupportedError
from exprjs.exprjs_script_version import JavascriptApiFeature, JavascriptSyntaxFeature

_CALLBACK_METHODS = {
    "filter": ("filter", JavascriptApiFeature.ARRAY_PROTOTYPE_FILTER),
    "map": ("map", JavascriptApiFeature.ARRAY_PROTOTYPE_MAP),
}

_PREDICATE_METHODS = {
    "any": ("some", JavascriptApiFeature.ARRAY_PROTOTYPE_SOME),
    "all": ("every", JavascriptApiFeature.ARRAY_PROTOTYPE_EVERY),
}


def _is_builtin_call(node: Node, method: str, arity: int) -> bool:
    return (
        isinstance(node, Call)
        and node.is_static
        and node.declaring_type is builtins
        and node.method == method
        and len(node.args) == arity
    )


class LinqMethods:
    """Conversion extension for `filter`, `map`, `any`, `all`, `list`, `tuple`
    and `sum` applied to sequences."""

    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if not isinstance(node, Call) or not node.is_static or node.declaring_type is not builtins:
            return
        method = node.method

        if method in _CALLBACK_METHODS and len(node.args) == 2:
            js_name, feature = _CALLBACK_METHODS[method]
            callback, items = node.args
            self._require(context, feature, node)
            context.prevent_default()
            self._write_method(context, items, js_name, (callback,))
        elif method in _PREDICATE_METHODS and len(node.args) == 1:
            js_name, feature = _PREDICATE_METHODS[method]
            self._require(context, feature, node)
            context.prevent_default()
            (arg,) = node.args
            if _is_builtin_call(arg, "map", 2):
                callback, items = arg.args  # type: ignore[attr-defined]
                self._write_method(context, items, js_name, (callback,))
            else:
                self._write_method(context, arg, js_name, text_args="Boolean")
        elif method in ("list", "tuple") and len(node.args) == 1:
            context.prevent_default()
            self._write_copy(context, node.args[0])
        elif method == "sum" and 1 <= len(node.args) <= 2:
            self._require(context, JavascriptApiFeature.ARRAY_PROTOTYPE_REDUCE, node)
            context.prevent_default()
            start = node.args[1] if len(node.args) == 2 else Constant(0)
            with context.operation(OperationType.CALL):
                with context.operation(OperationType.INDEXER_PROPERTY):
                    context.write_node(node.args[0])
                context.write(".reduce(function(a,b){return a+b;},")
                with context.operation(OperationType.NO_OP):
                    context.write_node(start)
                context.write(")")

    def _require(
        self, context: ConversionContext, feature: JavascriptApiFeature, node: Node
    ) -> None:
        if not context.options.script_version.supports(feature):
            raise NotSupportedError(f"{feature.value} is not available in the target version", node)

    def _write_method(
        self,
        context: ConversionContext,
        receiver: Node,
        js_name: str,
        args: tuple[Node, ...] = (),
        text_args: str = "",
    ) -> None:
        with context.operation(OperationType.CALL):
            with context.operation(OperationType.INDEXER_PROPERTY):
                context.write_node(receiver)
            context.write(".").write(js_name)
            if args:
                context.write_many_isolated("(", ")", ",", args)
            else:
                context.write(f"({text_args})")

    def _write_copy(self, context: ConversionContext, items: Node) -> None:
        if context.options.script_version.supports(JavascriptSyntaxFeature.ARRAY_SPREAD):
            context.write_many_isolated("[...", "]", ",", (items,))
        else:
            self._write_method(context, items, "slice")
