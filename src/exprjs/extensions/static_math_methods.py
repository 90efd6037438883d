"""
Maps the `math` module and the numeric built-ins onto JavaScript's `Math`.

    math.sqrt(x)    ->  Math.sqrt(x)
    math.log(x, 2)  ->  Math.log(x)/Math.log(2)
    math.pi         ->  Math.PI
    abs(x)          ->  Math.abs(x)
    round(x, 2)     ->  (function(a,b){return Math.round(a*b)/b;})(x,Math.pow(10,2))

Functions introduced in ES2015 (`trunc`, `log10`, `hypot`, ...) are only
mapped when the target supports them. `round` is rejected unless
`simulate_round` is set, because `Math.round` rounds halves up while the
built-in rounds them to even.
"""

import builtins
import math

from exprjs.exprjs_ast import Call, Member, Node
from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_context import ConversionContext
from exprjs.exprjs_errors import NotSupportedError
from exprjs.exprjs_script_version import JavascriptApiFeature

_MATH_FUNCTIONS = {
    "acos": "acos",
    "asin": "asin",
    "atan": "atan",
    "atan2": "atan2",
    "ceil": "ceil",
    "cos": "cos",
    "exp": "exp",
    "fabs": "abs",
    "floor": "floor",
    "pow": "pow",
    "sin": "sin",
    "sqrt": "sqrt",
    "tan": "tan",
}

_MATH_ES2015_FUNCTIONS = {
    "acosh": "acosh",
    "asinh": "asinh",
    "atanh": "atanh",
    "cbrt": "cbrt",
    "cosh": "cosh",
    "expm1": "expm1",
    "hypot": "hypot",
    "log10": "log10",
    "log1p": "log1p",
    "log2": "log2",
    "sinh": "sinh",
    "tanh": "tanh",
    "trunc": "trunc",
}

_MATH_CONSTANTS = {
    "pi": "Math.PI",
    "e": "Math.E",
    "inf": "Infinity",
    "nan": "NaN",
}

_BUILTIN_FUNCTIONS = {
    "abs": "abs",
    "min": "min",
    "max": "max",
    "pow": "pow",
}


class StaticMathMethods:
    """Conversion extension for `math` functions and constants.

    Attributes:
        simulate_round (bool): Whether `round()` is emulated with `Math.round`.
    """

    def __init__(self, simulate_round: bool = False) -> None:
        self.simulate_round = simulate_round

    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if isinstance(node, Member) and node.expr is None and node.declaring_type is math:
            text = _MATH_CONSTANTS.get(node.name)
            if text is not None:
                context.prevent_default()
                with context.operation(OperationType.INDEXER_PROPERTY):
                    context.write(text)
            return

        if not isinstance(node, Call) or not node.is_static:
            return
        if node.declaring_type is math:
            self._convert_math_call(context, node)
        elif node.declaring_type is builtins:
            self._convert_builtin_call(context, node)

    def _convert_math_call(self, context: ConversionContext, node: Call) -> None:
        method = node.method
        if method == "log":
            context.prevent_default()
            self._write_log(context, node.args)
            return

        js_name = _MATH_FUNCTIONS.get(method)
        if js_name is None:
            js_name = _MATH_ES2015_FUNCTIONS.get(method)
            if js_name is None:
                return
            if not context.options.script_version.supports(
                JavascriptApiFeature.MATH_ES2015_FUNCTIONS
            ):
                raise NotSupportedError(
                    f"math.{method}() needs Math.{js_name}, which the target version lacks",
                    node,
                )
        context.prevent_default()
        self._write_math_call(context, js_name, node.args)

    def _convert_builtin_call(self, context: ConversionContext, node: Call) -> None:
        if node.method == "round":
            context.prevent_default()
            self._write_round(context, node)
            return
        js_name = _BUILTIN_FUNCTIONS.get(node.method)
        if js_name is None or (js_name == "pow" and len(node.args) != 2):
            return
        context.prevent_default()
        self._write_math_call(context, js_name, node.args)

    def _write_math_call(
        self, context: ConversionContext, js_name: str, args: tuple[Node, ...]
    ) -> None:
        with context.operation(OperationType.CALL):
            context.write("Math.").write(js_name)
            context.write_many_isolated("(", ")", ",", args)

    def _write_log(self, context: ConversionContext, args: tuple[Node, ...]) -> None:
        if len(args) == 1:
            self._write_math_call(context, "log", args)
            return
        value, base = args
        with context.operation(OperationType.MULTIPLICATIVE):
            self._write_math_call(context, "log", (value,))
            context.write("/")
            context.get_writer().mark_right_operand()
            self._write_math_call(context, "log", (base,))

    def _write_round(self, context: ConversionContext, node: Call) -> None:
        if not self.simulate_round:
            raise NotSupportedError(
                "round() rounds halves to even, which Math.round does not; "
                "set simulate_round=True to accept Math.round semantics",
                node,
            )
        if len(node.args) == 1:
            self._write_math_call(context, "round", node.args)
            return
        value, digits = node.args
        with context.operation(OperationType.CALL):
            context.write("(function(a,b){return Math.round(a*b)/b;})")
            context.write("(")
            with context.operation(OperationType.NO_OP):
                context.write_node(value)
                context.write(",")
                with context.operation(OperationType.CALL):
                    context.write("Math.pow(10,")
                    with context.operation(OperationType.NO_OP):
                        context.write_node(digits)
                    context.write(")")
            context.write(")")
