# tests/test_custom_methods.py

from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from sample_types import JsArray

from exprjs.exprjs_ast import Call, Constant, Lambda, Parameter
from exprjs.exprjs_compile import CompilationResult, JsCompiler, compile_to_javascript
from exprjs.exprjs_errors import UnsupportedInstanceMethodError
from exprjs.exprjs_options import CompilationOptions, JsCompilationFlags
from exprjs.extensions.custom_methods import (
    CustomMethods,
    JsMethodName,
    get_js_method_name,
    js_method,
)

array = Parameter("array", JsArray)


def options(extension: CustomMethods) -> CompilationOptions:
    return CompilationOptions(flags=JsCompilationFlags.BODY_ONLY, extensions=(extension,))


def js(body: Any, extension: CustomMethods) -> str:
    return compile_to_javascript(Lambda((array,), body), options(extension))


def compile_result(body: Any, compiler: JsCompiler) -> CompilationResult:
    return compiler.compile_result(Lambda((array,), body))


def remove_at(*args: Any) -> Call:
    return Call(array, "remove_at", args, type_=JsArray)


def test_placeholders_and_positional_defaults() -> None:
    result = compile_result(remove_at(Constant(2)), JsCompiler(options(CustomMethods())))
    assert result.code == "array.splice(arg_0, 1)"
    assert result.placeholders == {"arg_0": Constant(2)}


def test_placeholders_are_numbered_per_compile() -> None:
    compiler = JsCompiler(options(CustomMethods()))
    tree = remove_at(Constant(2))
    first = compile_result(tree, compiler)
    second = compile_result(tree, compiler)
    assert first == second
    assert second.code == "array.splice(arg_0, 1)"
    both = compile_result(remove_at(Constant(4), Constant(3)), compiler)
    assert both.code == "array.splice(arg_0, arg_1)"
    assert list(both.placeholders) == ["arg_0", "arg_1"]


def test_nested_calls_share_one_numbering() -> None:
    body = Call(remove_at(Constant(0)), "remove_at", (Constant(1),), type_=JsArray)
    result = compile_result(body, JsCompiler(options(CustomMethods())))
    assert result.code == "array.splice(arg_0, 1).splice(arg_1, 1)"
    assert result.placeholders == {"arg_0": Constant(0), "arg_1": Constant(1)}


@given(st.lists(st.integers(min_value=-5, max_value=5), max_size=2))  # type: ignore[misc]
def test_repeated_compiles_are_identical(values: list[int]) -> None:
    compiler = JsCompiler(options(CustomMethods()))
    tree = remove_at(*(Constant(v) for v in values))
    assert compile_result(tree, compiler) == compile_result(tree, compiler)


def test_inline_arguments() -> None:
    result = compile_result(remove_at(Constant(2)), JsCompiler(options(CustomMethods(True))))
    assert result.code == "array.splice(2, 1)"
    assert result.placeholders == {}


def test_missing_arguments_use_every_default() -> None:
    extension = CustomMethods()
    assert js(remove_at(), extension) == "array.splice(0, 1)"


def test_nested_receiver() -> None:
    extension = CustomMethods(inline_arguments=True)
    body = Call(remove_at(Constant(0)), "remove_at", (Constant(1),), type_=JsArray)
    assert js(body, extension) == "array.splice(0, 1).splice(1, 1)"


def test_undecorated_methods_are_rejected() -> None:
    body = Call(array, "clear", (), type_=JsArray)
    with pytest.raises(UnsupportedInstanceMethodError):
        js(body, CustomMethods())


def test_marker_lookup() -> None:
    marker = get_js_method_name(JsArray, "remove_at")
    assert isinstance(marker, JsMethodName)
    assert marker.name == "splice"
    assert marker.positional_arguments == (0, 1)
    assert get_js_method_name(JsArray, "clear") is None
    assert get_js_method_name(None, "remove_at") is None


def test_decorator_keeps_function() -> None:
    def push(self: Any, value: Any) -> None:
        pass

    assert js_method("push")(push) is push
    assert repr(get_js_method_name(type("T", (), {"push": push}), "push")) == "JsMethodName('push', ())"
