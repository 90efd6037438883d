# tests/test_string_methods.py

from typing import Any

import pytest
from sample_types import person_param

from exprjs.exprjs_ast import Binary, Call, Constant, Lambda, Member
from exprjs.exprjs_compile import compile_to_javascript
from exprjs.exprjs_constants import ExprType
from exprjs.exprjs_errors import NotSupportedError
from exprjs.exprjs_options import CompilationOptions
from exprjs.extensions.static_string_methods import StaticStringMethods

x = person_param()
NAMES = Member(x, "Names", list[str])


def js(body: Any) -> str:
    options = CompilationOptions(extensions=(StaticStringMethods(),))
    return compile_to_javascript(Lambda((x,), body), options)


def test_instance_join() -> None:
    body = Call(Constant(", "), "join", (NAMES,), type_=str)
    assert js(body) == 'Names.join(", ")'


def test_static_join() -> None:
    body = Call(None, "join", (Constant("-"), NAMES), str, str)
    assert js(body) == 'Names.join("-")'


def test_join_inside_concatenation() -> None:
    join = Call(Constant(","), "join", (NAMES,), type_=str)
    body = Binary(ExprType.ADD, Constant("["), Binary(ExprType.ADD, join, Constant("]")))
    assert js(body) == '"["+(Names.join(",")+"]")'


def test_join_with_computed_separator() -> None:
    separator = Member(x, "Name", str)
    body = Call(separator, "join", (NAMES,), type_=str)
    assert js(body) == "Names.join(Name)"


def test_unsupported_join_form() -> None:
    with pytest.raises(NotSupportedError, match="str.join"):
        js(Call(None, "join", (NAMES,), str, str))


def test_other_string_calls_are_left_to_the_emitter() -> None:
    body = Call(Member(x, "Name", str), "upper", (), type_=str)
    assert js(body) == "Name.toUpperCase()"


def test_literal_list_renders_as_array() -> None:
    body = Call(None, "join", (Constant("/"), Constant(["a", "b"])), str, str)
    assert js(body) == '["a","b"].join("/")'
