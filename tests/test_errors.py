# tests/test_errors.py

import pytest

from exprjs.exprjs_ast import Constant
from exprjs.exprjs_errors import (
    AmbiguousFlagsError,
    ByRefParameterError,
    InvalidRegexError,
    JsCompilationError,
    NotSupportedError,
    OptionsError,
    ScopeParameterError,
    UnresolvableConstantError,
    UnsupportedConstructError,
    UnsupportedInstanceMethodError,
    UnsupportedMemberInitError,
)


@pytest.mark.parametrize(
    "error_class",
    [
        UnsupportedConstructError,
        UnsupportedMemberInitError,
        UnsupportedInstanceMethodError,
        AmbiguousFlagsError,
        ByRefParameterError,
        UnresolvableConstantError,
    ],
)  # type: ignore[misc]
def test_not_supported_family(error_class: type[NotSupportedError]) -> None:
    node = Constant(1)
    error = error_class("nope", node)
    assert isinstance(error, NotSupportedError)
    assert isinstance(error, NotImplementedError)
    assert isinstance(error, JsCompilationError)
    assert error.node is node
    assert str(error) == "nope"


def test_invalid_input_family() -> None:
    regex_error = InvalidRegexError("bad", "(")
    assert isinstance(regex_error, ValueError)
    assert regex_error.pattern == "(" and regex_error.node is None
    assert isinstance(ScopeParameterError("arity"), ValueError)


def test_options_error_problems() -> None:
    assert OptionsError("Invalid").problems == []
    error = OptionsError("Invalid", ["unknown flag 'X'"])
    assert error.problems == ["unknown flag 'X'"]
    assert not isinstance(error, JsCompilationError)
