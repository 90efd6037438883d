# tests/test_compile.py

import threading

import pytest
from sample_types import Person, age, name, person_param

from exprjs.exprjs_ast import Binary, Constant, Lambda, Member, Parameter
from exprjs.exprjs_compile import (
    CompilationResult,
    JsCompiler,
    compile_expression,
    compile_to_javascript,
)
from exprjs.exprjs_constants import ExprType
from exprjs.exprjs_errors import JsCompilationError, ScopeParameterError
from exprjs.exprjs_options import CompilationOptions, JsCompilationFlags
from exprjs.exprjs_script_version import ScriptVersion
from exprjs.exprjs_types import Closure

x = person_param()
NAME_AND_AGE = Lambda((x,), Binary(ExprType.ADD, name(x), age(x)))


def test_default_options_write_body_with_bare_members() -> None:
    assert compile_to_javascript(NAME_AND_AGE) == "Name+Age"


def test_scope_parameter_without_body_only_wraps_in_function() -> None:
    options = CompilationOptions(flags=JsCompilationFlags.SCOPE_PARAMETER)
    assert compile_to_javascript(NAME_AND_AGE, options) == "function(Name,Age){return Name+Age;}"


def test_scope_parameter_arrow_form() -> None:
    options = CompilationOptions(
        flags=JsCompilationFlags.SCOPE_PARAMETER, script_version=ScriptVersion.ES60
    )
    assert compile_to_javascript(NAME_AND_AGE, options) == "(Name,Age)=>Name+Age"
    single = Lambda((x,), age(x))
    assert compile_to_javascript(single, options) == "Age=>Age"


def test_body_only_keeps_parameter_names() -> None:
    options = CompilationOptions(flags=JsCompilationFlags.BODY_ONLY)
    assert compile_to_javascript(NAME_AND_AGE, options) == "x.Name+x.Age"


def test_no_flags_writes_whole_lambda() -> None:
    options = CompilationOptions(flags=JsCompilationFlags.NONE)
    assert compile_to_javascript(NAME_AND_AGE, options) == "function(x){return x.Name+x.Age;}"
    arrow = CompilationOptions(flags=JsCompilationFlags.NONE, script_version=ScriptVersion.ES60)
    assert compile_to_javascript(NAME_AND_AGE, arrow) == "x=>x.Name+x.Age"


def test_used_scope_members_are_distinct_in_first_use_order() -> None:
    body = Binary(ExprType.ADD, Binary(ExprType.ADD, name(x), age(x)), name(x))
    result = JsCompiler().compile_result(Lambda((x,), body))
    assert result == CompilationResult("Name+Age+Name", ("Name", "Age"))


def test_used_scope_members_empty_without_scope_parameter() -> None:
    options = CompilationOptions(flags=JsCompilationFlags.BODY_ONLY)
    result = JsCompiler(options).compile_result(NAME_AND_AGE)
    assert result.used_scope_members == ()


def test_scope_parameter_requires_exactly_one_parameter() -> None:
    y = Parameter("y", Person)
    with pytest.raises(ScopeParameterError, match="exactly one parameter"):
        compile_to_javascript(Lambda((x, y), age(x)))
    with pytest.raises(ValueError):
        compile_to_javascript(Lambda((), Constant(1)))


def test_compile_accepts_bare_expression() -> None:
    assert JsCompiler().compile(Binary(ExprType.MULTIPLY, Constant(2), Constant(3))) == "2*3"
    assert compile_expression(Member(x, "Age", int)) == "x.Age"


def test_compiler_is_reusable() -> None:
    compiler = JsCompiler()
    first = compiler.compile_result(NAME_AND_AGE)
    second = compiler.compile_result(Lambda((x,), age(x)))
    assert first.used_scope_members == ("Name", "Age")
    assert second == CompilationResult("Age", ("Age",))
    assert compiler.compile(NAME_AND_AGE) == first.code


def test_errors_share_a_root() -> None:
    with pytest.raises(JsCompilationError) as e:
        compile_expression(Constant(object()))
    assert isinstance(e.value.node, Constant)


def test_concurrent_compiles_are_independent() -> None:
    compiler = JsCompiler()
    results: list[str] = []
    lock = threading.Lock()

    def work() -> None:
        for _ in range(50):
            code = compiler.compile(NAME_AND_AGE)
            with lock:
                results.append(code)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert set(results) == {"Name+Age"}
    assert len(results) == 200


def test_captured_values_are_read_on_every_compile() -> None:
    threshold = 1

    def captured() -> int:
        return threshold

    tree = Lambda((x,), Member(Constant(Closure(captured)), "threshold", int))
    compiler = JsCompiler()
    assert compiler.compile(tree) == "1"
    threshold = 2
    assert compiler.compile(tree) == "2"
