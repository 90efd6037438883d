# tests/test_precedence.py

import operator
from typing import Any, Callable

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from exprjs.exprjs_ast import Binary, Constant, Node
from exprjs.exprjs_compile import JsCompiler, compile_expression
from exprjs.exprjs_constants import (
    ISOLATION_OPERATIONS,
    ExprType,
    OperationType,
    current_has_precedence,
    operation_for,
)
from exprjs.exprjs_options import CompilationOptions

# Python and JavaScript agree on the relative precedence of these operators.
INT_OPERATORS: dict[ExprType, Callable[[int, int], int]] = {
    ExprType.ADD: operator.add,
    ExprType.SUBTRACT: operator.sub,
    ExprType.MULTIPLY: operator.mul,
    ExprType.AND: operator.and_,
    ExprType.OR: operator.or_,
    ExprType.EXCLUSIVE_OR: operator.xor,
}


def evaluate(node: Node) -> int:
    if isinstance(node, Constant):
        return int(node.value)
    assert isinstance(node, Binary)
    return INT_OPERATORS[node.op](evaluate(node.left), evaluate(node.right))


@composite
def int_tree(draw: Any, depth: int = 4) -> Node:
    if depth == 0 or draw(st.booleans()):
        return Constant(draw(st.integers(min_value=0, max_value=20)))
    op = draw(st.sampled_from(sorted(INT_OPERATORS, key=lambda o: o.value)))
    return Binary(op, draw(int_tree(depth - 1)), draw(int_tree(depth - 1)), int)


@settings(max_examples=300)
@given(tree=int_tree())  # type: ignore[misc]
def test_emitted_text_keeps_evaluation_order(tree: Node) -> None:
    code = compile_expression(tree)
    assert eval(code) == evaluate(tree)  # noqa: S307


@given(tree=int_tree())  # type: ignore[misc]
def test_compilation_is_deterministic(tree: Node) -> None:
    assert compile_expression(tree) == compile_expression(tree)


ALL_EXTENSIONS = CompilationOptions.from_mapping(
    {
        "extensions": [
            "static_math",
            "static_string",
            "linq",
            "enum",
            "member_init_as_json",
            "custom_methods",
        ]
    }
)


@given(tree=int_tree())  # type: ignore[misc]
def test_compilation_with_extensions_is_deterministic(tree: Node) -> None:
    compiler = JsCompiler(ALL_EXTENSIONS)
    first = compiler.compile_result(tree)
    assert compiler.compile_result(tree) == first
    assert first.code == compile_expression(tree)


@given(tree=int_tree())  # type: ignore[misc]
def test_parentheses_are_balanced(tree: Node) -> None:
    depth = 0
    for ch in compile_expression(tree):
        depth += {"(": 1, ")": -1}.get(ch, 0)
        assert depth >= 0
    assert depth == 0


@pytest.mark.parametrize(
    "current, parent, right_side, expected",
    [
        (OperationType.MULTIPLICATIVE, OperationType.ADDITIVE, False, True),
        (OperationType.ADDITIVE, OperationType.MULTIPLICATIVE, False, False),
        (OperationType.ADDITIVE, OperationType.ADDITIVE, False, True),
        (OperationType.ADDITIVE, OperationType.ADDITIVE, True, False),
        (OperationType.ADDITIVE, OperationType.CONCAT, False, False),
        (OperationType.LITERAL, OperationType.INDEXER_PROPERTY, False, False),
        (OperationType.CALL, OperationType.UNARY, False, True),
        (OperationType.COALESCE, OperationType.LOGICAL_OR, False, False),
        (OperationType.LOGICAL_AND, OperationType.COALESCE, True, False),
        (OperationType.TERNARY_OP, OperationType.TERNARY_FALSE_VALUE, False, True),
        (OperationType.TERNARY_OP, OperationType.TERNARY_TEST, False, False),
    ],
)  # type: ignore[misc]
def test_current_has_precedence(
    current: OperationType, parent: OperationType, right_side: bool, expected: bool
) -> None:
    assert current_has_precedence(current, parent, right_side) is expected


@given(
    current=st.sampled_from(list(OperationType)),
    isolation=st.sampled_from(sorted(ISOLATION_OPERATIONS)),
    right_side=st.booleans(),
)  # type: ignore[misc]
def test_isolation_kinds_never_wrap(
    current: OperationType, isolation: OperationType, right_side: bool
) -> None:
    assert current_has_precedence(current, isolation, right_side)
    assert current_has_precedence(isolation, current, right_side)


def test_addition_of_strings_is_concat() -> None:
    assert operation_for(ExprType.ADD, str) is OperationType.CONCAT
    assert operation_for(ExprType.ADD, int) is OperationType.ADDITIVE
    assert operation_for(ExprType.EQUAL) is OperationType.EQUALITY
