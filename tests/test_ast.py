# tests/test_ast.py

import hypothesis.strategies as st
import pytest
from hypothesis import given
from sample_types import Phone, age, name, person_param

from exprjs.exprjs_ast import (
    STATEMENT_KINDS,
    Binary,
    Call,
    Conditional,
    Constant,
    FormattedValue,
    JoinedStr,
    Lambda,
    ListInit,
    Member,
    New,
    NewArray,
    NoneType,
    Parameter,
    Unary,
)
from exprjs.exprjs_constants import ExprType

x = person_param()


def test_constant_infers_type_from_value() -> None:
    assert Constant(1).type_ is int
    assert Constant("a").type_ is str
    assert Constant(None).type_ is NoneType
    assert Constant(1, float).type_ is float


def test_member_infers_declaring_type_from_receiver() -> None:
    member = Member(x, "Age", int)
    assert member.declaring_type is x.type_
    static = Member(None, "Number", str, Phone)
    assert static.declaring_type is Phone


@pytest.mark.parametrize(
    "op, left, right, expected",
    [
        (ExprType.EQUAL, Constant(1), Constant(2), bool),
        (ExprType.ADD, Constant("a"), Constant(1), str),
        (ExprType.ADD, Constant(1), Constant(2), int),
        (ExprType.ADD, Constant(1), Constant(2.0), float),
        (ExprType.DIVIDE, Constant(1), Constant(2), float),
        (ExprType.IN, Constant(1), Constant([1]), bool),
    ],
)  # type: ignore[misc]
def test_binary_type_inference(op: ExprType, left: Constant, right: Constant, expected: type) -> None:
    assert Binary(op, left, right).type_ is expected


def test_array_index_yields_element_type() -> None:
    phones = Member(x, "Phones", list[Phone])
    assert Binary(ExprType.ARRAY_INDEX, phones, Constant(0)).type_ is Phone


def test_unary_type_inference() -> None:
    assert Unary(ExprType.NOT, age(x)).type_ is bool
    assert Unary(ExprType.ARRAY_LENGTH, Member(x, "Phones", list[Phone])).type_ is int
    assert Unary(ExprType.NEGATE, age(x)).type_ is int


def test_conditional_takes_type_of_true_branch() -> None:
    assert Conditional(Constant(True), Constant("a"), Constant("b")).type_ is str


def test_sequences_are_frozen_to_tuples() -> None:
    call = Call(name(x), "find", [Constant("a")])  # type: ignore[arg-type]
    assert call.args == (Constant("a"),)
    assert call.declaring_type is str
    assert not call.is_static
    assert hash(call) == hash(Call(name(x), "find", (Constant("a"),)))


def test_lambda_return_type_and_type() -> None:
    fn = Lambda((x,), age(x))
    assert fn.return_type is int
    assert fn.type_ is Lambda
    assert Lambda((x,), age(x), NoneType).return_type is NoneType


def test_new_members_must_match_args() -> None:
    with pytest.raises(ValueError, match="same length"):
        New(object, (Constant(1),), members=("a", "b"))


def test_collection_node_types() -> None:
    assert NewArray((Constant(1),), int).type_ == list[int]
    assert ListInit(New(dict[str, int])).type_ == dict[str, int]
    assert JoinedStr(()).type_ is str
    assert FormattedValue(age(x), ".2f").type_ is str
    assert FormattedValue(age(x)).type_ is int


def test_statement_kinds() -> None:
    assert STATEMENT_KINDS == {"block", "loop", "try", "switch", "goto", "label", "type_test"}


def test_repr_truncates_and_skips_types() -> None:
    array = NewArray(tuple(Constant(i) for i in range(5)), int)
    assert repr(array) == "NewArray(items=[Constant(value=0), Constant(value=1), Constant(value=2), ...])"
    assert repr(Binary(ExprType.ADD, Constant(1), Constant(2))) == (
        "Binary(op=add, left=Constant(value=1), right=Constant(value=2))"
    )


def test_to_dict() -> None:
    assert Binary(ExprType.GREATER_THAN, age(x), Constant(1)).to_dict() == {
        "kind": "binary",
        "op": ExprType.GREATER_THAN.value,
        "left": {
            "kind": "member",
            "expr": {"kind": "parameter", "name": "x", "type": "Person", "by_ref": False},
            "name": "Age",
            "type": "int",
            "declaring_type": "Person",
        },
        "right": {"kind": "constant", "value": 1, "type": "int"},
        "type": "bool",
    }


@given(st.text(min_size=1), st.integers())  # type: ignore[misc]
def test_equal_trees_are_equal(member: str, value: int) -> None:
    left = Binary(ExprType.EQUAL, Member(x, member), Constant(value))
    right = Binary(ExprType.EQUAL, Member(x, member), Constant(value))
    assert left == right
    assert hash(left) == hash(right)


@given(st.text(min_size=1))  # type: ignore[misc]
def test_parameters_compare_by_value(param_name: str) -> None:
    assert Parameter(param_name, int) == Parameter(param_name, int)
    assert Parameter(param_name, int) != Parameter(param_name, int, by_ref=True)
