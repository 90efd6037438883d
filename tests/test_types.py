# tests/test_types.py

import builtins
import collections.abc as abc
import decimal
import math
import types

import pytest
from sample_types import Access, Color, Person, Phone

from exprjs.exprjs_types import (
    Closure,
    is_builtins,
    is_closure_root_type,
    is_dictionary_type,
    is_enum_type,
    is_flags_enum_type,
    is_list_type,
    is_numeric_type,
    origin_class,
    qualified_name,
)


def test_origin_class() -> None:
    assert origin_class(list[int]) is list
    assert origin_class(Person) is Person
    assert origin_class("Person") is None


@pytest.mark.parametrize(
    "type_, expected",
    [
        (int, True),
        (float, True),
        (decimal.Decimal, True),
        (bool, False),
        (Color, False),
        (str, False),
    ],
)  # type: ignore[misc]
def test_is_numeric_type(type_: type, expected: bool) -> None:
    assert is_numeric_type(type_) is expected


@pytest.mark.parametrize(
    "type_, expected",
    [
        (list[Phone], True),
        (tuple, True),
        (abc.Sequence, True),
        (set[int], True),
        (str, False),
        (bytes, False),
        (dict[str, int], False),
        (Person, False),
    ],
)  # type: ignore[misc]
def test_is_list_type(type_: type, expected: bool) -> None:
    assert is_list_type(type_) is expected


def test_is_dictionary_type() -> None:
    assert is_dictionary_type(dict[str, Phone])
    assert is_dictionary_type(abc.Mapping)
    assert not is_dictionary_type(list)


def test_enum_predicates() -> None:
    assert is_enum_type(Color) and not is_flags_enum_type(Color)
    assert is_enum_type(Access) and is_flags_enum_type(Access)
    assert not is_enum_type(int)


def test_qualified_name() -> None:
    assert qualified_name(Phone) == "sample_types.Phone"
    assert qualified_name(math) == "math"
    assert qualified_name(types.SimpleNamespace) == "types.SimpleNamespace"


def test_is_builtins() -> None:
    assert is_builtins(builtins)
    assert not is_builtins(math)


def test_closure_reads_function_cells_live() -> None:
    value = 1

    def read() -> int:
        return value

    root = Closure(read)
    assert root.read("value") == 1
    value = 2
    assert root.read("value") == 2


def test_closure_reads_globals_mappings_and_attributes() -> None:
    assert Closure(test_closure_reads_function_cells_live).read("Closure") is Closure
    assert Closure({"a": 1}).read("a") == 1
    assert Closure(types.SimpleNamespace(b=2)).read("b") == 2


def test_closure_missing_names_raise_key_error() -> None:
    with pytest.raises(KeyError):
        Closure({}).read("a")
    with pytest.raises(KeyError):
        Closure(types.SimpleNamespace()).read("a")
    with pytest.raises(KeyError):
        Closure(lambda: None).read("nowhere_to_be_found")


def test_is_closure_root_type() -> None:
    assert is_closure_root_type(Closure)
    assert not is_closure_root_type(dict)
