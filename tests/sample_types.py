# tests/sample_types.py
"""Shared domain classes the test trees are typed with."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Annotated

from exprjs.exprjs_ast import Member, Parameter
from exprjs.exprjs_metadata import JsMember
from exprjs.extensions.custom_methods import js_method


class Phone:
    DDD: int
    Number: str


class Person:
    Age: int
    Name: str
    Phones: list[Phone]
    PhonesByName: dict[str, Phone]
    Count: int
    Custom: Annotated[str, JsMember("otherName")]
    Custom3: str

    @property
    @JsMember("otherName2")
    def Custom2(self) -> str:
        return ""


class Access(IntFlag):
    READ = 1
    WRITE = 2


class StrangeAccess(IntFlag):
    A = 0x011
    B = 0x101
    C = 0x110


class Overlap(IntFlag):
    A = 1
    B = 2
    AB = 3


class Color(IntEnum):
    RED = 0
    GREEN = 1
    BLUE = 2


class Suit(Enum):
    HEARTS = "h"
    SPADES = "s"


class Document:
    Rights: Access
    Shade: Color


@dataclass
class Record:
    name: str = field(default="", metadata={"js_name": "record_name"})
    size: int = 0


class FieldInfo:
    """Stands in for a serialization library's field-info marker."""

    def __init__(self, alias: str):
        self.alias = alias


class Aliased:
    email: Annotated[str, FieldInfo(alias="e-mail")]


class Xpto:
    @staticmethod
    def get_value(n: int = 0) -> int:
        return n


class JsArray:
    @js_method("splice", positional_arguments=(0, 1))
    def remove_at(self, index: int) -> "JsArray":
        raise NotImplementedError("Never called")


def person_param(name: str = "x") -> Parameter:
    return Parameter(name, Person)


def age(param: Parameter) -> Member:
    return Member(param, "Age", int)


def name(param: Parameter) -> Member:
    return Member(param, "Name", str)
