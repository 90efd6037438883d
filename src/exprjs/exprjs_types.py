"""
Type classification helpers and the closure root used for captured values.

The emitter only sees static types, so every decision of the form "is this a
list", "is this a flags enum" goes through the predicates below. They accept
plain classes, parameterized generics (`list[int]`, `dict[str, Phone]`) and the
`collections.abc` protocols.
"""

import builtins
import collections.abc as abc
import decimal
import enum
import fractions
import types
from typing import Any, get_origin

_LIST_PROTOCOLS = (
    abc.Sequence,
    abc.MutableSequence,
    abc.Collection,
    abc.Iterable,
    abc.Set,
    abc.MutableSet,
)
_DICT_PROTOCOLS = (abc.Mapping, abc.MutableMapping)


def origin_class(type_: Any) -> type | None:
    """Returns the runtime class behind a type annotation, or None."""
    origin = get_origin(type_) or type_
    return origin if isinstance(origin, type) else None


def is_enum_type(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, enum.Enum)


def is_flags_enum_type(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, enum.Flag)


def is_numeric_type(type_: Any) -> bool:
    cls = origin_class(type_)
    if cls is None or cls is bool or is_enum_type(cls):
        return False
    return issubclass(cls, (int, float, decimal.Decimal, fractions.Fraction))


def is_dictionary_type(type_: Any) -> bool:
    cls = origin_class(type_)
    if cls is None:
        return False
    return issubclass(cls, dict) or cls in _DICT_PROTOCOLS


def is_list_type(type_: Any) -> bool:
    """True for list-like collections; `str` and `bytes` are not lists."""
    cls = origin_class(type_)
    if cls is None or issubclass(cls, (str, bytes)) or is_dictionary_type(cls):
        return False
    return issubclass(cls, (list, tuple, set, frozenset)) or cls in _LIST_PROTOCOLS


def qualified_name(owner: Any) -> str:
    """Dotted name of a class or module, as written after `new` or before a
    static member access."""
    if isinstance(owner, types.ModuleType):
        return owner.__name__
    return f"{owner.__module__}.{owner.__qualname__}"


def is_builtins(owner: Any) -> bool:
    return owner is builtins


class Closure:
    """Root of a captured environment.

    Wraps the object captured values are read from: a function (its free
    variables are read from its closure cells), a mapping, or any object with
    attributes (a namespace, an instance). The root itself renders as nothing;
    members read through it are evaluated at compile time.

    Example:
        counter = 1
        root = Closure(lambda: counter)
        Member(Constant(root), "counter", int)   # compiles to "1"
    """

    def __init__(self, source: Any):
        self.source = source

    def read(self, name: str) -> Any:
        """Reads the current value of a captured name.

        Raises:
            KeyError: If the name is not captured by the source.
        """
        source = self.source
        code = getattr(source, "__code__", None)
        if code is not None:
            if name in code.co_freevars:
                cell = source.__closure__[code.co_freevars.index(name)]
                return cell.cell_contents
            namespace = getattr(source, "__globals__", {})
            if name in namespace:
                return namespace[name]
            raise KeyError(name)
        if isinstance(source, abc.Mapping):
            return source[name]
        try:
            return getattr(source, name)
        except AttributeError as e:
            raise KeyError(name) from e

    def __repr__(self) -> str:
        return f"Closure({self.source!r})"


def is_closure_root_type(type_: Any) -> bool:
    return isinstance(type_, type) and issubclass(type_, Closure)
