"""
Enum rendering extension.

By default enum constants render as their numeric value. This extension adds
names, `EnumName.Member` static fields, and several ways of writing combined
flags values.

A flags value is decomposed by scanning the distinct members from the highest
value down, taking every member whose bits are all still set. Zero-valued
members are never taken; bits no member covers are written as a raw number:

    class Access(IntFlag):
        READ = 1
        WRITE = 2

    Access.READ | Access.WRITE | 8
        USE_STRINGS | FLAGS_AS_STRING_WITH_SEPARATOR  ->  "WRITE|READ|8"
        USE_STRINGS | FLAGS_AS_ARRAY                  ->  ["WRITE","READ","8"]
        USE_NUMBERS | FLAGS_AS_NUMERIC_ORS            ->  2|1|8
"""

import enum
from enum import IntFlag
from typing import Any, Iterable

from exprjs.exprjs_ast import Constant
from exprjs.exprjs_constants import OperationType
from exprjs.exprjs_context import ConversionContext
from exprjs.exprjs_errors import AmbiguousFlagsError
from exprjs.exprjs_types import is_enum_type, is_flags_enum_type


class EnumOptions(IntFlag):
    USE_NUMBERS = 1
    USE_STRINGS = 2
    USE_STATIC_FIELDS = 4
    FLAGS_AS_STRING_WITH_SEPARATOR = 8
    FLAGS_AS_ARRAY = 16
    FLAGS_AS_NUMERIC_ORS = 32

    @classmethod
    def parse(cls, raw: Any) -> "EnumOptions":
        """Builds options from an int, a member name or a list of names.

        Raises:
            ValueError: If a name is not an option.
        """
        if raw is None:
            return cls.USE_NUMBERS
        if isinstance(raw, int):
            return cls(raw)
        if isinstance(raw, str):
            raw = [raw]
        options = cls(0)
        for name in raw:
            member = cls.__members__.get(str(name).upper())
            if member is None:
                raise ValueError(f"unknown enum option {name!r}")
            options |= member
        return options


def _distinct_members(enum_type: type[enum.Enum]) -> list[enum.Enum]:
    seen: list[enum.Enum] = []
    for member in enum_type.__members__.values():
        if not any(member is other for other in seen):
            seen.append(member)
    return sorted(seen, key=lambda member: member.value)


class EnumConversionExtension:
    """Renders enum constants according to `EnumOptions`.

    Attributes:
        options (EnumOptions): The rendering options.
    """

    def __init__(self, options: EnumOptions | int = EnumOptions.USE_NUMBERS) -> None:
        self.options = EnumOptions(options)

    def _has(self, option: EnumOptions) -> bool:
        return bool(self.options & option)

    def convert_to_javascript(self, context: ConversionContext) -> None:
        node = context.node
        if not isinstance(node, Constant) or node.value is None:
            return
        value = node.value
        if not isinstance(value, enum.Enum):
            if not is_enum_type(node.type_):
                return
            try:
                value = node.type_(value)
            except ValueError:
                # not a declared member
                context.prevent_default()
                self._write_item(context, value, value, in_string=False)
                return

        context.prevent_default()
        if not isinstance(value.value, int) or not is_flags_enum_type(type(value)):
            self._write_item(context, value, value.value, in_string=False)
            return
        self._write_flags(context, value)

    def _write_flags(self, context: ConversionContext, value: enum.Enum) -> None:
        as_string = self._has(EnumOptions.FLAGS_AS_STRING_WITH_SEPARATOR)
        as_array = self._has(EnumOptions.FLAGS_AS_ARRAY)
        as_ors = self._has(EnumOptions.FLAGS_AS_NUMERIC_ORS)
        remaining = int(value.value)

        if remaining == 0 and not (as_string or as_array):
            self._write_item(context, value, 0, in_string=False)
            return

        selected: list[enum.Enum] = []
        for member in reversed(_distinct_members(type(value))):
            bits = int(member.value)
            if bits != 0 and bits & remaining == bits:
                remaining &= ~bits
                selected.append(member)
        items: list[tuple[Any, int]] = [(member, int(member.value)) for member in selected]
        if remaining != 0:
            items.append((remaining, remaining))

        writer = context.get_writer()
        if as_string:
            with writer.operation(OperationType.LITERAL):
                writer.write('"')
                self._write_separated(context, "|", items, in_string=True)
                writer.write('"')
        elif as_array:
            with writer.operation(OperationType.NO_OP):
                writer.write("[")
                self._write_separated(context, ",", items, in_string=False)
                writer.write("]")
        elif len(items) > 1:
            if not as_ors:
                raise AmbiguousFlagsError(
                    "When converting flags enums to JavaScript, a flags option must be specified",
                    context.node,
                )
            with writer.operation(OperationType.BITWISE_OR):
                self._write_separated(context, "|", items, in_string=False)
        else:
            self._write_separated(context, "|", items, in_string=False)

    def _write_separated(
        self,
        context: ConversionContext,
        separator: str,
        items: Iterable[tuple[Any, int]],
        in_string: bool,
    ) -> None:
        writer = context.get_writer()
        start = len(writer)
        for item, number in items:
            if len(writer) > start:
                writer.write(separator)
            self._write_item(context, item, number, in_string)

    def _write_item(
        self, context: ConversionContext, item: Any, number: Any, in_string: bool
    ) -> None:
        writer = context.get_writer()
        if self._has(EnumOptions.USE_STRINGS):
            if self._has(EnumOptions.USE_NUMBERS):
                text = str(number)
            elif isinstance(item, enum.Enum) and item.name is not None:
                text = item.name
            else:
                text = "" if number == 0 else str(number)
            if in_string:
                writer.write_literal_string_content(text)
            else:
                with writer.operation(OperationType.LITERAL):
                    writer.write_string_literal(text)
            return

        if in_string:
            writer.write_literal_string_content(str(number))
            return

        if (
            self._has(EnumOptions.USE_STATIC_FIELDS)
            and not self._has(EnumOptions.USE_NUMBERS)
            and isinstance(item, enum.Enum)
            and item.name is not None
        ):
            with writer.operation(OperationType.INDEXER_PROPERTY):
                writer.write(type(item).__name__).write_accessor(item.name)
            return

        with writer.operation(OperationType.LITERAL):
            if isinstance(number, int):
                writer.write_number(int(number))
            else:
                writer.write_literal(number)
