"""
Output buffer and precedence controller for JavaScript emission.

`JavascriptWriter` is an append-only text buffer with helpers for JavaScript
literals (strings, numbers, regular expressions) and operator tokens. It also
owns the operation stack used by `PrecedenceController`.

Parenthesization works as a stack discipline instead of a precedence-climbing
printer: every construct that has a binding strength enters an operation scope

    with writer.operation(OperationType.ADDITIVE):
        ...

which pushes the bucket, compares it with the bucket below and writes `(` right
away when the parent binds tighter; leaving the scope writes the matching `)`
and pops. Children are always emitted as if they were top-level expressions.

The buffer length doubles as a write position: emitters record
`mark = len(writer)` before visiting a child and compare afterwards, which is
how separators are placed between items whose output might be suppressed.
"""

import decimal
import math
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from exprjs.exprjs_constants import (
    BINARY_OPERATOR_TOKENS,
    UNARY_OPERATOR_TOKENS,
    ExprType,
    OperationType,
    current_has_precedence,
)

_STRING_ESCAPES = {
    "\\": "\\\\",
    "\r": "\\r",
    "\n": "\\n",
    "\t": "\\t",
    "\0": "\\0",
    '"': '\\"',
}
_ESCAPE_TABLE = str.maketrans(_STRING_ESCAPES)


@dataclass
class OperationFrame:
    """One entry of the operation stack."""

    op: OperationType
    right_side: bool = False


class PrecedenceController:
    """Context manager that parenthesizes one operation scope when needed.

    Entering pushes the operation and writes `(` if the operation does not have
    precedence over its parent; exiting writes `)` if one was opened, then pops.
    """

    def __init__(self, writer: "JavascriptWriter", op: OperationType):
        self._writer = writer
        self._op = op
        self._opened = False

    def __enter__(self) -> "PrecedenceController":
        stack = self._writer.operations
        parent = stack[-1] if stack else None
        stack.append(OperationFrame(self._op))
        if parent is not None and not current_has_precedence(
            self._op, parent.op, parent.right_side
        ):
            self._opened = True
            self._writer.write("(")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._opened and exc_type is None:
            self._writer.write(")")
        self._writer.operations.pop()

    @property
    def opened(self) -> bool:
        return self._opened


class JavascriptWriter:
    """Append-only buffer for JavaScript source text.

    Attributes:
        operations (list[OperationFrame]): The precedence stack, innermost last.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0
        self.operations: list[OperationFrame] = []

    def __len__(self) -> int:
        return self._length

    @property
    def length(self) -> int:
        return self._length

    def get_output(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.get_output()

    def _last_char(self) -> str:
        for part in reversed(self._parts):
            if part:
                return part[-1]
        return ""

    def write(self, text: Any) -> "JavascriptWriter":
        """Appends text; returns the writer so calls can be chained.

        A space is inserted between two `+`, two `-` or two `/` characters so
        that `a - -1` never becomes the `--` token and a regex literal after a
        division never opens a comment.
        """
        text = str(text)
        if not text:
            return self
        if text[0] in "+-/" and self._last_char() == text[0]:
            text = " " + text
        self._parts.append(text)
        self._length += len(text)
        return self

    def text_since(self, mark: int) -> str:
        return self.get_output()[mark:]

    def wrap_since(self, mark: int, open_: str = "(", close: str = ")") -> None:
        """Wraps everything written after `mark` in `open_`/`close`."""
        output = self.get_output()
        rewritten = output[:mark] + open_ + output[mark:] + close
        self._parts = [rewritten]
        self._length = len(rewritten)

    def operation(self, op: OperationType | int) -> PrecedenceController:
        """Opens a precedence scope; use as a context manager."""
        return PrecedenceController(self, OperationType(op))

    def mark_right_operand(self) -> None:
        """Flags the innermost scope: what follows is its right operand."""
        if self.operations:
            self.operations[-1].right_side = True

    def write_operator(self, op: ExprType) -> "JavascriptWriter":
        """Writes the JavaScript token of a binary or unary operator.

        Raises:
            ValueError: If the operator has no JavaScript token.
        """
        token = BINARY_OPERATOR_TOKENS.get(op) or UNARY_OPERATOR_TOKENS.get(op)
        if token is None:
            raise ValueError(f"Operator has no JavaScript token: {op.value}")
        return self.write(token)

    def write_accessor(self, name: str) -> "JavascriptWriter":
        """Writes `.name`, or `["name"]` when the name is not an identifier."""
        if name.isidentifier():
            return self.write(".").write(name)
        self.write("[")
        self.write_string_literal(name)
        return self.write("]")

    def write_literal_string_content(self, value: str) -> "JavascriptWriter":
        return self.write(value.translate(_ESCAPE_TABLE))

    def write_string_literal(self, value: str) -> "JavascriptWriter":
        self._parts.append('"')
        self._length += 1
        self.write_literal_string_content(value)
        self._parts.append('"')
        self._length += 1
        return self

    def write_number(self, value: Any) -> "JavascriptWriter":
        """Writes a number the way JavaScript parses it back.

        The representation never depends on the host locale: Python's `repr`
        is already the shortest round-trip form with a `.` decimal point.
        """
        if isinstance(value, bool):
            raise TypeError("write_number() does not accept bool")
        if isinstance(value, int):
            return self.write(str(value))
        if isinstance(value, decimal.Decimal):
            if not value.is_finite():
                raise ValueError(f"Non-finite decimal: {value}")
            return self.write(format(value.normalize(), "f"))
        number = float(value)
        if math.isnan(number):
            return self.write("NaN")
        if math.isinf(number):
            return self.write("Infinity" if number > 0 else "-Infinity")
        if number.is_integer() and abs(number) < 1e16:
            return self.write(str(int(number)))
        return self.write(repr(number))

    def write_literal(self, value: Any) -> "JavascriptWriter":
        """Writes a primitive value as a JavaScript literal.

        Raises:
            TypeError: If the value is not a primitive (None, bool, number, str).
        """
        if value is None:
            return self.write("null")
        if isinstance(value, bool):
            return self.write("true" if value else "false")
        if isinstance(value, str):
            return self.write_string_literal(value)
        if isinstance(value, (int, float, decimal.Decimal)):
            return self.write_number(value)
        raise TypeError(f"No JavaScript literal for {type(value).__name__}")
