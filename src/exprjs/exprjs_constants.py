"""
Operator vocabulary and precedence tables for the exprjs JavaScript emitter.

This module holds the static data the rest of the compiler is built on:

    - ExprType: the closed set of operators an expression tree can carry.
    - OperationType: the precedence buckets used by the precedence controller.
    - BINARY_OPERATOR_TOKENS / UNARY_OPERATOR_TOKENS: operator → JavaScript token.
    - POSTFIX_OPERATORS: unary operators written after their operand.
    - IDENTIFIER_PATTERN: the "bare key" pattern used for object-literal keys.

The functions `operation_for` and `current_has_precedence` turn these tables into
the two decisions the emitter needs: which bucket a node opens, and whether that
bucket needs parentheses inside its parent.
"""

import re
from enum import Enum, IntEnum
from typing import Any


class ExprType(Enum):
    """Operators understood by the emitter, shared by binary and unary nodes."""

    # arithmetic
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    POWER = "power"
    FLOOR_DIVIDE = "floor_divide"

    # bitwise
    AND = "and"
    OR = "or"
    EXCLUSIVE_OR = "exclusive_or"
    LEFT_SHIFT = "left_shift"
    RIGHT_SHIFT = "right_shift"

    # logical
    AND_ALSO = "and_also"
    OR_ELSE = "or_else"

    # comparison
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    IS = "is"
    IS_NOT = "is_not"
    IN = "in"
    NOT_IN = "not_in"

    COALESCE = "coalesce"
    ASSIGN = "assign"
    ARRAY_INDEX = "array_index"

    # unary
    NEGATE = "negate"
    UNARY_PLUS = "unary_plus"
    NOT = "not"
    ONES_COMPLEMENT = "ones_complement"
    PRE_INCREMENT_ASSIGN = "pre_increment_assign"
    PRE_DECREMENT_ASSIGN = "pre_decrement_assign"
    POST_INCREMENT_ASSIGN = "post_increment_assign"
    POST_DECREMENT_ASSIGN = "post_decrement_assign"
    CONVERT = "convert"
    QUOTE = "quote"
    ARRAY_LENGTH = "array_length"


class OperationType(IntEnum):
    """Precedence buckets pushed on the writer's operation stack.

    Member values are identifiers only; relative binding strength lives in
    `BINDING_POWER`, because several buckets share a strength (the ternary
    sub-positions, call and member access).
    """

    NO_OP = 0
    PARAM_ISOLATED_LHS = 1
    ASSIGN_RHS = 2
    TERNARY_OP = 3
    TERNARY_TEST = 4
    TERNARY_TRUE_VALUE = 5
    TERNARY_FALSE_VALUE = 6
    COALESCE = 7
    LOGICAL_OR = 8
    LOGICAL_AND = 9
    BITWISE_OR = 10
    BITWISE_XOR = 11
    BITWISE_AND = 12
    EQUALITY = 13
    COMPARISON = 14
    SHIFT = 15
    ADDITIVE = 16
    CONCAT = 17
    MULTIPLICATIVE = 18
    UNARY = 19
    NEW = 20
    POSTFIX = 21
    LITERAL = 22
    CALL = 23
    INDEXER_PROPERTY = 24


# Higher binds tighter.
BINDING_POWER: dict[OperationType, int] = {
    OperationType.ASSIGN_RHS: 30,
    OperationType.TERNARY_OP: 40,
    OperationType.TERNARY_FALSE_VALUE: 40,
    OperationType.TERNARY_TEST: 50,
    OperationType.TERNARY_TRUE_VALUE: 50,
    OperationType.COALESCE: 55,
    OperationType.LOGICAL_OR: 60,
    OperationType.LOGICAL_AND: 70,
    OperationType.BITWISE_OR: 80,
    OperationType.BITWISE_XOR: 90,
    OperationType.BITWISE_AND: 100,
    OperationType.EQUALITY: 110,
    OperationType.COMPARISON: 120,
    OperationType.SHIFT: 130,
    OperationType.ADDITIVE: 140,
    OperationType.CONCAT: 150,
    OperationType.MULTIPLICATIVE: 160,
    OperationType.UNARY: 170,
    OperationType.NEW: 170,
    OperationType.POSTFIX: 175,
    OperationType.LITERAL: 180,
    OperationType.CALL: 190,
    OperationType.INDEXER_PROPERTY: 190,
}

ISOLATION_OPERATIONS = frozenset(
    {OperationType.NO_OP, OperationType.PARAM_ISOLATED_LHS}
)

# `??` cannot be mixed with `||` / `&&` without parentheses.
_NULLISH_EXCLUSIVE = frozenset(
    {OperationType.LOGICAL_OR, OperationType.LOGICAL_AND}
)

BINARY_OPERATOR_TOKENS: dict[ExprType, str] = {
    ExprType.ADD: "+",
    ExprType.SUBTRACT: "-",
    ExprType.MULTIPLY: "*",
    ExprType.DIVIDE: "/",
    ExprType.MODULO: "%",
    ExprType.AND: "&",
    ExprType.OR: "|",
    ExprType.EXCLUSIVE_OR: "^",
    ExprType.LEFT_SHIFT: "<<",
    ExprType.RIGHT_SHIFT: ">>",
    ExprType.AND_ALSO: "&&",
    ExprType.OR_ELSE: "||",
    ExprType.EQUAL: "===",
    ExprType.NOT_EQUAL: "!==",
    ExprType.LESS_THAN: "<",
    ExprType.LESS_THAN_OR_EQUAL: "<=",
    ExprType.GREATER_THAN: ">",
    ExprType.GREATER_THAN_OR_EQUAL: ">=",
    ExprType.IS: "===",
    ExprType.IS_NOT: "!==",
    ExprType.COALESCE: "??",
    ExprType.ASSIGN: "=",
}

UNARY_OPERATOR_TOKENS: dict[ExprType, str] = {
    ExprType.NEGATE: "-",
    ExprType.UNARY_PLUS: "+",
    ExprType.NOT: "!",
    ExprType.ONES_COMPLEMENT: "~",
    ExprType.PRE_INCREMENT_ASSIGN: "++",
    ExprType.PRE_DECREMENT_ASSIGN: "--",
    ExprType.POST_INCREMENT_ASSIGN: "++",
    ExprType.POST_DECREMENT_ASSIGN: "--",
}

POSTFIX_OPERATORS = frozenset(
    {ExprType.POST_INCREMENT_ASSIGN, ExprType.POST_DECREMENT_ASSIGN}
)

# Unary kinds that emit nothing of their own.
TRANSPARENT_UNARY_OPERATORS = frozenset({ExprType.CONVERT, ExprType.QUOTE})

COMPARISON_OPERATORS = frozenset(
    {
        ExprType.EQUAL,
        ExprType.NOT_EQUAL,
        ExprType.LESS_THAN,
        ExprType.LESS_THAN_OR_EQUAL,
        ExprType.GREATER_THAN,
        ExprType.GREATER_THAN_OR_EQUAL,
        ExprType.IS,
        ExprType.IS_NOT,
        ExprType.IN,
        ExprType.NOT_IN,
        ExprType.AND_ALSO,
        ExprType.OR_ELSE,
    }
)

IDENTIFIER_PATTERN = re.compile(r"^[^\W\d]\w*$")

_OPERATION_BY_OPERATOR: dict[ExprType, OperationType] = {
    ExprType.SUBTRACT: OperationType.ADDITIVE,
    ExprType.MULTIPLY: OperationType.MULTIPLICATIVE,
    ExprType.DIVIDE: OperationType.MULTIPLICATIVE,
    ExprType.MODULO: OperationType.MULTIPLICATIVE,
    ExprType.POWER: OperationType.CALL,
    ExprType.FLOOR_DIVIDE: OperationType.CALL,
    ExprType.AND: OperationType.BITWISE_AND,
    ExprType.OR: OperationType.BITWISE_OR,
    ExprType.EXCLUSIVE_OR: OperationType.BITWISE_XOR,
    ExprType.LEFT_SHIFT: OperationType.SHIFT,
    ExprType.RIGHT_SHIFT: OperationType.SHIFT,
    ExprType.AND_ALSO: OperationType.LOGICAL_AND,
    ExprType.OR_ELSE: OperationType.LOGICAL_OR,
    ExprType.EQUAL: OperationType.EQUALITY,
    ExprType.NOT_EQUAL: OperationType.EQUALITY,
    ExprType.IS: OperationType.EQUALITY,
    ExprType.IS_NOT: OperationType.EQUALITY,
    ExprType.LESS_THAN: OperationType.COMPARISON,
    ExprType.LESS_THAN_OR_EQUAL: OperationType.COMPARISON,
    ExprType.GREATER_THAN: OperationType.COMPARISON,
    ExprType.GREATER_THAN_OR_EQUAL: OperationType.COMPARISON,
    ExprType.IN: OperationType.COMPARISON,
    ExprType.NOT_IN: OperationType.UNARY,
    ExprType.COALESCE: OperationType.COALESCE,
    ExprType.ASSIGN: OperationType.ASSIGN_RHS,
    ExprType.ARRAY_INDEX: OperationType.INDEXER_PROPERTY,
    ExprType.NEGATE: OperationType.UNARY,
    ExprType.UNARY_PLUS: OperationType.UNARY,
    ExprType.NOT: OperationType.UNARY,
    ExprType.ONES_COMPLEMENT: OperationType.UNARY,
    ExprType.PRE_INCREMENT_ASSIGN: OperationType.UNARY,
    ExprType.PRE_DECREMENT_ASSIGN: OperationType.UNARY,
    ExprType.POST_INCREMENT_ASSIGN: OperationType.POSTFIX,
    ExprType.POST_DECREMENT_ASSIGN: OperationType.POSTFIX,
    ExprType.ARRAY_LENGTH: OperationType.INDEXER_PROPERTY,
    ExprType.CONVERT: OperationType.NO_OP,
    ExprType.QUOTE: OperationType.NO_OP,
}


def operation_for(op: ExprType, type_: Any = None) -> OperationType:
    """Returns the precedence bucket opened by an operator.

    Args:
        op: The operator of a binary or unary node.
        type_: The static result type of the node. Addition producing a `str`
            is string concatenation, which has its own bucket.

    Returns:
        The `OperationType` to push while the node is emitted.
    """
    if op is ExprType.ADD:
        return OperationType.CONCAT if type_ is str else OperationType.ADDITIVE
    return _OPERATION_BY_OPERATOR[op]


def current_has_precedence(
    current: OperationType, parent: OperationType, right_side: bool = False
) -> bool:
    """Decides whether `current` can be written inside `parent` without parentheses.

    Args:
        current: The bucket being entered.
        parent: The bucket directly below it on the stack.
        right_side: True when `current` is the right operand of `parent`.

    Returns:
        True if no parentheses are needed.
    """
    if current in ISOLATION_OPERATIONS or parent in ISOLATION_OPERATIONS:
        return True
    if (current is OperationType.COALESCE and parent in _NULLISH_EXCLUSIVE) or (
        parent is OperationType.COALESCE and current in _NULLISH_EXCLUSIVE
    ):
        return False
    current_power = BINDING_POWER[current]
    parent_power = BINDING_POWER[parent]
    if current_power == parent_power:
        return not right_side
    return current_power > parent_power
