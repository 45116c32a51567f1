"""
Expression evaluator.

Evaluates an expression tree against a record of named attribute values and
returns a boolean.

Semantics:
- Operator nodes evaluate both children, then combine with ``and``/``or``.
- Operand nodes hold ``attribute comparator literal``. The literal is a number
  when it reads as a decimal number, otherwise text with one pair of
  surrounding single quotes removed.
- ``>`` and ``<`` order numbers against numbers and text against text.
- ``=`` is strict: value and type must match, so ``30`` never equals ``'30'``.
- A missing attribute is an error, not a false condition.
"""

import re
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from .ast import ExpressionNode, OperatorNode
from .errors import (
    EvaluationError,
    MalformedConditionError,
    MissingAttributeError,
    UnsupportedOperatorError,
)

# Runtime value types found in records.
RecordValue = Union[str, int, float]

Record = Mapping[str, Any]

SUPPORTED_OPERATORS: tuple[str, ...] = (">", "<", "=")

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


# ============================================================
# Literal Types
# ============================================================


@dataclass(frozen=True)
class NumberLiteral:
    """Numeric literal of a condition."""

    value: Union[int, float]

    @property
    def type(self) -> Literal["Number"]:
        return "Number"


@dataclass(frozen=True)
class TextLiteral:
    """Text literal of a condition, quotes removed."""

    value: str

    @property
    def type(self) -> Literal["Text"]:
        return "Text"


ConditionLiteral = Union[NumberLiteral, TextLiteral]


@dataclass(frozen=True)
class Condition:
    """An operand clause split into its three parts."""

    attribute: str
    operator: str
    literal: ConditionLiteral
    source: str


def parse_literal(raw: str) -> ConditionLiteral:
    """
    Disambiguates a raw literal into a number or text.

    ``30`` and ``2.5`` are numbers; ``'Sales'`` and ``Sales`` are text.
    """
    if _NUMBER_PATTERN.match(raw):
        if _INTEGER_PATTERN.match(raw):
            return NumberLiteral(int(raw))
        return NumberLiteral(float(raw))

    text = raw
    if text.startswith("'"):
        text = text[1:]
    if text.endswith("'"):
        text = text[:-1]
    return TextLiteral(text)


def parse_condition(source: str) -> Condition:
    """
    Splits an operand value into attribute, comparator and literal.

    Raises:
        MalformedConditionError: If the value does not have exactly three
            whitespace-separated parts
    """
    parts = source.split()
    if len(parts) != 3:
        raise MalformedConditionError(source)

    attribute, operator, raw_literal = parts
    return Condition(
        attribute=attribute,
        operator=operator,
        literal=parse_literal(raw_literal),
        source=source,
    )


def get_type_name(value: Any) -> str:
    """Gets the type name of a value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


@dataclass
class EvaluationResult:
    """Result of a non-raising evaluation."""

    value: bool
    """The evaluated value, False if evaluation failed."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""


class Evaluator:
    """Evaluates expression trees against a record."""

    def __init__(self, record: Record):
        self._record = record

    def evaluate(self, node: ExpressionNode) -> bool:
        """Evaluates a tree node and returns its boolean value."""
        if isinstance(node, OperatorNode):
            # No short-circuit: both sides are always evaluated
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            if node.value == "AND":
                return left and right
            if node.value == "OR":
                return left or right
            raise EvaluationError(f"Unsupported boolean operator '{node.value}'")

        return self.evaluate_condition(parse_condition(node.value))

    def evaluate_condition(self, condition: Condition) -> bool:
        """Evaluates a single comparison against the record."""
        if condition.attribute not in self._record:
            raise MissingAttributeError(condition.attribute, condition.source)

        if condition.operator not in SUPPORTED_OPERATORS:
            raise UnsupportedOperatorError(condition.operator, condition.source)

        actual = self._record[condition.attribute]
        expected = condition.literal.value

        if condition.operator == "=":
            return self._strict_equal(actual, expected)

        return self._evaluate_ordering(condition, actual, expected)

    def _evaluate_ordering(
        self, condition: Condition, actual: Any, expected: RecordValue
    ) -> bool:
        comparable = (_is_number(actual) and _is_number(expected)) or (
            isinstance(actual, str) and isinstance(expected, str)
        )
        if not comparable:
            raise EvaluationError(
                f"Cannot compare {get_type_name(actual)} and "
                f"{get_type_name(expected)} with {condition.operator}",
                condition=condition.source,
            )

        if condition.operator == ">":
            return actual > expected
        return actual < expected

    def _strict_equal(self, actual: Any, expected: RecordValue) -> bool:
        if _is_number(actual) and _is_number(expected):
            return actual == expected
        if isinstance(actual, str) and isinstance(expected, str):
            return actual == expected
        return False


def evaluate(tree: ExpressionNode, record: Record) -> bool:
    """
    Evaluates a tree against a record.

    Args:
        tree: The expression tree to evaluate
        record: Attribute values keyed by name

    Returns:
        The boolean result

    Raises:
        MissingAttributeError: If a condition references an absent attribute
        UnsupportedOperatorError: If a condition uses an unknown comparator
        MalformedConditionError: If a condition is not three parts
        EvaluationError: If values cannot be ordered against each other
    """
    return Evaluator(record).evaluate(tree)


def try_evaluate(tree: ExpressionNode, record: Record) -> EvaluationResult:
    """
    Evaluates a tree against a record without raising evaluation errors.

    Returns:
        The evaluation result with value and success status
    """
    try:
        value = evaluate(tree, record)
        return EvaluationResult(value=value, success=True)
    except EvaluationError as error:
        return EvaluationResult(value=False, success=False, error=str(error))
