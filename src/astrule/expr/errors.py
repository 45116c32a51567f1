"""
Error types for the rule expression engine.

All expression errors extend ExpressionError for consistent handling.
"""

from typing import Optional


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class ParseError(ExpressionError):
    """
    Error thrown when a rule string does not decompose into a valid tree.
    """

    pass


class LimitExceededError(ParseError):
    """
    Error thrown when a rule exceeds the configured expression limits.
    """

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class EmptyInputError(ExpressionError):
    """
    Error thrown when rules are combined from an empty input.
    """

    def __init__(self, message: str = "At least one rule is required to combine"):
        super().__init__(message)


class DecodeError(ExpressionError):
    """
    Error thrown when an encoded tree is not a valid expression tree.
    """

    pass


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        condition: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.condition = condition


class MissingAttributeError(EvaluationError):
    """
    Error thrown when a condition references an attribute absent from the record.
    """

    def __init__(self, attribute: str, condition: Optional[str] = None):
        super().__init__(
            f"Missing attribute '{attribute}' in input data",
            condition=condition,
        )
        self.attribute = attribute


class UnsupportedOperatorError(EvaluationError):
    """
    Error thrown when a condition uses a comparator outside of >, < and =.
    """

    def __init__(self, operator: str, condition: Optional[str] = None):
        super().__init__(f"Unsupported operator '{operator}'", condition=condition)
        self.operator = operator


class MalformedConditionError(EvaluationError):
    """
    Error thrown when a condition is not `attribute comparator literal`.
    """

    def __init__(self, condition: str):
        super().__init__(
            f"Malformed condition '{condition}': expected "
            "'<attribute> <operator> <literal>'",
            condition=condition,
        )
