"""
astrule: boolean rule strings parsed into trees and evaluated against records.
"""

from astrule.expr import (
    EmptyInputError,
    EvaluationError,
    ExpressionError,
    ExpressionNode,
    MissingAttributeError,
    OperandNode,
    OperatorNode,
    ParseError,
    UnsupportedOperatorError,
    combine,
    evaluate,
    from_dict,
    parse,
    to_dict,
)

__all__ = [
    "ExpressionNode",
    "OperatorNode",
    "OperandNode",
    "ExpressionError",
    "ParseError",
    "EmptyInputError",
    "EvaluationError",
    "MissingAttributeError",
    "UnsupportedOperatorError",
    "parse",
    "combine",
    "evaluate",
    "to_dict",
    "from_dict",
]
