"""
Error types for rule set loading and compilation.
"""

from typing import Optional

from astrule.expr.errors import ExpressionError


class RuleSetError(ExpressionError):
    """
    Error thrown when a rule set document is invalid or a rule fails to compile.
    """

    def __init__(self, message: str, rule_id: Optional[str] = None):
        super().__init__(message)
        self.rule_id = rule_id
