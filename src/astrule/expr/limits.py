"""
Resource limits for rule parsing.

These limits protect against resource exhaustion and overly complex rules.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum rule string length in characters
    max_rule_length: int = 4096

    # Maximum tree depth (nesting level)
    max_ast_depth: int = 32

    # Maximum number of tree nodes
    max_ast_nodes: int = 256

    # Maximum number of rules folded into one combined tree
    max_combined_rules: int = 256

    @property
    def max_tree_depth(self) -> int:
        """Deepest tree a combine can produce, used to bound decoded trees."""
        return self.max_combined_rules + self.max_ast_depth

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExpressionLimits":
        """Builds limits from snake_case or camelCase keys, ignoring unknown ones."""
        aliases = {
            "maxRuleLength": "max_rule_length",
            "maxAstDepth": "max_ast_depth",
            "maxAstNodes": "max_ast_nodes",
            "maxCombinedRules": "max_combined_rules",
        }
        values = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = int(value)
        return cls(**values)


# Default expression limits.
#
# Generous enough for hand-written rules and combined rule sets of a few
# dozen conditions.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_rule_length(rule: str, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates that rule length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(rule) > limits.max_rule_length:
        raise LimitExceededError("max_rule_length", limits.max_rule_length, len(rule))


def check_ast_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates tree depth after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_ast_depth:
        raise LimitExceededError("max_ast_depth", limits.max_ast_depth, depth)


def check_ast_node_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates tree node count after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_ast_nodes:
        raise LimitExceededError("max_ast_nodes", limits.max_ast_nodes, count)


def check_combined_rule_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates the number of rules folded into a combined tree."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_combined_rules:
        raise LimitExceededError("max_combined_rules", limits.max_combined_rules, count)


def check_tree_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates the depth of a decoded tree."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_tree_depth:
        raise LimitExceededError("max_tree_depth", limits.max_tree_depth, depth)
