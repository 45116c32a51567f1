"""
Combines several rules into a single tree joined with AND.
"""

import logging
from functools import reduce
from typing import Sequence

from .ast import ExpressionNode, OperatorNode
from .errors import EmptyInputError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_combined_rule_count,
)
from .parser import parse

logger = logging.getLogger(__name__)


def combine_trees(
    trees: Sequence[ExpressionNode],
    limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
) -> ExpressionNode:
    """
    Folds trees left to right with AND.

    ``[r1, r2, r3]`` becomes ``((r1 AND r2) AND r3)``. The input trees are
    reused as subtrees, not copied.

    Raises:
        EmptyInputError: If no trees are given
        LimitExceededError: If more trees are given than the limits allow
    """
    if not trees:
        raise EmptyInputError()

    # Each folded tree adds one level to the left spine
    check_combined_rule_count(len(trees), limits)

    return reduce(
        lambda acc, tree: OperatorNode(value="AND", left=acc, right=tree),
        trees,
    )


def combine(
    rule_strings: Sequence[str],
    limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
) -> ExpressionNode:
    """
    Parses each rule string and folds the trees left to right with AND.

    Args:
        rule_strings: The rules to combine, in order
        limits: Expression limits applied to each rule and to the rule count

    Returns:
        The combined tree

    Raises:
        EmptyInputError: If no rules are given
        ParseError: If any rule fails to parse
        LimitExceededError: If a rule or the number of rules exceeds the limits
    """
    check_combined_rule_count(len(rule_strings), limits)

    trees = [parse(rule_string, limits) for rule_string in rule_strings]
    combined = combine_trees(trees, limits)

    logger.debug("rules_combined", extra={"rule_count": len(trees)})
    return combined
