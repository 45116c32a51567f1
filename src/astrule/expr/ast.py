"""
Expression tree node types for the rule language.

The tree is produced by the parser, combined by the combiner and consumed by
the evaluator. Operator nodes join two subtrees with AND/OR; operand nodes are
leaves holding a raw comparison clause such as ``age > 30``.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Union

# ============================================================
# Node Kinds
# ============================================================

NodeKind = Literal["operator", "operand"]

BooleanOperator = Literal["AND", "OR"]

BOOLEAN_OPERATORS: tuple[str, ...] = ("AND", "OR")


# ============================================================
# Tree Node Types
# ============================================================


@dataclass(frozen=True)
class OperatorNode:
    """Internal node joining two subtrees with AND/OR."""

    value: BooleanOperator
    left: "ExpressionNode"
    right: "ExpressionNode"

    @property
    def kind(self) -> Literal["operator"]:
        return "operator"


@dataclass(frozen=True)
class OperandNode:
    """Leaf node holding a raw comparison clause."""

    value: str

    @property
    def kind(self) -> Literal["operand"]:
        return "operand"

    @property
    def left(self) -> Optional["ExpressionNode"]:
        return None

    @property
    def right(self) -> Optional["ExpressionNode"]:
        return None


# Union type for all tree nodes
ExpressionNode = Union[OperatorNode, OperandNode]


# ============================================================
# Tree Utilities
# ============================================================


def count_ast_nodes(node: ExpressionNode) -> int:
    """Counts the total number of nodes in a tree."""
    if isinstance(node, OperatorNode):
        return 1 + count_ast_nodes(node.left) + count_ast_nodes(node.right)
    return 1


def calculate_ast_depth(node: ExpressionNode) -> int:
    """Calculates the maximum depth of a tree."""
    if isinstance(node, OperatorNode):
        return 1 + max(calculate_ast_depth(node.left), calculate_ast_depth(node.right))
    return 1


def ast_to_string(node: ExpressionNode, indent: int = 0) -> str:
    """Returns a human-readable representation of a tree for debugging."""
    prefix = "  " * indent

    if isinstance(node, OperatorNode):
        return (
            f"{prefix}Operator: {node.value}\n"
            f"{ast_to_string(node.left, indent + 1)}\n"
            f"{ast_to_string(node.right, indent + 1)}"
        )

    return f"{prefix}Operand: {node.value}"


def ast_to_rule_string(node: ExpressionNode) -> str:
    """
    Renders a tree back into a rule string.

    Operator children are parenthesized, so parsing the result yields a tree
    equal to ``node`` as long as operand values do not contain AND/OR words.
    """
    if isinstance(node, OperandNode):
        return node.value

    def _render_child(child: ExpressionNode) -> str:
        if isinstance(child, OperatorNode):
            return f"({ast_to_rule_string(child)})"
        return child.value

    return f"{_render_child(node.left)} {node.value} {_render_child(node.right)}"
