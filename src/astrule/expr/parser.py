"""
Parser for the rule language.

Parses a token list into an expression tree in two phases:

1. Grouping: parentheses are resolved with an explicit stack of groups into
   nested lists of token values.
2. Tree building: each group is split at its first top-level ``AND``/``OR``
   keyword. A group without a top-level keyword becomes a single operand whose
   value is the group's tokens joined with spaces.

There is no precedence between AND and OR. The first keyword met left to right
becomes the local root, so ``a > 1 AND b > 2 OR c > 3`` parses as
``a > 1 AND (b > 2 OR c > 3)``.
"""

from typing import List, Union

from .ast import (
    BOOLEAN_OPERATORS,
    ExpressionNode,
    OperandNode,
    OperatorNode,
    calculate_ast_depth,
    count_ast_nodes,
)
from .errors import ParseError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
)
from .tokenizer import Token, TokenType, tokenize

# A group is an ordered list of token values and nested groups.
GroupElement = Union[str, "Group"]
Group = List[GroupElement]


class Parser:
    """Parser for rule strings."""

    def __init__(
        self,
        tokens: List[Token],
        source: str,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        self._tokens = tokens
        self._source = source
        self._limits = limits

    def parse(self) -> ExpressionNode:
        """Parses the token list into a tree."""
        if not self._tokens:
            raise ParseError("No tokens found in rule", expression=self._source)

        root = self.group()
        ast = self._build_tree(root)

        # Validate tree limits
        node_count = count_ast_nodes(ast)
        check_ast_node_count(node_count, self._limits)

        depth = calculate_ast_depth(ast)
        check_ast_depth(depth, self._limits)

        return ast

    # ============================================================
    # Grouping
    # ============================================================

    def group(self) -> Group:
        """Resolves parentheses into nested groups of token values."""
        stack: List[Group] = [[]]
        open_positions: List[int] = []

        for token in self._tokens:
            if token.type == TokenType.LPAREN:
                stack.append([])
                open_positions.append(token.position)
            elif token.type == TokenType.RPAREN:
                if len(stack) == 1:
                    raise ParseError(
                        "Unbalanced ')': no matching '('",
                        token.position,
                        self._source,
                    )
                closed = stack.pop()
                open_positions.pop()
                stack[-1].append(closed)
            else:
                stack[-1].append(token.value)

        if len(stack) > 1:
            raise ParseError(
                "Unbalanced '(': missing ')'",
                open_positions[-1],
                self._source,
            )

        return stack[0]

    # ============================================================
    # Tree Building
    # ============================================================

    def _build_tree(self, expr: GroupElement, depth: int = 1) -> ExpressionNode:
        # Redundant parentheses add no tree level
        while isinstance(expr, list) and len(expr) == 1:
            expr = expr[0]

        if isinstance(expr, str):
            raise ParseError(
                f"Incomplete condition: '{expr}'", expression=self._source
            )

        if not expr:
            raise ParseError("Expected a condition", expression=self._source)

        check_ast_depth(depth, self._limits)

        # Nested groups are opaque here: only direct string elements can split
        for index, element in enumerate(expr):
            if isinstance(element, str) and element in BOOLEAN_OPERATORS:
                return OperatorNode(
                    value=element,  # type: ignore[arg-type]
                    left=self._build_tree(expr[:index], depth + 1),
                    right=self._build_tree(expr[index + 1 :], depth + 1),
                )

        return OperandNode(value=" ".join(_flatten(expr)))


def _flatten(expr: Group) -> List[str]:
    """Flattens nested groups into a flat list of token values."""
    values: List[str] = []
    pending: List[GroupElement] = [expr]
    while pending:
        element = pending.pop()
        if isinstance(element, str):
            values.append(element)
        else:
            pending.extend(reversed(element))
    return values


def parse(
    source: str, limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS
) -> ExpressionNode:
    """
    Parses a rule string into an expression tree.

    Args:
        source: The rule string to parse
        limits: Optional expression limits

    Returns:
        The parsed tree

    Raises:
        ParseError: If the rule is empty, has unbalanced parentheses or
            contains an incomplete condition
        LimitExceededError: If the rule or its tree exceeds the limits
    """
    tokens = tokenize(source, limits)
    parser = Parser(tokens, source, limits)
    return parser.parse()
