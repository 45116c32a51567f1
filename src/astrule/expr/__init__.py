"""
Rule expression engine.

Parses rule strings such as ``age > 30 AND department = 'Sales'`` into
immutable expression trees, combines trees with AND, encodes them for storage
and evaluates them against records of named attributes.
"""

# Tree types and utilities
from .ast import (
    BOOLEAN_OPERATORS,
    BooleanOperator,
    ExpressionNode,
    NodeKind,
    OperandNode,
    OperatorNode,
    ast_to_rule_string,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
)

# Codec
from .codec import (
    EncodedNode,
    from_dict,
    from_json,
    to_dict,
    to_json,
)

# Combiner
from .combiner import (
    combine,
    combine_trees,
)
from .errors import (
    DecodeError,
    EmptyInputError,
    EvaluationError,
    ExpressionError,
    LimitExceededError,
    MalformedConditionError,
    MissingAttributeError,
    ParseError,
    UnsupportedOperatorError,
)

# Evaluator
from .evaluator import (
    Condition,
    EvaluationResult,
    Evaluator,
    NumberLiteral,
    Record,
    TextLiteral,
    evaluate,
    parse_condition,
    parse_literal,
    try_evaluate,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_combined_rule_count,
    check_rule_length,
    check_tree_depth,
)

# Parser
from .parser import (
    Parser,
    parse,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    tokenize,
)

__all__ = [
    # Tree types
    "ExpressionNode",
    "OperatorNode",
    "OperandNode",
    "NodeKind",
    "BooleanOperator",
    "BOOLEAN_OPERATORS",
    "count_ast_nodes",
    "calculate_ast_depth",
    "ast_to_string",
    "ast_to_rule_string",
    # Errors
    "ExpressionError",
    "ParseError",
    "LimitExceededError",
    "EmptyInputError",
    "DecodeError",
    "EvaluationError",
    "MissingAttributeError",
    "UnsupportedOperatorError",
    "MalformedConditionError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_rule_length",
    "check_ast_depth",
    "check_ast_node_count",
    "check_combined_rule_count",
    "check_tree_depth",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # Combiner
    "combine",
    "combine_trees",
    # Evaluator
    "Condition",
    "NumberLiteral",
    "TextLiteral",
    "Record",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "try_evaluate",
    "parse_condition",
    "parse_literal",
    # Codec
    "EncodedNode",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
]
