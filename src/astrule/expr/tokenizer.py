"""
Tokenizer (lexer) for the rule language.

Converts rule strings into a list of tokens for the parser. Recognized tokens
are bare words, single-quoted literals, the comparators ``>``, ``<`` and
``=``, the keywords ``AND``/``OR`` and parentheses. Anything else is skipped.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .errors import ParseError
from .limits import ExpressionLimits, check_rule_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Operands
    WORD = "WORD"
    STRING = "STRING"
    COMPARATOR = "COMPARATOR"

    # Boolean operators
    AND = "AND"
    OR = "OR"

    # Grouping
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


@dataclass
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int


# Keywords recognized by the tokenizer (case-sensitive)
KEYWORDS: Dict[str, TokenType] = {
    "AND": TokenType.AND,
    "OR": TokenType.OR,
}

_TOKEN_PATTERN = re.compile(
    r"(?P<word>[A-Za-z0-9_]+)"
    r"|(?P<string>'[^']+')"
    r"|(?P<comparator>[><=])"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
)

_GROUP_TYPES: Dict[str, TokenType] = {
    "string": TokenType.STRING,
    "comparator": TokenType.COMPARATOR,
    "lparen": TokenType.LPAREN,
    "rparen": TokenType.RPAREN,
}


class Tokenizer:
    """Tokenizer for rule strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits

    def tokenize(self) -> List[Token]:
        """Tokenizes the source rule and returns all recognized tokens."""
        if not isinstance(self._source, str):
            raise ParseError(
                f"Rule must be a string, got {type(self._source).__name__}"
            )

        check_rule_length(self._source, self._limits)

        tokens: List[Token] = []
        for match in _TOKEN_PATTERN.finditer(self._source):
            group = match.lastgroup
            value = match.group()
            if group == "word":
                token_type = KEYWORDS.get(value, TokenType.WORD)
            else:
                token_type = _GROUP_TYPES[group]
            tokens.append(Token(token_type, value, match.start()))

        return tokens


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Tokenizes a rule string into tokens.

    Unsupported characters are dropped silently, so the result may be empty.

    Args:
        source: The rule string to tokenize
        limits: Optional expression limits

    Returns:
        List of tokens

    Raises:
        ParseError: If the source is not a string
        LimitExceededError: If the source is longer than allowed
    """
    tokenizer = Tokenizer(source, limits)
    return tokenizer.tokenize()
