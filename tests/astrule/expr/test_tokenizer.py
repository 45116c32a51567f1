"""
Tests for the rule tokenizer.
"""

import pytest

from astrule.expr import ExpressionLimits, LimitExceededError, ParseError, tokenize
from astrule.expr.tokenizer import TokenType


class TestRecognizedTokens:
    """Tests for the token patterns."""

    def test_tokenizes_simple_condition(self):
        tokens = tokenize("age > 30")
        assert [t.value for t in tokens] == ["age", ">", "30"]
        assert [t.type for t in tokens] == [
            TokenType.WORD,
            TokenType.COMPARATOR,
            TokenType.WORD,
        ]

    def test_records_positions(self):
        tokens = tokenize("age > 30 AND department = 'Sales'")
        assert [t.position for t in tokens] == [0, 4, 6, 9, 13, 24, 26]

    def test_tokenizes_quoted_literal_as_one_token(self):
        tokens = tokenize("department = 'Sales'")
        assert tokens[2].type == TokenType.STRING
        assert tokens[2].value == "'Sales'"

    def test_quoted_literal_keeps_inner_spaces(self):
        tokens = tokenize("name = 'John Smith'")
        assert len(tokens) == 3
        assert tokens[2].value == "'John Smith'"

    def test_tokenizes_keywords(self):
        tokens = tokenize("a > 1 AND b > 2 OR c > 3")
        assert tokens[3].type == TokenType.AND
        assert tokens[7].type == TokenType.OR

    def test_keywords_are_case_sensitive(self):
        tokens = tokenize("a > 1 and b > 2")
        assert tokens[3].type == TokenType.WORD
        assert tokens[3].value == "and"

    def test_tokenizes_parentheses(self):
        tokens = tokenize("(a > 1)")
        assert tokens[0].type == TokenType.LPAREN
        assert tokens[-1].type == TokenType.RPAREN

    def test_words_include_digits_and_underscores(self):
        tokens = tokenize("years_of_service2 < 10")
        assert tokens[0].value == "years_of_service2"


class TestDroppedCharacters:
    """Unsupported characters are skipped, not rejected."""

    def test_drops_unsupported_symbols(self):
        tokens = tokenize("a != 1")
        assert [t.value for t in tokens] == ["a", "=", "1"]

    def test_splits_two_character_comparators(self):
        tokens = tokenize("age >= 30")
        assert [t.value for t in tokens] == ["age", ">", "=", "30"]

    def test_drops_decimal_point(self):
        tokens = tokenize("price < 9.99")
        assert [t.value for t in tokens] == ["price", "<", "9", "99"]

    def test_unterminated_quote_is_dropped(self):
        tokens = tokenize("name = 'Sales")
        assert [t.value for t in tokens] == ["name", "=", "Sales"]

    def test_returns_empty_list_for_empty_input(self):
        assert tokenize("") == []

    def test_returns_empty_list_for_only_unsupported_characters(self):
        assert tokenize("!!! ### $$$") == []


class TestErrors:
    def test_rejects_non_string_input(self):
        with pytest.raises(ParseError):
            tokenize(None)  # type: ignore[arg-type]

    def test_rejects_overlong_input(self):
        with pytest.raises(LimitExceededError) as exc_info:
            tokenize("age > 30", ExpressionLimits(max_rule_length=4))
        assert exc_info.value.limit_name == "max_rule_length"
        assert exc_info.value.actual == 8
