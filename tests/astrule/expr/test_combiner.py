"""
Tests for combining rules.
"""

import logging

import pytest

from astrule.expr import (
    EmptyInputError,
    ExpressionLimits,
    LimitExceededError,
    OperandNode,
    OperatorNode,
    ParseError,
    combine,
    combine_trees,
    count_ast_nodes,
    evaluate,
    from_json,
    parse,
    to_json,
)


class TestCombine:
    def test_folds_left_to_right(self):
        ast = combine(["a > 1", "b > 2", "c > 3"])
        assert ast == OperatorNode(
            "AND",
            OperatorNode("AND", OperandNode("a > 1"), OperandNode("b > 2")),
            OperandNode("c > 3"),
        )

    def test_single_rule_is_returned_as_parsed(self):
        assert combine(["age > 30 OR age < 18"]) == parse("age > 30 OR age < 18")

    def test_keeps_each_rule_as_a_subtree(self):
        ast = combine(["a > 1 OR b > 2", "c > 3"])
        assert ast == OperatorNode(
            "AND",
            OperatorNode("OR", OperandNode("a > 1"), OperandNode("b > 2")),
            OperandNode("c > 3"),
        )

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            combine([])

    def test_propagates_parse_errors(self):
        with pytest.raises(ParseError):
            combine(["age > 30", "(salary > 10"])

    def test_accepts_any_sequence(self):
        assert combine(("a > 1", "b > 2")) == combine(["a > 1", "b > 2"])

    def test_combined_tree_evaluates(self):
        ast = combine(["age > 30", "department = 'Sales'"])
        assert evaluate(ast, {"age": 35, "department": "Sales"}) is True
        assert evaluate(ast, {"age": 35, "department": "HR"}) is False

    def test_logs_rule_count(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="astrule.expr.combiner"):
            combine(["a > 1", "b > 2"])
        records = [r for r in caplog.records if r.getMessage() == "rules_combined"]
        assert len(records) == 1
        assert records[0].rule_count == 2


class TestCombineTrees:
    def test_reuses_input_trees(self):
        first = parse("a > 1")
        second = parse("b > 2")
        ast = combine_trees([first, second])
        assert ast.left is first
        assert ast.right is second

    def test_does_not_modify_inputs(self):
        first = parse("a > 1 OR b > 2")
        combine_trees([first, parse("c > 3")])
        assert first == parse("a > 1 OR b > 2")

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            combine_trees([])

    def test_rejects_more_trees_than_limit(self):
        trees = [parse("a > 1")] * 3
        with pytest.raises(LimitExceededError) as exc_info:
            combine_trees(trees, ExpressionLimits(max_combined_rules=2))
        assert exc_info.value.limit_name == "max_combined_rules"
        assert exc_info.value.actual == 3


class TestCombinedRuleLimit:
    def test_rejects_more_rules_than_limit(self):
        with pytest.raises(LimitExceededError) as exc_info:
            combine(["age > 30"] * 1200)
        assert exc_info.value.limit_name == "max_combined_rules"
        assert exc_info.value.limit == 256
        assert exc_info.value.actual == 1200

    def test_largest_combination_evaluates(self):
        ast = combine(["age > 30"] * 256)
        assert count_ast_nodes(ast) == 511
        assert evaluate(ast, {"age": 35}) is True
        assert evaluate(ast, {"age": 25}) is False

    def test_largest_combination_survives_json(self):
        encoded = to_json(combine(["age > 30 OR age < 18"] * 256))
        decoded = from_json(encoded)
        assert to_json(decoded) == encoded
        assert evaluate(decoded, {"age": 10}) is True
