"""
Tests for the tree wire encoding.
"""

import json

import pytest

from astrule.expr import (
    DecodeError,
    ExpressionLimits,
    LimitExceededError,
    OperandNode,
    OperatorNode,
    combine,
    evaluate,
    from_dict,
    from_json,
    parse,
    to_dict,
    to_json,
)


class TestEncoding:
    def test_encodes_operand_with_null_children(self):
        assert to_dict(parse("age > 30")) == {
            "kind": "operand",
            "value": "age > 30",
            "left": None,
            "right": None,
        }

    def test_encodes_operator(self):
        assert to_dict(parse("age > 30 AND department = 'Sales'")) == {
            "kind": "operator",
            "value": "AND",
            "left": {"kind": "operand", "value": "age > 30", "left": None, "right": None},
            "right": {
                "kind": "operand",
                "value": "department = 'Sales'",
                "left": None,
                "right": None,
            },
        }

    def test_to_json_is_plain_json(self):
        encoded = json.loads(to_json(parse("a > 1 OR b > 2")))
        assert encoded["kind"] == "operator"
        assert encoded["left"]["right"] is None


class TestRoundTrip:
    @pytest.mark.parametrize(
        "tree",
        [
            parse("age > 30"),
            parse("a > 1 AND b > 2 OR c > 3"),
            parse("((age > 30 AND department = 'Sales') OR age < 25) AND salary > 50000"),
            combine(["a > 1", "b > 2", "c > 3"]),
        ],
    )
    def test_dict_round_trip(self, tree):
        assert from_dict(to_dict(tree)) == tree

    def test_json_round_trip(self):
        tree = combine(["a > 1 OR b > 2", "c = 'x'"])
        assert from_json(to_json(tree, indent=2)) == tree

    def test_decoded_tree_evaluates(self):
        stored = to_json(parse("age > 30 AND department = 'Sales'"))
        tree = from_json(stored)
        assert evaluate(tree, {"age": 35, "department": "Sales"}) is True


class TestDecoding:
    def test_operand_children_may_be_omitted(self):
        assert from_dict({"kind": "operand", "value": "age > 30"}) == OperandNode("age > 30")

    def test_decodes_operator(self):
        tree = from_dict(
            {
                "kind": "operator",
                "value": "OR",
                "left": {"kind": "operand", "value": "a > 1"},
                "right": {"kind": "operand", "value": "b > 2", "left": None, "right": None},
            }
        )
        assert tree == OperatorNode("OR", OperandNode("a > 1"), OperandNode("b > 2"))

    @pytest.mark.parametrize(
        "data",
        [
            {"kind": "bogus", "value": "a > 1"},
            {"kind": "operand"},
            {"kind": "operand", "value": 5},
            {"kind": "operator", "value": "AND", "left": {"kind": "operand", "value": "a > 1"}},
            {
                "kind": "operator",
                "value": "OR",
                "left": {"kind": "operand", "value": "a > 1"},
                "right": None,
            },
            {"kind": "operator", "value": "AND", "left": "a > 1", "right": "b > 2"},
            {
                "kind": "operator",
                "value": "XOR",
                "left": {"kind": "operand", "value": "a > 1"},
                "right": {"kind": "operand", "value": "b > 2"},
            },
            {
                "kind": "operand",
                "value": "a > 1",
                "left": {"kind": "operand", "value": "b > 2"},
            },
            {"type": "operand", "value": "a > 1"},
            {
                "kind": "operator",
                "value": "AND",
                "left": {"kind": "operand", "value": "a > 1"},
                "right": {},
            },
        ],
    )
    def test_rejects_invalid_trees(self, data):
        with pytest.raises(DecodeError):
            from_dict(data)

    def test_rejects_non_mapping(self):
        with pytest.raises(DecodeError):
            from_dict(["operand", "a > 1"])  # type: ignore[arg-type]

    @pytest.mark.parametrize("content", ["not json", "[]", "null", '{"kind": "operand"}'])
    def test_rejects_invalid_json(self, content):
        with pytest.raises(DecodeError):
            from_json(content)


def _left_spine(levels: int) -> dict:
    node = {"kind": "operand", "value": "a > 1"}
    for _ in range(levels):
        node = {
            "kind": "operator",
            "value": "AND",
            "left": node,
            "right": {"kind": "operand", "value": "b > 2"},
        }
    return node


class TestDecodingLimits:
    def test_accepts_tree_at_depth_limit(self):
        tree = from_dict(_left_spine(287))
        assert tree.value == "AND"
        assert evaluate(tree, {"a": 2, "b": 3}) is True

    def test_rejects_tree_deeper_than_limit(self):
        with pytest.raises(LimitExceededError) as exc_info:
            from_dict(_left_spine(2000))
        assert exc_info.value.limit_name == "max_tree_depth"
        assert exc_info.value.limit == 288

    def test_depth_limit_follows_expression_limits(self):
        limits = ExpressionLimits(max_ast_depth=1, max_combined_rules=0)
        with pytest.raises(LimitExceededError):
            from_dict(to_dict(parse("a > 1 AND b > 2")), limits)
        assert from_dict({"kind": "operand", "value": "a > 1"}, limits) == OperandNode("a > 1")

    def test_rejects_deeply_nested_json(self):
        head = (
            '{"kind": "operator", "value": "AND", '
            '"right": {"kind": "operand", "value": "b > 2"}, "left": '
        )
        content = head * 5000 + '{"kind": "operand", "value": "a > 1"}' + "}" * 5000
        with pytest.raises((DecodeError, LimitExceededError)):
            from_json(content)
