"""
Wire/storage encoding of expression trees.

A tree is encoded as nested records::

    {"kind": "operator", "value": "AND", "left": {...}, "right": {...}}
    {"kind": "operand", "value": "age > 30", "left": null, "right": null}

Operands always encode both children as null. Decoding validates the shape
and rejects anything that is not a well-formed tree or is nested deeper than
the expression limits allow. ``from_dict(to_dict(t)) == t`` holds for every
tree ``t`` within the limits.
"""

import json
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .ast import BOOLEAN_OPERATORS, ExpressionNode, OperandNode, OperatorNode
from .errors import DecodeError
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits, check_tree_depth


class EncodedNode(BaseModel):
    """
    Validation model for one encoded tree node.

    Children are validated one level at a time while decoding, so the model
    only checks that they are present or absent as the kind requires.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["operator", "operand"]
    value: str
    left: Optional[Dict[str, Any]] = None
    right: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "EncodedNode":
        if self.kind == "operator":
            if self.value not in BOOLEAN_OPERATORS:
                raise ValueError(
                    f"operator value must be one of {', '.join(BOOLEAN_OPERATORS)}, "
                    f"got '{self.value}'"
                )
            if self.left is None or self.right is None:
                raise ValueError("operator node requires both left and right")
        elif self.left is not None or self.right is not None:
            raise ValueError("operand node must not have children")
        return self


def to_dict(node: ExpressionNode) -> Dict[str, Any]:
    """Encodes a tree as nested plain dicts."""
    if isinstance(node, OperatorNode):
        return {
            "kind": node.kind,
            "value": node.value,
            "left": to_dict(node.left),
            "right": to_dict(node.right),
        }

    return {
        "kind": node.kind,
        "value": node.value,
        "left": None,
        "right": None,
    }


def _decode_node(
    data: Mapping[str, Any], depth: int, limits: ExpressionLimits
) -> ExpressionNode:
    check_tree_depth(depth, limits)

    try:
        model = EncodedNode.model_validate(data)
    except ValidationError as error:
        raise DecodeError(f"Invalid encoded tree: {error}") from error

    if model.kind == "operand":
        return OperandNode(value=model.value)

    if model.left is None or model.right is None:
        raise DecodeError(
            "Invalid encoded tree: operator node requires both left and right"
        )

    return OperatorNode(
        value=model.value,  # type: ignore[arg-type]
        left=_decode_node(model.left, depth + 1, limits),
        right=_decode_node(model.right, depth + 1, limits),
    )


def from_dict(
    data: Mapping[str, Any],
    limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
) -> ExpressionNode:
    """
    Decodes nested records back into a tree.

    Args:
        data: The encoded tree
        limits: Expression limits bounding the decoded tree depth

    Raises:
        DecodeError: If the data is not a valid encoded tree
        LimitExceededError: If the tree is nested deeper than the limits allow
    """
    if not isinstance(data, Mapping):
        raise DecodeError(
            f"Encoded tree must be an object, got {type(data).__name__}"
        )

    return _decode_node(data, 1, limits)


def to_json(node: ExpressionNode, indent: Optional[int] = None) -> str:
    """Encodes a tree as a JSON string."""
    return json.dumps(to_dict(node), indent=indent)


def from_json(
    content: Union[str, bytes],
    limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
) -> ExpressionNode:
    """
    Decodes a JSON string back into a tree.

    Raises:
        DecodeError: If the content is not valid JSON or not a valid tree
        LimitExceededError: If the tree is nested deeper than the limits allow
    """
    try:
        data = json.loads(content)
    except RecursionError as error:
        raise DecodeError("Invalid encoded tree: JSON nested too deeply") from error
    except ValueError as error:
        raise DecodeError(f"Invalid encoded tree JSON: {error}") from error

    return from_dict(data, limits)
