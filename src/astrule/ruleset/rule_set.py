"""
Compiled rule sets.

A RuleSet parses every rule of a definition once and keeps the trees. The
whole set evaluates as the AND of its rules in definition order, which is the
same tree ``combine`` builds from the rule strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from astrule.expr.ast import ExpressionNode
from astrule.expr.codec import to_dict
from astrule.expr.combiner import combine_trees
from astrule.expr.errors import EmptyInputError, LimitExceededError, ParseError
from astrule.expr.evaluator import Record, evaluate, try_evaluate
from astrule.expr.limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from astrule.expr.parser import parse

from .definition import (
    KNOWN_RULE_FIELDS,
    KNOWN_RULE_SET_FIELDS,
    RuleSetDefinition,
)
from .errors import RuleSetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledRule:
    """A rule string together with its parsed tree."""

    id: str
    rule_string: str
    tree: ExpressionNode
    description: Optional[str] = None


@dataclass
class RuleEvaluationStep:
    """Outcome of evaluating one rule of a set."""

    rule_id: str
    result: bool
    # The rule string that was evaluated
    expression: Optional[str] = None
    # Error message if evaluation failed
    error: Optional[str] = None


class RuleSet:
    """
    An ordered, immutable collection of compiled rules.

    Modifications return a new RuleSet; trees of untouched rules are shared.
    """

    def __init__(
        self,
        rules: Sequence[CompiledRule],
        name: Optional[str] = None,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        seen: set[str] = set()
        for rule in rules:
            if rule.id in seen:
                raise RuleSetError(f'Duplicate rule id "{rule.id}"', rule.id)
            seen.add(rule.id)

        self._rules = tuple(rules)
        self._by_id = {rule.id: rule for rule in self._rules}
        self._name = name
        self._limits = limits
        try:
            self._combined = (
                combine_trees([rule.tree for rule in self._rules], limits)
                if self._rules
                else None
            )
        except LimitExceededError as error:
            raise RuleSetError(f"Rule set too large: {error.message}") from error

        logger.debug(
            "rule_set_compiled",
            extra={"rule_set": name, "rule_count": len(self._rules)},
        )

    # ============================================================
    # Construction
    # ============================================================

    @classmethod
    def from_definition(
        cls,
        definition: RuleSetDefinition,
        warn_on_unknown_fields: bool = True,
        limits: Optional[ExpressionLimits] = None,
    ) -> RuleSet:
        """Compiles a rule set definition."""
        if limits is None:
            try:
                limits = definition.resolve_limits() or DEFAULT_EXPRESSION_LIMITS
            except (TypeError, ValueError) as error:
                raise RuleSetError(f"Invalid expressionLimits: {error}") from error

        if warn_on_unknown_fields:
            _warn_unknown_fields(definition.model_extra, KNOWN_RULE_SET_FIELDS)

        compiled = []
        for index, rule in enumerate(definition.rules):
            if warn_on_unknown_fields:
                _warn_unknown_fields(rule.model_extra, KNOWN_RULE_FIELDS)
            compiled.append(
                _compile_rule(
                    rule.id or f"rule_{index}",
                    rule.rule_string,
                    limits,
                    rule.description,
                )
            )

        return cls(compiled, name=definition.name, limits=limits)

    @classmethod
    def from_rule_strings(
        cls,
        rules: Union[Mapping[str, str], Sequence[str]],
        name: Optional[str] = None,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ) -> RuleSet:
        """
        Compiles rule strings keyed by id, or a plain sequence of rule strings
        that get ids ``rule_0``, ``rule_1``, ...
        """
        if isinstance(rules, Mapping):
            items = list(rules.items())
        else:
            items = [(f"rule_{index}", rule) for index, rule in enumerate(rules)]

        compiled = [_compile_rule(rule_id, rule, limits) for rule_id, rule in items]
        return cls(compiled, name=name, limits=limits)

    # ============================================================
    # Accessors
    # ============================================================

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def rules(self) -> tuple[CompiledRule, ...]:
        return self._rules

    @property
    def rule_ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    @property
    def combined(self) -> ExpressionNode:
        """
        The AND of all rules, folded left to right.

        Raises:
            EmptyInputError: If the set has no rules
        """
        if self._combined is None:
            raise EmptyInputError("Rule set has no rules")
        return self._combined

    def rule(self, rule_id: str) -> CompiledRule:
        """Returns the compiled rule with the given id."""
        try:
            return self._by_id[rule_id]
        except KeyError:
            raise KeyError(f'Unknown rule id "{rule_id}"') from None

    def tree(self, rule_id: str) -> ExpressionNode:
        return self.rule(rule_id).tree

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[CompiledRule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    # ============================================================
    # Evaluation
    # ============================================================

    def evaluate(self, record: Record) -> bool:
        """Evaluates the combined tree of all rules against a record."""
        return evaluate(self.combined, record)

    def evaluate_rule(self, rule_id: str, record: Record) -> bool:
        """Evaluates a single rule against a record."""
        return evaluate(self.tree(rule_id), record)

    def explain(self, record: Record) -> list[RuleEvaluationStep]:
        """
        Evaluates every rule separately and reports each outcome.

        Evaluation errors are captured per rule instead of being raised.
        """
        steps = []
        for rule in self._rules:
            result = try_evaluate(rule.tree, record)
            steps.append(
                RuleEvaluationStep(
                    rule_id=rule.id,
                    result=result.value,
                    expression=rule.rule_string,
                    error=result.error,
                )
            )
        return steps

    # ============================================================
    # Modification
    # ============================================================

    def with_rule(
        self,
        rule_id: str,
        rule_string: str,
        description: Optional[str] = None,
    ) -> RuleSet:
        """
        Returns a new set with the rule added, or replaced in place if the id
        already exists.
        """
        compiled = _compile_rule(rule_id, rule_string, self._limits, description)

        if rule_id in self._by_id:
            rules = [compiled if r.id == rule_id else r for r in self._rules]
        else:
            rules = [*self._rules, compiled]

        return RuleSet(rules, name=self._name, limits=self._limits)

    def without_rule(self, rule_id: str) -> RuleSet:
        """Returns a new set without the given rule."""
        self.rule(rule_id)
        rules = [r for r in self._rules if r.id != rule_id]
        return RuleSet(rules, name=self._name, limits=self._limits)

    # ============================================================
    # Serialization
    # ============================================================

    def to_dict(self) -> dict[str, Any]:
        """Encodes the set with rule strings and their encoded trees."""
        return {
            "name": self._name,
            "rules": [
                {
                    "id": rule.id,
                    "ruleString": rule.rule_string,
                    "description": rule.description,
                    "ast": to_dict(rule.tree),
                }
                for rule in self._rules
            ],
            "combined": to_dict(self._combined) if self._combined is not None else None,
        }


def _compile_rule(
    rule_id: str,
    rule_string: str,
    limits: ExpressionLimits,
    description: Optional[str] = None,
) -> CompiledRule:
    """Parses a single rule."""
    try:
        tree = parse(rule_string, limits)
    except ParseError as error:
        raise RuleSetError(
            f'Invalid rule "{rule_id}": {error.message}', rule_id
        ) from error

    return CompiledRule(
        id=rule_id,
        rule_string=rule_string,
        tree=tree,
        description=description,
    )


def _warn_unknown_fields(
    extra: Optional[dict[str, Any]], known: frozenset[str]
) -> None:
    """Warn about fields the models do not declare."""
    if not extra:
        return
    for key in extra:
        if key not in known:
            logger.warning("unknown_rule_set_field", extra={"field": key})
