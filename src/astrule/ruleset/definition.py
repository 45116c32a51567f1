"""
Rule set document models.

A rule set document lists named rules, for example in YAML::

    name: senior-sales
    rules:
      - id: senior
        ruleString: age > 30
      - id: sales
        ruleString: department = 'Sales' OR department = 'Marketing'
    expressionLimits:
      maxRuleLength: 1024

Both camelCase and snake_case keys are accepted.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from astrule.expr.limits import ExpressionLimits

# Fields that are tolerated at the top level without a warning.
KNOWN_RULE_SET_FIELDS = frozenset({"version", "$schema"})

# Fields that are tolerated on rules without a warning.
KNOWN_RULE_FIELDS = frozenset({"tags"})


class RuleDefinition(BaseModel):
    """A single named rule."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Rule identifier. Defaults to rule_<index> when omitted.
    id: Optional[str] = None

    # The rule string, e.g. "age > 30 AND department = 'Sales'"
    rule_string: str = Field(alias="ruleString")

    description: Optional[str] = None


class RuleSetDefinition(BaseModel):
    """A named collection of rules that are combined with AND."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: Optional[str] = None

    description: Optional[str] = None

    rules: list[RuleDefinition] = Field(default_factory=list)

    # Limits applied when parsing each rule
    expression_limits: Optional[dict[str, Any]] = Field(
        default=None, alias="expressionLimits"
    )

    def resolve_limits(self) -> Optional[ExpressionLimits]:
        """Returns the configured expression limits, if any."""
        if self.expression_limits is None:
            return None
        return ExpressionLimits.from_mapping(self.expression_limits)
