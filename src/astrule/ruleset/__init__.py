"""
Named rule sets built on the expression engine.
"""

from .definition import (
    KNOWN_RULE_FIELDS,
    KNOWN_RULE_SET_FIELDS,
    RuleDefinition,
    RuleSetDefinition,
)
from .errors import RuleSetError
from .loader import (
    detect_format,
    load_rule_set,
    load_rule_set_definition,
    parse_rule_set_document,
)
from .rule_set import CompiledRule, RuleEvaluationStep, RuleSet

__all__ = [
    "RuleDefinition",
    "RuleSetDefinition",
    "KNOWN_RULE_FIELDS",
    "KNOWN_RULE_SET_FIELDS",
    "RuleSetError",
    "CompiledRule",
    "RuleEvaluationStep",
    "RuleSet",
    "detect_format",
    "parse_rule_set_document",
    "load_rule_set_definition",
    "load_rule_set",
]
