"""
Loads rule set documents from JSON or YAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import ValidationError

from .definition import RuleSetDefinition
from .errors import RuleSetError
from .rule_set import RuleSet

logger = logging.getLogger(__name__)

DocumentFormat = Literal["json", "yaml"]

_SUFFIX_FORMATS: dict[str, DocumentFormat] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def _is_plain_object(value: Any) -> bool:
    """Check if value is a dict-like object."""
    return isinstance(value, dict)


def _parse_json(content: str) -> dict[str, Any]:
    """Parse JSON content as a rule set object."""
    parsed = json.loads(content)
    if not _is_plain_object(parsed):
        raise ValueError("Parsed JSON rule set must be an object")
    return parsed


def _parse_yaml(content: str) -> dict[str, Any]:
    """Parse YAML content as a rule set object."""
    parsed = yaml.safe_load(content or "")
    if parsed is None:
        return {}
    if not _is_plain_object(parsed):
        raise ValueError("Parsed YAML rule set must be an object")
    return parsed


def detect_format(content: str, path: Optional[Union[str, Path]] = None) -> DocumentFormat:
    """
    Detect whether content is JSON or YAML from the file suffix.
    Falls back to sniffing the content when the suffix is not definitive.
    """
    if path is not None:
        fmt = _SUFFIX_FORMATS.get(Path(path).suffix.lower())
        if fmt is not None:
            return fmt

    # Sniff by first non-whitespace character
    trimmed = content.lstrip()
    if trimmed.startswith("{") or trimmed.startswith("["):
        return "json"

    # Default to YAML
    return "yaml"


def parse_rule_set_document(
    content: str, fmt: Optional[DocumentFormat] = None
) -> RuleSetDefinition:
    """
    Parses a rule set document into a definition.

    Raises:
        RuleSetError: If the content is not valid JSON/YAML or does not
            describe a rule set
    """
    fmt = fmt or detect_format(content)
    try:
        raw = _parse_json(content) if fmt == "json" else _parse_yaml(content)
    except (ValueError, yaml.YAMLError) as error:
        raise RuleSetError(f"Invalid {fmt} rule set document: {error}") from error

    try:
        return RuleSetDefinition.model_validate(raw)
    except ValidationError as error:
        raise RuleSetError(f"Invalid rule set definition: {error}") from error


def load_rule_set_definition(path: Union[str, Path]) -> RuleSetDefinition:
    """Reads and parses a rule set document from a file."""
    file_path = Path(path)
    content = file_path.read_text(encoding="utf-8")
    definition = parse_rule_set_document(content, detect_format(content, file_path))

    logger.debug(
        "rule_set_document_loaded",
        extra={"path": str(file_path), "rule_count": len(definition.rules)},
    )
    return definition


def load_rule_set(
    path: Union[str, Path], warn_on_unknown_fields: bool = True
) -> RuleSet:
    """Reads a rule set document from a file and compiles it."""
    definition = load_rule_set_definition(path)
    return RuleSet.from_definition(
        definition, warn_on_unknown_fields=warn_on_unknown_fields
    )
