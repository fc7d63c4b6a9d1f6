"""
Schema Validation - JSON Schema checks for API schemas and declared records.

API schemas and declared-record schemas are JSON Schema (Draft 7, the
dialect OpenAPI 3.0 builds on).
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

logger = logging.getLogger(__name__)


def validate_schema(schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Check that a document is itself a valid JSON Schema.

    Args:
        schema: The schema to check

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        return False, f"Invalid schema: {e.message}"
    return True, None


def schema_errors(record: Dict[str, Any], schema: Dict[str, Any]) -> List[str]:
    """
    Collect every violation of a schema by a record.

    Returns:
        One '<path>: <message>' string per violation, sorted by path
    """
    validator = Draft7Validator(schema)
    messages = []
    for error in validator.iter_errors(record):
        path = ".".join(str(p) for p in error.absolute_path) or "(root)"
        messages.append(f"{path}: {error.message}")
    return sorted(messages)


def validate_spec_against_schema(
    spec: Dict[str, Any], schema: Dict[str, Any]
) -> Tuple[bool, Optional[str]]:
    """
    Validate a declared record against a schema.

    Args:
        spec: The declared configuration record
        schema: The JSON Schema to validate against

    Returns:
        Tuple of (is_valid, error_message)
    """
    ok, error = validate_schema(schema)
    if not ok:
        return False, error

    errors = schema_errors(spec, schema)
    if errors:
        logger.debug(f"Record failed validation with {len(errors)} error(s)")
        return False, "; ".join(errors)
    return True, None
