"""
Wire schema for serialized models.

Serialized models are plain JSON. Two shapes inside them carry meaning
beyond plain data and are checked with JSON Schema before they are rebuilt:
- function records, ``{"marker": "function", "sourceText": "..."}``
- dependency entries, whose ``condition`` and ``validate`` are function records
"""

from typing import Any, Dict

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate as json_validate

from ..core.constants import FUNCTION_MARKER, MARKER_KEY, SOURCE_TEXT_KEY
from ..core.exceptions import DeserializationError

FUNCTION_RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        MARKER_KEY: {"const": FUNCTION_MARKER},
        SOURCE_TEXT_KEY: {"type": "string", "minLength": 1},
    },
    "required": [MARKER_KEY, SOURCE_TEXT_KEY],
    "additionalProperties": False,
}

DEPENDENCY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "field": {"type": "string", "minLength": 1},
        "condition": FUNCTION_RECORD_SCHEMA,
        "validate": FUNCTION_RECORD_SCHEMA,
        "message": {"type": "string"},
        "optional": {"type": "boolean"},
        "required": {"type": "boolean"},
    },
    "required": ["field"],
}


def is_function_record(value: Any) -> bool:
    """Check whether a decoded JSON value is tagged as a function record."""
    return isinstance(value, dict) and value.get(MARKER_KEY) == FUNCTION_MARKER


def function_record(source: str) -> Dict[str, str]:
    """Build the wire record for function source text."""
    return {MARKER_KEY: FUNCTION_MARKER, SOURCE_TEXT_KEY: source}


def check_wire_shape(instance: Any, schema: Dict[str, Any], path: str) -> None:
    """
    Validate a decoded value against one of the wire schemas.

    Args:
        instance: Decoded JSON value
        schema: FUNCTION_RECORD_SCHEMA or DEPENDENCY_SCHEMA
        path: Location of the value inside the model, for the error message

    Raises:
        DeserializationError: If the value does not match the schema
    """
    try:
        json_validate(instance=instance, schema=schema)
    except JsonSchemaError as e:
        raise DeserializationError(f"Invalid model at {path}: {e.message}") from e
