"""Model serialization: portable JSON text with embedded function records."""

from .codec import deserialize_model, serialize_model
from .schema import DEPENDENCY_SCHEMA, FUNCTION_RECORD_SCHEMA, function_record, is_function_record

__all__ = [
    "serialize_model",
    "deserialize_model",
    "DEPENDENCY_SCHEMA",
    "FUNCTION_RECORD_SCHEMA",
    "function_record",
    "is_function_record",
]
