"""
Parameter metadata for each type tag.

Describes, for every ``ValidationType``, which rule keys it understands. The
table is informational (used by the façade and the CLI to document models);
the engine itself does not read it.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from .enums import ValidationType


@dataclass(frozen=True)
class TypeParam:
    """One rule key accepted by a type."""

    name: str
    type: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class TypeParams:
    """All rule keys accepted by a type."""

    type: str
    description: str
    params: List[TypeParam] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_OPTIONAL = TypeParam("optional", "boolean", "Whether the field is optional")


def _default(value_type: str) -> TypeParam:
    return TypeParam("default", value_type, "Default value if field is not provided")


def _format_type(label: str, description: str) -> TypeParams:
    return TypeParams(label, description, [_OPTIONAL, _default("string")])


TYPE_PARAMS: Dict[ValidationType, TypeParams] = {
    ValidationType.STRING: TypeParams(
        "String",
        "Text values with optional length and pattern constraints",
        [
            TypeParam("minLength", "number", "Minimum length of the string"),
            TypeParam("maxLength", "number", "Maximum length of the string"),
            TypeParam("pattern", "string", "Regular expression the string must contain a match for"),
            TypeParam("values", "string[]", "Array of allowed values"),
            _OPTIONAL,
            _default("string"),
        ],
    ),
    ValidationType.NUMBER: TypeParams(
        "Number",
        "Numeric values with optional range constraints",
        [
            TypeParam("min", "number", "Minimum allowed value"),
            TypeParam("max", "number", "Maximum allowed value"),
            TypeParam("integer", "boolean", "Whether the number must be an integer"),
            TypeParam("decimal", "boolean", "Whether the number must be a decimal"),
            TypeParam("decimals", "number", "Exact number of decimal places for decimal numbers"),
            _OPTIONAL,
            TypeParam("values", "number[]", "Array of allowed values"),
            _default("number"),
        ],
    ),
    ValidationType.BOOLEAN: TypeParams("Boolean", "True/false values", [_OPTIONAL, _default("boolean")]),
    ValidationType.LIST: TypeParams(
        "Array",
        "Array of values with type validation",
        [
            TypeParam("items", "ValidationRule | string", "Validation rule for array items", required=True),
            TypeParam("minLength", "number", "Minimum array length"),
            TypeParam("maxLength", "number", "Maximum array length"),
            TypeParam("values", "any[]", "Array of allowed values"),
            _OPTIONAL,
        ],
    ),
    ValidationType.MAP: TypeParams(
        "Map",
        "Object with defined field structure",
        [
            TypeParam(
                "fields",
                "Record<string, ValidationRule | string>",
                "Validation rules for object fields",
                required=True,
            ),
            _OPTIONAL,
        ],
    ),
    ValidationType.EMAIL: _format_type("Email", "Valid email address format"),
    ValidationType.URL: _format_type("URL", "Valid URL format"),
    ValidationType.DATE: _format_type("Date", "Valid date format"),
    ValidationType.PHONE: _format_type("Phone", "Valid phone number format"),
    ValidationType.REGEX: TypeParams(
        "Regex",
        "Custom pattern matching",
        [
            TypeParam("pattern", "string", "Regular expression pattern", required=True),
            _OPTIONAL,
        ],
    ),
}


def get_type_params(tag: Any) -> TypeParams:
    """
    Look up the parameter metadata of a type tag.

    Args:
        tag: Type tag or ValidationType member

    Returns:
        TypeParams for the tag

    Raises:
        ValueError: If the tag is not a known type
    """
    member = tag if isinstance(tag, ValidationType) else ValidationType.from_tag(tag)
    if member is None:
        raise ValueError(f"Invalid validation type: {tag}")
    return TYPE_PARAMS[member]
