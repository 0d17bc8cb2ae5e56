"""
Type and pattern registry.

This module holds the single dispatch table that maps every ``ValidationType``
to its membership check, together with the fixed-format regular expressions
for the string based types and the numeric refinements applied on top of the
``N`` type:
- check_type: type membership for a tag and a value
- is_integral / decimal_places: numeric refinements
- describe_rule / type_name: text used in type error messages

All functions are pure and never raise for unexpected values; they return
False instead.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from .enums import ValidationType, parse_list_tag

# Fixed format patterns. re.ASCII keeps \d and \s to their ASCII meaning and
# \Z refuses a trailing newline.
PATTERNS: Dict[ValidationType, "re.Pattern[str]"] = {
    ValidationType.EMAIL: re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z]{2,})+\Z", re.ASCII),
    ValidationType.URL: re.compile(
        r"^(https?:\/\/)([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})(:[0-9]{1,5})?(\/[^\s]*)?\Z", re.ASCII
    ),
    ValidationType.PHONE: re.compile(
        r"^\+?[1-9]\d{0,2}[-.\s]?\(?\d{2,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{3,4}\Z", re.ASCII
    ),
    ValidationType.DATE: re.compile(
        r"^(19|20)\d{2}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])"
        r"(?:T([01]\d|2[0-3]):[0-5]\d:[0-5]\d(?:\.\d+)?(?:Z|[+-]([01]\d|2[0-3]):[0-5]\d)?)?\Z",
        re.ASCII,
    ),
}


def is_number(value: Any) -> bool:
    """Check for a JSON number: int or float, excluding bool and NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _matches(pattern: "re.Pattern[str]", value: Any) -> bool:
    return isinstance(value, str) and pattern.match(value) is not None


def _matches_rule_pattern(value: Any, rule: Optional[Mapping[str, Any]]) -> bool:
    if not isinstance(value, str) or not rule or not isinstance(rule.get("pattern"), str):
        return False
    try:
        return re.search(rule["pattern"], value) is not None
    except re.error:
        return False


_CHECKS: Dict[ValidationType, Callable[[Any, Optional[Mapping[str, Any]]], bool]] = {
    ValidationType.STRING: lambda value, rule: isinstance(value, str),
    ValidationType.NUMBER: lambda value, rule: is_number(value),
    ValidationType.BOOLEAN: lambda value, rule: isinstance(value, bool),
    ValidationType.LIST: lambda value, rule: isinstance(value, (list, tuple)),
    ValidationType.MAP: lambda value, rule: isinstance(value, Mapping),
    ValidationType.EMAIL: lambda value, rule: _matches(PATTERNS[ValidationType.EMAIL], value),
    ValidationType.URL: lambda value, rule: _matches(PATTERNS[ValidationType.URL], value),
    ValidationType.DATE: lambda value, rule: _matches(PATTERNS[ValidationType.DATE], value),
    ValidationType.PHONE: lambda value, rule: _matches(PATTERNS[ValidationType.PHONE], value),
    ValidationType.REGEX: _matches_rule_pattern,
}


def check_type(tag: Any, value: Any, rule: Optional[Mapping[str, Any]] = None) -> bool:
    """
    Check whether a value belongs to a type.

    Args:
        tag: Type tag or ValidationType member
        value: Value to check
        rule: Rule owning the tag; only REGEX reads it (for ``pattern``)

    Returns:
        bool: True if the value has the type, False otherwise (including for
        unknown tags)
    """
    member = tag if isinstance(tag, ValidationType) else ValidationType.from_tag(tag)
    if member is None:
        return False
    return _CHECKS[member](value, rule)


def is_integral(value: Any) -> bool:
    """Check whether a number has no fractional part (``42`` and ``42.0`` both qualify)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def decimal_places(value: Any) -> int:
    """
    Count the fractional digits of a finite number.

    The count is taken from the shortest representation that round-trips
    (``repr``), so ``42.25`` has 2 places, ``0.1`` has 1 and ``42`` has 0.
    """
    if isinstance(value, int):
        return 0
    try:
        exponent = Decimal(repr(value)).normalize().as_tuple().exponent
    except InvalidOperation:
        return 0
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)


def type_name(value: Any) -> str:
    """Name a value's type the way JSON does (``null``, ``number``, ``array``...)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def format_value(value: Any) -> str:
    """Render a scalar for use inside an error message."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def describe_rule(rule: Any) -> str:
    """
    Describe what a rule expects, for "Invalid type, expected ..." messages.

    Args:
        rule: Bare tag or rule mapping

    Returns:
        str: Description such as ``string (min length: 2)`` or ``array of N``
    """
    if isinstance(rule, str):
        return rule
    if not isinstance(rule, Mapping):
        return "unknown"

    tag = rule.get("type")
    if not tag:
        return "unknown"

    is_composite, element_tag = parse_list_tag(tag)
    if is_composite:
        return f"array of {element_tag}"

    member = ValidationType.from_tag(tag)
    if member is ValidationType.STRING:
        description = "string"
        if rule.get("minLength"):
            description += f" (min length: {rule['minLength']})"
        if rule.get("maxLength"):
            description += f" (max length: {rule['maxLength']})"
        return description
    if member is ValidationType.NUMBER:
        description = "number"
        if rule.get("min") is not None:
            description += f" (min: {format_value(rule['min'])})"
        if rule.get("max") is not None:
            description += f" (max: {format_value(rule['max'])})"
        if rule.get("decimal"):
            description += " (decimal)"
        return description
    if member is ValidationType.LIST:
        items = rule.get("items")
        return f"array of {describe_rule(items)}" if items else "array"
    if member is ValidationType.REGEX:
        return f"string matching pattern: {rule.get('pattern')}"

    simple = {
        ValidationType.BOOLEAN: "boolean",
        ValidationType.MAP: "object",
        ValidationType.EMAIL: "email address",
        ValidationType.URL: "URL",
        ValidationType.DATE: "date (YYYY-MM-DD)",
        ValidationType.PHONE: "phone number",
    }
    return simple.get(member, str(tag)) if member else str(tag)
