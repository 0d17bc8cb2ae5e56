"""
Enumeration of the type tags understood by the validation engine.

Type tags are a closed set: structural validation, the type registry and the
data validator all dispatch over ``ValidationType`` and nothing else. New
types are added by extending this enum and the registry dispatch table.

Besides the plain tags, a model may use the composite list notation
``L<X>`` (for example ``"L<N>"`` or ``"L<DATE>"``) to declare a list whose
elements all have type ``X``.
"""

from enum import Enum
from typing import Optional, Tuple


class ValidationType(str, Enum):
    """
    Supported type tags.

    The enum value is the tag as written in a model, so
    ``ValidationType("EMAIL") is ValidationType.EMAIL``.
    """

    STRING = "S"  # Text
    NUMBER = "N"  # int or float, never bool
    BOOLEAN = "B"
    LIST = "L"  # list or tuple
    MAP = "M"  # any mapping
    EMAIL = "EMAIL"
    URL = "URL"
    DATE = "DATE"  # ISO 8601 date, optionally with time
    PHONE = "PHONE"
    REGEX = "REGEX"  # string matching rule["pattern"]

    @classmethod
    def from_tag(cls, tag: object) -> Optional["ValidationType"]:
        """Return the enum member for a tag, or None if the tag is unknown."""
        if not isinstance(tag, str):
            return None
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Human readable name of the type."""
        return _LABELS[self]


_LABELS = {
    ValidationType.STRING: "String",
    ValidationType.NUMBER: "Number",
    ValidationType.BOOLEAN: "Boolean",
    ValidationType.LIST: "List",
    ValidationType.MAP: "Map",
    ValidationType.EMAIL: "Email",
    ValidationType.URL: "URL",
    ValidationType.DATE: "Date",
    ValidationType.PHONE: "Phone",
    ValidationType.REGEX: "RegexPattern",
}

VALID_TAGS = frozenset(member.value for member in ValidationType)


def parse_list_tag(tag: str) -> Tuple[bool, str]:
    """
    Split a composite ``L<X>`` tag.

    Args:
        tag: Type tag as written in a model

    Returns:
        Tuple of (is_composite, element_tag). For a plain tag the element tag
        is the tag itself.
    """
    if tag.startswith("L<") and tag.endswith(">") and len(tag) > 3:
        return True, tag[2:-1]
    return False, tag


def is_known_tag(tag: object) -> bool:
    """Check whether ``tag`` is a plain or composite tag the engine understands."""
    if not isinstance(tag, str):
        return False
    is_composite, element_tag = parse_list_tag(tag)
    if is_composite:
        return is_known_tag(element_tag)
    return tag in VALID_TAGS
