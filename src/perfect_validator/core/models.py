"""
Core data structures for the validation system.

This module defines the value objects exchanged between the engine and its
callers:
- FieldError and ValidationResult for data validation outcomes
- ModelValidationResult for structural (schema) validation outcomes
- ModelVersion for stored model versions
- ValidatorConfig for engine and façade configuration

All result types render the library-level wire shape through ``to_dict()``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .constants import DEFAULT_CACHE_SIZE, DEFAULT_CACHE_TTL, DEFAULT_MAX_DEPTH
from .exceptions import ConfigurationError

# A rule is either a bare type tag or a mapping of rule keys
ValidationRule = Union[str, Dict[str, Any]]
ValidationModel = Mapping[str, ValidationRule]
ValidationDependency = Dict[str, Any]
Predicate = Callable[..., Any]


@dataclass(frozen=True)
class FieldError:
    """
    A single data validation failure.

    Attributes:
        field (str): Dotted/bracketed path of the offending value (e.g. ``user.tags[1]``)
        message (str): Human readable description
    """

    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult:
    """
    Outcome of validating data against a model.

    On success ``data`` holds the input with defaults applied and ``errors``
    is empty. On failure ``data`` is None and ``errors`` lists every problem
    found, in traversal order.

    Attributes:
        is_valid (bool): Whether the data passed every rule
        data (Any): Validated data with defaults applied (success only)
        errors (List[FieldError]): Field level errors (failure only)
    """

    is_valid: bool
    data: Any = None
    errors: List[FieldError] = field(default_factory=list)

    @classmethod
    def success(cls, data: Any) -> "ValidationResult":
        return cls(is_valid=True, data=data)

    @classmethod
    def failure(cls, errors: List[FieldError]) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors))

    def messages_for(self, field_path: str) -> List[str]:
        """Return the messages reported for one field path, in order."""
        return [error.message for error in self.errors if error.field == field_path]

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the result in its wire shape.

        Returns:
            ``{"isValid": True, "data": ...}`` or
            ``{"isValid": False, "errors": [{"field": ..., "message": ...}]}``
        """
        if self.is_valid:
            return {"isValid": True, "data": self.data}
        return {"isValid": False, "errors": [error.to_dict() for error in self.errors]}

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass
class ModelValidationResult:
    """
    Outcome of structurally validating a model.

    Attributes:
        is_valid (bool): Whether the model is well formed
        errors (Optional[List[str]]): Path-prefixed complaints, None when valid
    """

    is_valid: bool
    errors: Optional[List[str]] = None

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ModelValidationResult":
        return cls(is_valid=not errors, errors=list(errors) if errors else None)

    def to_dict(self) -> Dict[str, Any]:
        return {"isValid": self.is_valid, "errors": self.errors}

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass(frozen=True)
class ModelVersion:
    """
    One stored version of a model.

    Attributes:
        name (str): Model name
        version (int): Version number, starting at 1
        model (str): Serialized model text
        created_at (datetime): When the version was stored
    """

    name: str
    version: int
    model: str
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """Validate version metadata after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if isinstance(self.version, bool) or not isinstance(self.version, int) or self.version < 1:
            raise ValueError("version must be a positive integer")


@dataclass
class ValidatorConfig:
    """
    Configuration for the data validator and the façade.

    Attributes:
        allow_unknown_fields (bool): Ignore top-level data keys that the model
            does not declare instead of reporting them
        max_depth (int): Maximum nesting depth walked in models and data
        cache_size (int): Maximum number of deserialized models kept in memory
        cache_ttl (float): Seconds a cached model stays valid
    """

    allow_unknown_fields: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    cache_size: int = DEFAULT_CACHE_SIZE
    cache_ttl: float = DEFAULT_CACHE_TTL

    def __post_init__(self):
        """Validate configuration values after initialization."""
        if not isinstance(self.allow_unknown_fields, bool):
            raise ConfigurationError("allow_unknown_fields must be a boolean")
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigurationError("max_depth must be a positive integer")
        if isinstance(self.cache_size, bool) or not isinstance(self.cache_size, int) or self.cache_size < 1:
            raise ConfigurationError("cache_size must be a positive integer")
        if self.cache_ttl <= 0:
            raise ConfigurationError("cache_ttl must be positive")
