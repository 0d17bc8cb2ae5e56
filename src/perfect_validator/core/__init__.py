"""Core validation functionality."""

from .enums import ValidationType
from .exceptions import (
    ConfigurationError,
    DeserializationError,
    FunctionReconstructionError,
    ModelNotFoundError,
    ModelValidationError,
    PerfectValidatorError,
    SerializationError,
    StorageError,
    VersionConflictError,
)
from .models import FieldError, ModelValidationResult, ModelVersion, ValidationResult, ValidatorConfig
from .paths import MISSING, resolve_path
from .registry import check_type
from .structure import validate_model
from .engine import DataValidator, validate

__all__ = [
    "ConfigurationError",
    "DataValidator",
    "DeserializationError",
    "FieldError",
    "FunctionReconstructionError",
    "MISSING",
    "ModelNotFoundError",
    "ModelValidationError",
    "ModelValidationResult",
    "ModelVersion",
    "PerfectValidatorError",
    "SerializationError",
    "StorageError",
    "ValidationResult",
    "ValidationType",
    "ValidatorConfig",
    "VersionConflictError",
    "check_type",
    "resolve_path",
    "validate",
    "validate_model",
]
