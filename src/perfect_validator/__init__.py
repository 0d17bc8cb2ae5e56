"""
perfect-validator - Model-driven data validation

This package validates data against declarative, serializable validation
models. It includes:

- A data validation engine with cross-field dependency resolution
- Structural validation of models
- Serialization of models, including their embedded predicate functions
- Versioned model storage (in-memory, JSON filesystem, SQLite)
- A façade and a command line interface tying these together

For more information, please see the documentation.
"""

__version__ = "0.1.0"
__author__ = "perfect-validator Team"
__license__ = "See LICENSE file"

# Version compatibility check
import sys

if sys.version_info < (3, 10):
    raise RuntimeError("perfect-validator requires Python 3.10 or higher")

# Import commonly used components for easier access
from .core import (
    DataValidator,
    FieldError,
    ModelValidationResult,
    ValidationResult,
    ValidationType,
    ValidatorConfig,
    validate,
    validate_model,
)
from .functions import ModelFunction, compile_function
from .serialization import deserialize_model, serialize_model
from .validator import PerfectValidator

__all__ = [
    "PerfectValidator",
    "DataValidator",
    "ValidatorConfig",
    "ValidationType",
    "ValidationResult",
    "ModelValidationResult",
    "FieldError",
    "ModelFunction",
    "compile_function",
    "validate",
    "validate_model",
    "serialize_model",
    "deserialize_model",
]
