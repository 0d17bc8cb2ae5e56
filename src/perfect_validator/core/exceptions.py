"""
Custom exceptions for the validation system.

This module defines the hierarchy of exceptions raised by the package. Data
validation never raises: problems with *data* are collected into a
``ValidationResult``. The exceptions below cover problems with *models*
(structure, serialization, reconstruction of embedded functions), with the
storage collaborator, and with configuration.
"""

from typing import List, Optional


class PerfectValidatorError(Exception):
    """Base class for every exception raised by the package."""


class ConfigurationError(PerfectValidatorError):
    """
    Raised when configuration is invalid.

    Examples:
        * Negative maximum depth
        * Non-positive cache size
    """


class SerializationError(PerfectValidatorError):
    """
    Raised when a model cannot be turned into its portable text form.

    Examples:
        * A value that has no JSON representation
        * A function whose source cannot be recovered
        * A circular reference inside the model
    """

    def __str__(self) -> str:
        """Format serialization error message."""
        return f"Serialization Error: {super().__str__()}"


class DeserializationError(PerfectValidatorError):
    """
    Raised when serialized model text cannot be turned back into a model.

    Examples:
        * Text that is not JSON
        * A dependency entry without a ``field``
        * A function record that does not match the wire format
    """

    def __str__(self) -> str:
        """Format deserialization error message."""
        return f"Deserialization Error: {super().__str__()}"


class FunctionReconstructionError(DeserializationError):
    """
    Raised when function source text falls outside the allowed grammar.

    Only two shapes are accepted: ``lambda params: expression`` and a single
    ``def name(params):`` block. Anything else, or any construct the
    allow-list does not cover, is rejected with this error.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ModelValidationError(DeserializationError):
    """
    Raised when a model fails structural validation where failing fast is required.

    Attributes:
        errors (List[str]): Path-prefixed structural complaints
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors or [])


class StorageError(PerfectValidatorError):
    """
    Raised when storage operations fail.

    Examples:
        * Database connection failures
        * File system access errors
        * Corrupted storage files
    """


class ModelNotFoundError(StorageError):
    """
    Raised when a requested model (or model version) does not exist.
    """


class VersionConflictError(StorageError):
    """
    Raised when storing a version that already exists for a model name.

    Versions are append-only; a stored version is never overwritten.
    """
