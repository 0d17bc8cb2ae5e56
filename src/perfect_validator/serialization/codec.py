"""
Model codec.

Turns a validation model into portable JSON text and back. The walk is rule
aware: it follows ``fields``, ``items`` and ``dependsOn`` and converts every
callable it meets into a function record holding its canonical source. On
the way back each record is rebuilt through the restricted reconstructor and
the resulting model is structurally validated before it is returned, so a
model that deserializes is always safe to validate against.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Set

from ..core.constants import DEFAULT_MAX_DEPTH, SOURCE_TEXT_KEY
from ..core.exceptions import (
    DeserializationError,
    FunctionReconstructionError,
    ModelValidationError,
    SerializationError,
)
from ..core.structure import validate_model
from ..functions import compile_function, function_source
from .schema import (
    DEPENDENCY_SCHEMA,
    FUNCTION_RECORD_SCHEMA,
    check_wire_shape,
    function_record,
    is_function_record,
)

logger = logging.getLogger(__name__)


class _Serializer:
    """Single-use walker that converts a model into JSON-ready values."""

    def __init__(self):
        self._stack: Set[int] = set()
        self.function_count = 0

    def rule(self, rule: Any, path: str) -> Any:
        if not isinstance(rule, Mapping):
            return self.value(rule, path)

        self._enter(rule, path)
        try:
            result: Dict[str, Any] = {}
            for key, value in rule.items():
                child_path = f"{path}.{key}"
                if key == "fields" and isinstance(value, Mapping):
                    result[key] = {name: self.rule(child, f"{path}.{name}") for name, child in value.items()}
                elif key == "items":
                    result[key] = self.rule(value, child_path)
                elif key == "dependsOn" and value is not None:
                    entries = value if isinstance(value, (list, tuple)) else [value]
                    result[key] = [
                        self.dependency(entry, f"{path}.dependsOn[{index}]") for index, entry in enumerate(entries)
                    ]
                else:
                    result[key] = self.value(value, child_path)
            return result
        finally:
            self._stack.discard(id(rule))

    def dependency(self, entry: Any, path: str) -> Any:
        if not isinstance(entry, Mapping):
            return self.value(entry, path)
        return {key: self.value(value, f"{path}.{key}") for key, value in entry.items()}

    def value(self, value: Any, path: str) -> Any:
        if callable(value):
            try:
                source = function_source(value)
            except SerializationError as e:
                raise SerializationError(f"Cannot serialize function at {path}: {e.args[0]}") from e
            self.function_count += 1
            return function_record(source)
        if isinstance(value, Mapping):
            self._enter(value, path)
            try:
                return {str(key): self.value(child, f"{path}.{key}") for key, child in value.items()}
            finally:
                self._stack.discard(id(value))
        if isinstance(value, (list, tuple)):
            self._enter(value, path)
            try:
                return [self.value(child, f"{path}[{index}]") for index, child in enumerate(value)]
            finally:
                self._stack.discard(id(value))
        return value

    def _enter(self, container: Any, path: str) -> None:
        if id(container) in self._stack:
            raise SerializationError(f"Circular reference at {path}")
        self._stack.add(id(container))


def serialize_model(model: Mapping[str, Any]) -> str:
    """
    Serialize a validation model to JSON text.

    Args:
        model: Validation model, possibly holding lambdas, ``def`` functions
            or ModelFunction instances

    Returns:
        Single-line JSON text with every function replaced by
        ``{"marker": "function", "sourceText": ...}``

    Raises:
        SerializationError: If a function's source cannot be recovered or is
            outside the function grammar, a value has no JSON form, or the
            model contains a circular reference
    """
    if not isinstance(model, Mapping):
        raise SerializationError(f"Model must be a mapping, got {type(model).__name__}")

    serializer = _Serializer()
    tree = {str(key): serializer.rule(rule, str(key)) for key, rule in model.items()}
    try:
        text = json.dumps(tree, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Model contains a value with no JSON form: {e}") from e

    logger.debug(f"Serialized model with {len(tree)} field(s) and {serializer.function_count} function(s)")
    return text


def _rebuild_function(record: Any, path: str) -> Any:
    check_wire_shape(record, FUNCTION_RECORD_SCHEMA, path)
    source = record[SOURCE_TEXT_KEY]
    try:
        return compile_function(source)
    except FunctionReconstructionError as e:
        raise FunctionReconstructionError(f"{e.args[0]} at {path}", source=source) from e


def _rebuild_value(value: Any, path: str) -> Any:
    if is_function_record(value):
        return _rebuild_function(value, path)
    if isinstance(value, dict):
        return {key: _rebuild_value(child, f"{path}.{key}") for key, child in value.items()}
    if isinstance(value, list):
        return [_rebuild_value(child, f"{path}[{index}]") for index, child in enumerate(value)]
    return value


def _rebuild_dependencies(value: Any, path: str) -> List[Dict[str, Any]]:
    entries = value if isinstance(value, list) else [value]
    dependencies = []
    for index, entry in enumerate(entries):
        entry_path = f"{path}.dependsOn[{index}]"
        check_wire_shape(entry, DEPENDENCY_SCHEMA, entry_path)
        dependencies.append({key: _rebuild_value(child, f"{entry_path}.{key}") for key, child in entry.items()})
    return dependencies


def _rebuild_rule(rule: Any, path: str) -> Any:
    if not isinstance(rule, dict) or is_function_record(rule):
        return _rebuild_value(rule, path)

    result: Dict[str, Any] = {}
    for key, value in rule.items():
        if key == "fields" and isinstance(value, dict):
            result[key] = {name: _rebuild_rule(child, f"{path}.{name}") for name, child in value.items()}
        elif key == "items":
            result[key] = _rebuild_rule(value, f"{path}.items")
        elif key == "dependsOn" and value is not None:
            result[key] = _rebuild_dependencies(value, path)
        else:
            result[key] = _rebuild_value(value, f"{path}.{key}")
    return result


def deserialize_model(text: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Dict[str, Any]:
    """
    Rebuild a validation model from serialized text.

    Args:
        text: JSON text produced by ``serialize_model``
        max_depth: Deepest rule nesting accepted by the structural check

    Returns:
        The model with every function record reconstructed and every
        ``dependsOn`` normalized to a list

    Raises:
        DeserializationError: If the text is not JSON or does not match the
            wire format
        FunctionReconstructionError: If a function record is outside the
            function grammar
        ModelValidationError: If the rebuilt model fails structural validation
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Serialized model is not valid UTF-8: {e}") from e
    if not isinstance(text, str):
        raise DeserializationError(f"Serialized model must be text, got {type(text).__name__}")

    try:
        tree = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DeserializationError(f"Invalid JSON: {e}") from e
    if not isinstance(tree, dict):
        raise DeserializationError("Serialized model must be a JSON object")

    try:
        model = {key: _rebuild_rule(rule, key) for key, rule in tree.items()}
    except RecursionError as e:
        raise DeserializationError("Model nesting is too deep to rebuild") from e

    result = validate_model(model, max_depth=max_depth)
    if not result.is_valid:
        raise ModelValidationError(
            f"Model failed structural validation: {'; '.join(result.errors)}", errors=result.errors
        )

    logger.debug(f"Deserialized model with {len(model)} field(s)")
    return model
