"""
Data validation engine.

Validates arbitrary data against a validation model. Problems with the data
are never raised: every failure becomes a ``FieldError`` and the caller gets
a ``ValidationResult`` listing them in traversal order.

Traversal order per field:
1. presence check (dependency ``required`` flags, ``optional``)
2. type check, terminal for the field when it fails
3. enumerated values, numeric, string and list refinements
4. standalone ``validate`` predicate
5. recursion into ``items`` and ``fields``
6. dependency entries, every entry evaluated in declaration order
"""

import copy
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ..functions.callables import call_predicate
from .constants import DEFAULT_MAX_DEPTH, REQUIRED_BY_DEPENDENCY_MESSAGE, REQUIRED_MESSAGE, ROOT_FIELD
from .enums import ValidationType, parse_list_tag
from .models import FieldError, ValidationResult, ValidatorConfig
from .paths import MISSING, dependency_path, join_path, resolve_path
from .registry import (
    check_type,
    decimal_places,
    describe_rule,
    format_value,
    is_integral,
    type_name,
)

logger = logging.getLogger(__name__)


def _dependencies(rule: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    depends_on = rule.get("dependsOn")
    if depends_on is None:
        return []
    if isinstance(depends_on, (list, tuple)):
        return list(depends_on)
    return [depends_on]


def _json_equal(left: Any, right: Any) -> bool:
    # JSON booleans are not numbers: True must not match 1
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


def _rule_tag(rule: Mapping[str, Any]) -> Optional[str]:
    tag = rule.get("type")
    if tag:
        return tag
    if rule.get("fields") is not None:
        return ValidationType.MAP.value
    if rule.get("items") is not None:
        return ValidationType.LIST.value
    return None


def _default_value(default: Any) -> Any:
    if callable(default):
        return default()
    return copy.deepcopy(default)


def apply_defaults(
    data: Mapping[str, Any], model: Mapping[str, Any], errors: Optional[List[FieldError]] = None
) -> dict:
    """
    Return a shallow copy of ``data`` with top-level defaults filled in.

    A default is applied for every model key that is absent from the data
    and whose rule is not optional. Callable defaults are invoked, other
    defaults are deep copied so the model is never shared with the data.

    Args:
        data: Document to fill in
        model: Validation model
        errors: When given, a callable default that raises is recorded here
            as a field error and the key is left absent; otherwise the
            exception propagates
    """
    result = dict(data)
    for key, rule in model.items():
        if key in result or not isinstance(rule, Mapping):
            continue
        if rule.get("optional") or "default" not in rule:
            continue
        try:
            result[key] = _default_value(rule["default"])
        except Exception as e:
            if errors is None:
                raise
            logger.debug(f"Default for {key} raised: {e}")
            errors.append(FieldError(key, f"Default value error for field {key}: {e}"))
    return result


def _is_declared(key: str, model: Mapping[str, Any]) -> bool:
    if key in model:
        return True
    # A dotted model key such as "order.total" declares its head
    return any(model_key.split(".", 1)[0] == key for model_key in model if "." in model_key)


@dataclass
class _ValidationRun:
    """State of one validation call."""

    root: Any
    max_depth: int
    errors: List[FieldError] = field(default_factory=list)

    def fail(self, path: str, message: str) -> None:
        self.errors.append(FieldError(path, message))


class DataValidator:
    """
    Validates data against validation models.

    Attributes:
        config (ValidatorConfig): Unknown-field policy and depth limit
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()

    def validate(
        self, data: Any, model: Mapping[str, Any], allow_unknown_fields: Optional[bool] = None
    ) -> ValidationResult:
        """
        Validate data against a model.

        Args:
            data: Document to validate, normally a mapping
            model: Validation model
            allow_unknown_fields: Overrides the configured unknown-field policy

        Returns:
            ValidationResult with the defaulted data or the list of errors
        """
        if allow_unknown_fields is None:
            allow_unknown_fields = self.config.allow_unknown_fields

        if not isinstance(data, Mapping):
            return ValidationResult.failure(
                [FieldError(ROOT_FIELD, f"Invalid type, expected object, got {type_name(data)}")]
            )

        default_errors: List[FieldError] = []
        data_with_defaults = apply_defaults(data, model, default_errors)
        run = _ValidationRun(root=data_with_defaults, max_depth=self.config.max_depth, errors=default_errors)
        failed_defaults = {error.field for error in default_errors}

        if not allow_unknown_fields:
            for key in data_with_defaults:
                if not _is_declared(key, model):
                    run.fail(str(key), f"Unexpected field '{key}' found in data.")

        for key, rule in model.items():
            if key in failed_defaults:
                continue
            if "." in key:
                value = resolve_path(data_with_defaults, key)
            else:
                value = data_with_defaults.get(key, MISSING)
            self._validate_value(run, value, rule, key, depth=1)

        if run.errors:
            logger.debug(f"Validation failed with {len(run.errors)} error(s)")
            return ValidationResult.failure(run.errors)
        return ValidationResult.success(data_with_defaults)

    def _validate_value(self, run: _ValidationRun, value: Any, rule: Any, path: str, depth: int) -> None:
        if depth > run.max_depth:
            run.fail(path, f"Maximum nesting depth of {run.max_depth} exceeded")
            return

        if value is MISSING:
            self._check_presence(run, rule, path)
            return

        if isinstance(rule, str):
            self._check_shorthand(run, value, rule, path, depth)
            return
        if not isinstance(rule, Mapping):
            return

        tag = _rule_tag(rule)
        if tag is None:
            return

        is_composite, element_tag = parse_list_tag(tag)
        if is_composite:
            if not isinstance(value, (list, tuple)):
                run.fail(path, f"Expected array of {element_tag}, got {type_name(value)}")
                return
        elif not check_type(tag, value, rule):
            run.fail(path, f"Invalid type, expected {describe_rule(rule)}, got {type_name(value)}")
            return

        self._check_values(run, value, rule, path)
        member = ValidationType.LIST if is_composite else ValidationType.from_tag(tag)
        if member is ValidationType.NUMBER:
            self._check_number(run, value, rule, path)
        elif member is ValidationType.STRING:
            self._check_string(run, value, rule, path)
        elif member is ValidationType.LIST:
            self._check_list_length(run, value, rule, path)

        self._check_custom(run, value, rule, path)

        if is_composite:
            for index, item in enumerate(value):
                self._validate_value(run, item, element_tag, f"{path}[{index}]", depth + 1)
        if rule.get("items") is not None and isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                self._validate_value(run, item, rule["items"], f"{path}[{index}]", depth + 1)
        if isinstance(rule.get("fields"), Mapping) and isinstance(value, Mapping):
            for key, child in rule["fields"].items():
                self._validate_value(run, value.get(key, MISSING), child, join_path(path, key), depth + 1)

        self._check_dependencies(run, value, rule, path)

    def _check_presence(self, run: _ValidationRun, rule: Any, path: str) -> None:
        if not isinstance(rule, Mapping):
            run.fail(path, REQUIRED_MESSAGE)
            return

        for dependency in _dependencies(rule):
            if not dependency.get("required"):
                continue
            dependent = resolve_path(run.root, dependency_path(dependency["field"], path))
            try:
                condition = call_predicate(dependency["condition"], None if dependent is MISSING else dependent)
            except Exception as e:
                logger.debug(f"Dependency condition for {path} raised: {e}")
                run.fail(path, dependency.get("message") or f"Dependency validation error for field {path}: {e}")
                return
            if condition:
                run.fail(path, dependency.get("message") or REQUIRED_BY_DEPENDENCY_MESSAGE)
                return

        if not rule.get("optional"):
            run.fail(path, REQUIRED_MESSAGE)

    def _check_shorthand(self, run: _ValidationRun, value: Any, tag: str, path: str, depth: int) -> None:
        is_composite, element_tag = parse_list_tag(tag)
        if is_composite:
            if not isinstance(value, (list, tuple)):
                run.fail(path, f"Expected array of {element_tag}, got {type_name(value)}")
                return
            for index, item in enumerate(value):
                self._validate_value(run, item, element_tag, f"{path}[{index}]", depth + 1)
            return
        if not check_type(tag, value):
            run.fail(path, f"Invalid type, expected {describe_rule(tag)}, got {type_name(value)}")

    def _check_values(self, run: _ValidationRun, value: Any, rule: Mapping[str, Any], path: str) -> None:
        values = rule.get("values")
        if not values:
            return
        if not any(_json_equal(value, allowed) for allowed in values):
            run.fail(path, f"Value must be one of: {', '.join(format_value(allowed) for allowed in values)}")

    def _check_number(self, run: _ValidationRun, value: Any, rule: Mapping[str, Any], path: str) -> None:
        minimum = rule.get("min")
        maximum = rule.get("max")
        if minimum is not None and value < minimum:
            run.fail(path, f"Value must be >= {format_value(minimum)}")
        if maximum is not None and value > maximum:
            run.fail(path, f"Value must be <= {format_value(maximum)}")
        if rule.get("integer") and not is_integral(value):
            run.fail(path, "Value must be an integer")

        if not rule.get("decimal"):
            return
        if isinstance(value, float) and not math.isfinite(value):
            run.fail(path, "Value must be a decimal number")
            return
        decimals = rule.get("decimals")
        # Integral values are accepted whatever the required number of places
        if decimals is not None and not is_integral(value) and decimal_places(value) != decimals:
            run.fail(path, f"Value must have exactly {decimals} decimal places")

    def _check_string(self, run: _ValidationRun, value: str, rule: Mapping[str, Any], path: str) -> None:
        min_length = rule.get("minLength")
        max_length = rule.get("maxLength")
        if min_length is not None and len(value) < min_length:
            run.fail(path, f"String length must be >= {min_length}")
        if max_length is not None and len(value) > max_length:
            run.fail(path, f"String length must be <= {max_length}")

        pattern = rule.get("pattern")
        if isinstance(pattern, str):
            try:
                matched = re.search(pattern, value) is not None
            except re.error:
                matched = False
            if not matched:
                run.fail(path, f"Value must match pattern {pattern}")

    def _check_list_length(self, run: _ValidationRun, value: Any, rule: Mapping[str, Any], path: str) -> None:
        min_length = rule.get("minLength")
        max_length = rule.get("maxLength")
        if min_length is not None and len(value) < min_length:
            run.fail(path, f"Array length must be >= {min_length}")
        if max_length is not None and len(value) > max_length:
            run.fail(path, f"Array length must be <= {max_length}")

    def _check_custom(self, run: _ValidationRun, value: Any, rule: Mapping[str, Any], path: str) -> None:
        predicate = rule.get("validate")
        if not callable(predicate):
            return
        try:
            valid = call_predicate(predicate, value)
        except Exception as e:
            logger.debug(f"Custom validation for {path} raised: {e}")
            run.fail(path, rule.get("message") or f"Custom validation error for field {path}: {e}")
            return
        if not valid:
            run.fail(path, rule.get("message") or f"Custom validation failed for field {path}")

    def _check_dependencies(self, run: _ValidationRun, value: Any, rule: Mapping[str, Any], path: str) -> None:
        for dependency in _dependencies(rule):
            dependent = resolve_path(run.root, dependency_path(dependency["field"], path))
            if dependent is MISSING and dependency.get("optional"):
                continue
            argument = None if dependent is MISSING else dependent
            message = dependency.get("message")
            try:
                if not call_predicate(dependency["condition"], argument):
                    continue
                valid = call_predicate(dependency["validate"], value, argument, run.root)
            except Exception as e:
                logger.debug(f"Dependency on {dependency['field']} for {path} raised: {e}")
                run.fail(path, message or f"Dependency validation error for field {path}: {e}")
                continue
            if not valid:
                run.fail(path, message or f"Dependency validation failed for field {path}")


def validate(
    data: Any,
    model: Mapping[str, Any],
    *,
    allow_unknown_fields: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ValidationResult:
    """
    Validate data against a model.

    Args:
        data: Document to validate
        model: Structurally valid validation model
        allow_unknown_fields: Ignore top-level keys the model does not declare
        max_depth: Maximum nesting depth walked

    Returns:
        ValidationResult

    Example:
        >>> validate({"age": 15}, {"age": {"type": "N", "min": 18}}).errors
        [FieldError(field='age', message='Value must be >= 18')]
    """
    config = ValidatorConfig(allow_unknown_fields=allow_unknown_fields, max_depth=max_depth)
    return DataValidator(config).validate(data, model)
