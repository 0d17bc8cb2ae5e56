"""
Structural validation of models.

Checks the *shape of a schema*, never data. Every rule is visited depth
first in declaration order and each defect is reported as a human readable
string prefixed with the dotted path where it was found. The result is a
``ModelValidationResult``; nothing here raises for a malformed model.

Self-referential models (a rule that appears again inside its own ``fields``
or ``items``) are reported as circular references, and nesting deeper than
the configured maximum depth is reported instead of being walked.
"""

import re
from typing import Any, List, Mapping, Optional, Set

from .constants import DEFAULT_MAX_DEPTH
from .enums import ValidationType, is_known_tag
from .models import ModelValidationResult
from .registry import is_number


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ModelStructureValidator:
    """
    Depth-first structural validator for validation models.

    Attributes:
        max_depth (int): Deepest rule nesting that is inspected
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self._errors: List[str] = []
        self._stack: Set[int] = set()

    def validate(self, model: Any) -> ModelValidationResult:
        """
        Validate a model's structure.

        Args:
            model: Mapping of field names to rules or bare type tags

        Returns:
            ModelValidationResult with every defect found
        """
        self._errors = []
        self._stack = set()

        if not isinstance(model, Mapping):
            return ModelValidationResult.from_errors(["Model must be a mapping of field names to rules"])

        for key, rule in model.items():
            self._validate_rule(rule, str(key), depth=1)

        return ModelValidationResult.from_errors(self._errors)

    def _validate_rule(self, rule: Any, path: str, depth: int) -> None:
        if depth > self.max_depth:
            self._errors.append(f"Maximum nesting depth of {self.max_depth} exceeded at {path}")
            return

        if isinstance(rule, str):
            if not is_known_tag(rule):
                self._errors.append(f'Invalid type "{rule}" at {path}')
            return

        if not isinstance(rule, Mapping):
            self._errors.append(f"Invalid field definition at {path}")
            return

        if id(rule) in self._stack:
            self._errors.append(f"Circular reference at {path}")
            return

        self._stack.add(id(rule))
        try:
            self._validate_mapping_rule(rule, path, depth)
        finally:
            self._stack.discard(id(rule))

    def _validate_mapping_rule(self, rule: Mapping[str, Any], path: str, depth: int) -> None:
        tag = rule.get("type")
        if tag is not None and not is_known_tag(tag):
            self._errors.append(f'Invalid type "{tag}" at {path}')
        if tag is None and "fields" not in rule and "items" not in rule:
            self._errors.append(f"Missing type at {path}")

        if "values" in rule:
            values = rule["values"]
            if not isinstance(values, (list, tuple)) or len(values) == 0:
                self._errors.append(f"Invalid values at {path}")

        member = ValidationType.from_tag(tag)
        if member is ValidationType.NUMBER:
            self._validate_number_constraints(rule, path)
        self._validate_length_constraints(rule, path)
        self._validate_pattern(rule, member, path)

        if "validate" in rule and not callable(rule["validate"]):
            self._errors.append(f"Invalid validate function at {path}")

        if "dependsOn" in rule and rule["dependsOn"] is not None:
            self._validate_dependencies(rule["dependsOn"], path)

        if "fields" in rule:
            fields = rule["fields"]
            if not isinstance(fields, Mapping):
                self._errors.append(f"Invalid fields definition at {path}")
                return
            for key, child in fields.items():
                self._validate_rule(child, f"{path}.{key}" if path else str(key), depth + 1)

        if rule.get("items") is not None:
            self._validate_rule(rule["items"], f"{path}.items", depth + 1)

    def _validate_number_constraints(self, rule: Mapping[str, Any], path: str) -> None:
        minimum = rule.get("min")
        maximum = rule.get("max")
        if minimum is not None and not is_number(minimum):
            self._errors.append(f"Invalid min value at {path}")
        if maximum is not None and not is_number(maximum):
            self._errors.append(f"Invalid max value at {path}")
        if is_number(minimum) and is_number(maximum) and minimum > maximum:
            self._errors.append(f"Invalid range at {path}")
        if rule.get("integer") is not None and not isinstance(rule["integer"], bool):
            self._errors.append(f"Invalid integer flag at {path}")
        if rule.get("decimal") is not None and not isinstance(rule["decimal"], bool):
            self._errors.append(f"Invalid decimal flag at {path}")
        if rule.get("decimals") is not None and not _is_non_negative_int(rule["decimals"]):
            self._errors.append(f"Invalid decimals value at {path}")

    def _validate_length_constraints(self, rule: Mapping[str, Any], path: str) -> None:
        min_length = rule.get("minLength")
        max_length = rule.get("maxLength")
        if min_length is not None and not _is_non_negative_int(min_length):
            self._errors.append(f"Invalid minLength value at {path}")
        if max_length is not None and not _is_non_negative_int(max_length):
            self._errors.append(f"Invalid maxLength value at {path}")
        if _is_non_negative_int(min_length) and _is_non_negative_int(max_length) and min_length > max_length:
            self._errors.append(f"Invalid length range at {path}")

    def _validate_pattern(self, rule: Mapping[str, Any], member: Optional[ValidationType], path: str) -> None:
        pattern = rule.get("pattern")
        if pattern is None:
            if member is ValidationType.REGEX:
                self._errors.append(f"Missing pattern for REGEX type at {path}")
            return
        if not isinstance(pattern, str):
            self._errors.append(f"Invalid pattern at {path}")
            return
        try:
            re.compile(pattern)
        except re.error:
            self._errors.append(f"Invalid pattern at {path}")

    def _validate_dependencies(self, depends_on: Any, path: str) -> None:
        dependencies = depends_on if isinstance(depends_on, (list, tuple)) else [depends_on]
        for index, dependency in enumerate(dependencies):
            dep_path = f"{path}.dependsOn[{index}]"
            if not isinstance(dependency, Mapping):
                self._errors.append(f"Invalid dependency definition at {dep_path}")
                continue
            if not dependency.get("field") or not isinstance(dependency["field"], str):
                self._errors.append(f"Missing field in dependency at {dep_path}")
            if not callable(dependency.get("condition")):
                self._errors.append(f"Missing or invalid condition function at {dep_path}")
            if not callable(dependency.get("validate")):
                self._errors.append(f"Missing or invalid validate function at {dep_path}")
            if dependency.get("message") is not None and not isinstance(dependency["message"], str):
                self._errors.append(f"Invalid message in dependency at {dep_path}")


def validate_model(model: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> ModelValidationResult:
    """
    Structurally validate a model.

    Args:
        model: Model to inspect
        max_depth: Deepest rule nesting that is inspected

    Returns:
        ModelValidationResult; ``errors`` is None when the model is valid

    Example:
        >>> validate_model({"age": {"type": "N", "min": 10, "max": 1}}).errors
        ['Invalid range at age']
    """
    return ModelStructureValidator(max_depth=max_depth).validate(model)
