"""Tests for structural model validation."""

from perfect_validator.core.structure import validate_model


def _noop(value):
    return True


def test_valid_model(user_profile_model):
    """Test that the example model is structurally valid."""
    result = validate_model(user_profile_model)
    assert result.is_valid
    assert result.errors is None
    assert result.to_dict() == {"isValid": True, "errors": None}


def test_shorthand_tags():
    """Test bare tag rules, including composite list tags."""
    assert validate_model({"a": "S", "b": "L<N>"}).is_valid
    result = validate_model({"a": "X", "b": "L<Y>"})
    assert result.errors == ['Invalid type "X" at a', 'Invalid type "L<Y>" at b']


def test_invalid_rule_definitions():
    """Test rejection of rules that are neither tags nor mappings."""
    result = validate_model({"a": 5, "b": {"type": "Q"}, "c": {"optional": True}})
    assert result.errors == [
        "Invalid field definition at a",
        'Invalid type "Q" at b',
        "Missing type at c",
    ]


def test_non_mapping_model():
    """Test that a model must be a mapping."""
    result = validate_model(["S"])
    assert not result.is_valid
    assert result.errors == ["Model must be a mapping of field names to rules"]


def test_number_constraints():
    """Test numeric constraint checks."""
    result = validate_model(
        {
            "a": {"type": "N", "min": "1"},
            "b": {"type": "N", "min": 10, "max": 1},
            "c": {"type": "N", "integer": "yes", "decimal": 1, "decimals": -1},
        }
    )
    assert result.errors == [
        "Invalid min value at a",
        "Invalid range at b",
        "Invalid integer flag at c",
        "Invalid decimal flag at c",
        "Invalid decimals value at c",
    ]


def test_length_and_values_constraints():
    """Test length bounds and enumerations."""
    result = validate_model(
        {
            "a": {"type": "S", "minLength": 5, "maxLength": 2},
            "b": {"type": "S", "minLength": -1},
            "c": {"type": "S", "values": []},
        }
    )
    assert result.errors == [
        "Invalid length range at a",
        "Invalid minLength value at b",
        "Invalid values at c",
    ]


def test_patterns():
    """Test pattern compilation and the REGEX pattern requirement."""
    result = validate_model({"a": {"type": "REGEX"}, "b": {"type": "S", "pattern": "("}})
    assert result.errors == ["Missing pattern for REGEX type at a", "Invalid pattern at b"]


def test_validate_must_be_callable():
    """Test that a standalone validator must be a function."""
    result = validate_model({"a": {"type": "S", "validate": "len(x) > 2"}})
    assert result.errors == ["Invalid validate function at a"]


def test_dependency_entries():
    """Test the checks applied to each dependency entry."""
    result = validate_model(
        {
            "a": {
                "type": "S",
                "dependsOn": [
                    "b",
                    {"condition": _noop, "validate": _noop},
                    {"field": "b", "condition": True, "validate": _noop, "message": 3},
                ],
            }
        }
    )
    assert result.errors == [
        "Invalid dependency definition at a.dependsOn[0]",
        "Missing field in dependency at a.dependsOn[1]",
        "Missing or invalid condition function at a.dependsOn[2]",
        "Invalid message in dependency at a.dependsOn[2]",
    ]


def test_nested_paths():
    """Test that nested problems are reported with their full path."""
    result = validate_model(
        {
            "user": {
                "type": "M",
                "fields": {"tags": {"type": "L", "items": {"type": "Z"}}},
            },
            "bad": {"type": "M", "fields": ["x"]},
        }
    )
    assert result.errors == ['Invalid type "Z" at user.tags.items', "Invalid fields definition at bad"]


def test_circular_reference():
    """Test that a rule containing itself is reported instead of walked forever."""
    node = {"type": "M", "fields": {}}
    node["fields"]["child"] = node
    result = validate_model({"root": node})
    assert result.errors == ["Circular reference at root.child"]


def test_shared_rule_is_not_circular():
    """Test that reusing a rule in sibling positions is allowed."""
    shared = {"type": "S"}
    assert validate_model({"a": shared, "b": {"type": "M", "fields": {"c": shared}}}).is_valid


def test_maximum_depth():
    """Test the nesting depth guard."""
    model = {"type": "S"}
    for _ in range(4):
        model = {"type": "M", "fields": {"f": model}}
    assert validate_model({"root": model}, max_depth=5).is_valid
    result = validate_model({"root": model}, max_depth=4)
    assert result.errors == ["Maximum nesting depth of 4 exceeded at root.f.f.f.f"]
