"""Tests for the PerfectValidator façade."""

import pytest
import pytest_asyncio

from perfect_validator import PerfectValidator
from perfect_validator.core.exceptions import ConfigurationError, ModelNotFoundError
from perfect_validator.core.models import FieldError, ValidatorConfig
from perfect_validator.infrastructure.storage import InMemoryModelStorage


@pytest_asyncio.fixture
async def validator():
    """Fixture providing a validator with in-memory storage."""
    storage = InMemoryModelStorage()
    await storage.initialize()
    return PerfectValidator(storage=storage)


def test_validate_static(user_profile_model, user_profile_cases):
    """Test validation against an in-memory model."""
    validator = PerfectValidator()
    assert validator.validate_static(user_profile_cases["Valid adult premium user"], user_profile_model).is_valid
    result = validator.validate_static(user_profile_cases["Invalid - Teen trying premium plan"], user_profile_model)
    assert len(result.errors) == 2


def test_validate_static_reports_model_errors():
    """Test that a broken model is reported on the model field."""
    result = PerfectValidator().validate_static({"a": 1}, {"a": {"type": "X"}})
    assert result.errors == [FieldError("model", 'Invalid type "X" at a')]


def test_unknown_fields_follow_config():
    """Test the façade's unknown-field policy."""
    lenient = PerfectValidator(config=ValidatorConfig(allow_unknown_fields=True))
    assert lenient.validate_static({"a": "x", "b": 1}, {"a": "S"}).is_valid
    assert not PerfectValidator().validate_static({"a": "x", "b": 1}, {"a": "S"}).is_valid


@pytest.mark.asyncio
async def test_store_and_validate_dynamic(validator, user_profile_model, user_profile_cases):
    """Test validation against a stored model."""
    stored = await validator.store_model("profile", user_profile_model)
    assert stored.is_valid
    assert await validator.list_model_versions("profile") == [1]

    result = await validator.validate_dynamic(user_profile_cases["Valid adult premium user"], "profile")
    assert result.is_valid
    result = await validator.validate_dynamic(user_profile_cases["Invalid - Free plan with too many features"], "profile")
    assert result.errors == [FieldError("user.subscription.features", "FREE plan can only have up to 3 features")]


@pytest.mark.asyncio
async def test_store_increments_versions(validator):
    """Test automatic version numbering and that the latest version is picked up."""
    await validator.store_model("m", {"a": "S"})
    await validator.store_model("m", {"a": "N"})
    assert await validator.list_model_versions("m") == [2, 1]

    assert (await validator.validate_dynamic({"a": 1}, "m")).is_valid
    assert (await validator.validate_dynamic({"a": "x"}, "m", version=1)).is_valid
    assert await validator.get_latest_model_version("m") == {"a": "N"}
    assert await validator.get_model_version("m", 1) == {"a": "S"}


@pytest.mark.asyncio
async def test_store_refuses_invalid_models(validator):
    """Test that a structurally invalid model is not stored."""
    result = await validator.store_model("m", {"a": {"type": "X"}})
    assert result.to_dict() == {
        "isValid": False,
        "errors": ['Failed to store model: Model validation failed: Invalid type "X" at a'],
    }
    with pytest.raises(ModelNotFoundError):
        await validator.list_model_versions("m")


@pytest.mark.asyncio
async def test_store_refuses_existing_version(validator):
    """Test that an explicit version that already exists is refused."""
    await validator.store_model("m", {"a": "S"}, version=1)
    result = await validator.store_model("m", {"a": "N"}, version=1)
    assert not result.is_valid
    assert result.errors[0].startswith("Failed to store model: ")


@pytest.mark.asyncio
async def test_store_refuses_unserializable_functions(validator):
    """Test that a model with a closure is refused."""
    limit = 3
    result = await validator.store_model("m", {"a": {"type": "N", "validate": lambda a: a < limit}})
    assert not result.is_valid
    assert "Cannot serialize function at a.validate" in result.errors[0]


@pytest.mark.asyncio
async def test_validate_dynamic_missing_model(validator):
    """Test that a missing model is reported as a validation failure."""
    result = await validator.validate_dynamic({}, "nope")
    assert result.errors == [FieldError("model", "Failed to load model: Model nope not found")]
    result = await validator.validate_dynamic({}, "nope", version=2)
    assert result.errors == [FieldError("model", "Failed to load model: Model nope version 2 not found")]


@pytest.mark.asyncio
async def test_delete_model(validator):
    """Test that deleting a model drops it from storage and cache."""
    await validator.store_model("m", {"a": "S"})
    assert await validator.get_latest_model_version("m") == {"a": "S"}
    await validator.delete_model("m")
    with pytest.raises(ModelNotFoundError):
        await validator.get_latest_model_version("m")


@pytest.mark.asyncio
async def test_operations_require_storage():
    """Test that stored-model operations need a storage plugin."""
    with pytest.raises(ConfigurationError):
        await PerfectValidator().validate_dynamic({}, "m")
    with pytest.raises(ConfigurationError):
        await PerfectValidator().store_model("m", {"a": "S"})


def test_helpers():
    """Test the metadata and example helpers."""
    validator = PerfectValidator()
    types = validator.get_data_types()
    assert types["STRING"] == "S"
    assert types["REGEX"] == "REGEX"
    assert validator.get_validation_type_params("N").type == "Number"
    assert validator.get_model_example()
    assert len(validator.get_data_example()) == 4


def test_serialization_helpers(user_profile_model):
    """Test the façade's codec wrappers."""
    validator = PerfectValidator()
    text = validator.serialize_model(user_profile_model)
    assert validator.serialize_model(validator.deserialize_model(text)) == text


@pytest.mark.asyncio
async def test_store_model_with_compact_dependency(validator):
    """Test storing a model whose dependency functions share one line."""
    model = {
        "a": {"type": "N", "dependsOn": {"field": "b", "condition": lambda v: v is not None, "validate": lambda v: v > 0, "message": "m"}},
        "b": "N",
    }
    assert (await validator.store_model("m", model)).is_valid
    result = await validator.validate_dynamic({"a": -1, "b": 2}, "m")
    assert result.errors == [FieldError("a", "m")]
