"""
Validation façade.

``PerfectValidator`` ties the pieces together for applications: structural
validation of models, static validation against an in-memory model, storage
of serialized model versions and dynamic validation against a stored model.
Instances are constructed by the caller; there is no process-wide instance.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .core.constants import MODEL_FIELD
from .core.engine import DataValidator
from .core.enums import ValidationType
from .core.examples import get_data_example, get_model_example
from .core.exceptions import ConfigurationError, ModelNotFoundError, PerfectValidatorError
from .core.models import FieldError, ModelValidationResult, ValidationResult, ValidatorConfig
from .core.structure import validate_model
from .core.type_params import TypeParams, get_type_params
from .infrastructure.cache import LRUCache, model_cache_key
from .infrastructure.storage.base import ModelStoragePlugin
from .serialization.codec import deserialize_model, serialize_model

logger = logging.getLogger(__name__)


class PerfectValidator:
    """
    Entry point for model management and data validation.

    Attributes:
        storage (Optional[ModelStoragePlugin]): Storage for model versions;
            required by the dynamic and storage operations only
        config (ValidatorConfig): Validation and cache settings
    """

    def __init__(self, storage: Optional[ModelStoragePlugin] = None, config: Optional[ValidatorConfig] = None):
        self.storage = storage
        self.config = config or ValidatorConfig()
        self._engine = DataValidator(self.config)
        self._cache: LRUCache[Dict[str, Any]] = LRUCache(self.config.cache_size, self.config.cache_ttl)

    def validate_model(self, model: Any) -> ModelValidationResult:
        """Structurally validate a model."""
        return validate_model(model, max_depth=self.config.max_depth)

    def validate_static(self, data: Any, model: Mapping[str, Any]) -> ValidationResult:
        """
        Validate data against a model held in memory.

        The model is structurally validated first; structural problems are
        reported as errors on the ``model`` field and the data is not looked at.

        Args:
            data: Document to validate
            model: Validation model

        Returns:
            ValidationResult
        """
        structure = self.validate_model(model)
        if not structure.is_valid:
            return ValidationResult.failure([FieldError(MODEL_FIELD, error) for error in structure.errors])
        return self._engine.validate(data, model)

    async def validate_dynamic(self, data: Any, model_name: str, version: Optional[int] = None) -> ValidationResult:
        """
        Validate data against a stored model.

        Args:
            data: Document to validate
            model_name: Name of the stored model
            version: Version to use; the latest when None

        Returns:
            ValidationResult; a model that cannot be loaded is reported as a
            single ``model`` error starting with "Failed to load model: "

        Raises:
            ConfigurationError: If no storage was configured
        """
        self._require_storage()
        try:
            model = await self._load_model(model_name, version)
        except PerfectValidatorError as e:
            logger.warning(f"Failed to load model {model_name}: {e}")
            return ValidationResult.failure([FieldError(MODEL_FIELD, f"Failed to load model: {e}")])
        return self._engine.validate(data, model)

    async def store_model(
        self, model_name: str, model: Mapping[str, Any], version: Optional[int] = None
    ) -> ModelValidationResult:
        """
        Validate, serialize and store a new model version.

        Args:
            model_name: Name to store the model under
            model: Validation model
            version: Version number; one past the latest stored version when None

        Returns:
            ModelValidationResult; failures carry a single message starting
            with "Failed to store model: "

        Raises:
            ConfigurationError: If no storage was configured
        """
        storage = self._require_storage()
        try:
            structure = self.validate_model(model)
            if not structure.is_valid:
                raise PerfectValidatorError(f"Model validation failed: {', '.join(structure.errors)}")

            serialized = serialize_model(model)
            deserialize_model(serialized, max_depth=self.config.max_depth)

            if version is None:
                version = await storage.next_version(model_name)
            await storage.put(model_name, serialized, version)
        except PerfectValidatorError as e:
            logger.warning(f"Failed to store model {model_name}: {e}")
            return ModelValidationResult.from_errors([f"Failed to store model: {e}"])

        self._cache.remove(model_cache_key(model_name))
        logger.info(f"Stored model {model_name} version {version}")
        return ModelValidationResult(is_valid=True)

    async def get_model_version(self, model_name: str, version: int) -> Dict[str, Any]:
        """
        Load one stored version of a model.

        Raises:
            ModelNotFoundError: If the version is not stored
            DeserializationError: If the stored text cannot be rebuilt
        """
        self._require_storage()
        return await self._load_model(model_name, version)

    async def get_latest_model_version(self, model_name: str) -> Dict[str, Any]:
        """
        Load the latest stored version of a model.

        Raises:
            ModelNotFoundError: If no version of the model is stored
            DeserializationError: If the stored text cannot be rebuilt
        """
        self._require_storage()
        return await self._load_model(model_name)

    async def list_model_versions(self, model_name: str) -> List[int]:
        """
        List the stored versions of a model, highest first.

        Raises:
            ModelNotFoundError: If no version of the model is stored
        """
        versions = await self._require_storage().list_versions(model_name)
        if not versions:
            raise ModelNotFoundError(f"Model {model_name} not found")
        return versions

    async def delete_model(self, model_name: str) -> None:
        """
        Delete every stored version of a model.

        Raises:
            ModelNotFoundError: If no version of the model is stored
        """
        await self._require_storage().delete_model(model_name)
        self._cache.remove_prefix(f"{model_name}@")
        logger.info(f"Deleted model {model_name}")

    def serialize_model(self, model: Mapping[str, Any]) -> str:
        return serialize_model(model)

    def deserialize_model(self, text: Any) -> Dict[str, Any]:
        return deserialize_model(text, max_depth=self.config.max_depth)

    def get_data_types(self) -> Dict[str, str]:
        """Return the supported type tags keyed by name (``{"STRING": "S", ...}``)."""
        return {member.name: member.value for member in ValidationType}

    def get_validation_type_params(self, tag: str) -> TypeParams:
        """
        Return the rule keys understood by a type tag.

        Raises:
            ValueError: If the tag is unknown
        """
        return get_type_params(tag)

    def get_model_example(self) -> Dict[str, Any]:
        return get_model_example()

    def get_data_example(self) -> List[Dict[str, Any]]:
        return get_data_example()

    def clear_cache(self) -> None:
        """Drop every cached model."""
        self._cache.clear()

    async def _load_model(self, model_name: str, version: Optional[int] = None) -> Dict[str, Any]:
        key = model_cache_key(model_name, version)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        storage = self._require_storage()
        if version is None:
            found = await storage.get_latest_version(model_name)
            if found is None:
                raise ModelNotFoundError(f"Model {model_name} not found")
        else:
            found = await storage.get_version(model_name, version)
            if found is None:
                raise ModelNotFoundError(f"Model {model_name} version {version} not found")

        model = deserialize_model(found.model, max_depth=self.config.max_depth)
        self._cache.put(key, model)
        self._cache.put(model_cache_key(model_name, found.version), model)
        logger.debug(f"Loaded model {model_name} version {found.version}")
        return model

    def _require_storage(self) -> ModelStoragePlugin:
        if self.storage is None:
            raise ConfigurationError("Storage is required for stored model operations")
        return self.storage
