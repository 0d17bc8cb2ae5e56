"""In-memory model storage."""

import asyncio
import logging
from typing import Dict, List, Optional

from ...core.exceptions import ModelNotFoundError, StorageError, VersionConflictError
from ...core.models import ModelVersion
from .base import ModelStoragePlugin

logger = logging.getLogger(__name__)


class InMemoryModelStorage(ModelStoragePlugin):
    """
    Model storage kept in a dictionary.

    Useful for tests and short-lived processes. Also serves as the index for
    the JSON filesystem storage, which persists the same structure.

    Attributes:
        _models (Dict[str, Dict[int, ModelVersion]]): Versions by model name
        _lock (asyncio.Lock): Serializes writes
    """

    def __init__(self):
        self._models: Dict[str, Dict[int, ModelVersion]] = {}
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        pass

    async def cleanup(self) -> None:
        pass

    async def backup(self, backup_dir: str) -> None:
        raise StorageError("In-memory storage does not support backups")

    async def restore_from_backup(self, backup_dir: str) -> None:
        raise StorageError("In-memory storage does not support backups")

    async def get_version(self, model_name: str, version: int) -> Optional[ModelVersion]:
        return self._models.get(model_name, {}).get(version)

    async def get_latest_version(self, model_name: str) -> Optional[ModelVersion]:
        versions = self._models.get(model_name)
        if not versions:
            return None
        return versions[max(versions)]

    async def put(self, model_name: str, serialized_model: str, version: int) -> ModelVersion:
        async with self._lock:
            try:
                model_version = ModelVersion(name=model_name, version=version, model=serialized_model)
            except ValueError as e:
                raise StorageError(f"Invalid model version: {str(e)}") from e

            versions = self._models.setdefault(model_name, {})
            if version in versions:
                raise VersionConflictError(f"Version {version} of model {model_name} already exists")
            versions[version] = model_version
            try:
                await self._persist()
            except Exception:
                del versions[version]
                raise
            logger.debug(f"Stored version {version} of model {model_name}")
            return model_version

    async def list_versions(self, model_name: str) -> List[int]:
        return sorted(self._models.get(model_name, {}), reverse=True)

    async def delete_model(self, model_name: str) -> None:
        async with self._lock:
            if model_name not in self._models:
                raise ModelNotFoundError(f"Model {model_name} not found")
            removed = self._models.pop(model_name)
            try:
                await self._persist()
            except Exception:
                self._models[model_name] = removed
                raise
            logger.debug(f"Deleted {len(removed)} version(s) of model {model_name}")

    async def _persist(self) -> None:
        """Write the current state to durable storage (no-op in memory)."""
