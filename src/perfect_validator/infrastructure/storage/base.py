"""
Base interface for model storage plugins.

A storage plugin keeps serialized models by name and integer version.
Versions are append-only: storing an existing version is a conflict and
the latest version is simply the highest number stored for a name.

All operations are asynchronous. Plugins must be initialized before use
and cleaned up when no longer needed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ...core.models import ModelVersion


class ModelStoragePlugin(ABC):
    """
    Abstract base class for model storage plugins.

    Lifecycle methods follow the usual plugin pattern (initialize, cleanup,
    backup, restore_from_backup); the remaining methods read and append
    model versions.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the storage for use (create tables, load files)."""

    @abstractmethod
    async def cleanup(self) -> None:
        """Release resources held by the storage."""

    @abstractmethod
    async def backup(self, backup_dir: str) -> None:
        """
        Copy the stored data to ``backup_dir``.

        Raises:
            StorageError: If backup creation fails
        """

    @abstractmethod
    async def restore_from_backup(self, backup_dir: str) -> None:
        """
        Replace the stored data with the copy in ``backup_dir``.

        Raises:
            StorageError: If backup restoration fails
        """

    @abstractmethod
    async def get_version(self, model_name: str, version: int) -> Optional[ModelVersion]:
        """Return one version of a model, or None if it is not stored."""

    @abstractmethod
    async def get_latest_version(self, model_name: str) -> Optional[ModelVersion]:
        """Return the highest stored version of a model, or None."""

    @abstractmethod
    async def put(self, model_name: str, serialized_model: str, version: int) -> ModelVersion:
        """
        Store a new version of a model.

        Args:
            model_name: Model name
            serialized_model: Text produced by ``serialize_model``
            version: Version number, 1 or greater

        Returns:
            The stored ModelVersion

        Raises:
            VersionConflictError: If the version is already stored
            StorageError: If the write fails
        """

    @abstractmethod
    async def list_versions(self, model_name: str) -> List[int]:
        """Return the stored version numbers of a model, highest first."""

    @abstractmethod
    async def delete_model(self, model_name: str) -> None:
        """
        Delete every version of a model.

        Raises:
            ModelNotFoundError: If no version of the model is stored
        """

    async def get(self, model_name: str, version: Optional[int] = None) -> Optional[str]:
        """
        Return the serialized text of a model version.

        Args:
            model_name: Model name
            version: Version number; the latest version when None

        Returns:
            Serialized model text, or None if nothing matches
        """
        if version is None:
            found = await self.get_latest_version(model_name)
        else:
            found = await self.get_version(model_name, version)
        return found.model if found else None

    async def next_version(self, model_name: str) -> int:
        """Return the version number the next ``put`` for a model should use."""
        latest = await self.get_latest_version(model_name)
        return latest.version + 1 if latest else 1
