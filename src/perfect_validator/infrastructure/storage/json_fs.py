"""
JSON filesystem model storage.

All versions of all models live in one JSON document inside the storage
directory. The document is loaded into memory on ``initialize`` and
rewritten after every change, keeping the previous file as ``.bak``.
"""

import logging
import os
from typing import Any, Dict

from ...core.exceptions import StorageError
from .constants import MODELS_FILE
from .memory import InMemoryModelStorage
from .persistence import (
    copy_file,
    load_json_file,
    save_json_file,
    version_from_record,
    version_to_record,
)

logger = logging.getLogger(__name__)


class JsonModelStorage(InMemoryModelStorage):
    """
    Model storage persisted as a JSON document.

    Attributes:
        storage_dir (str): Directory for persistent storage
        storage_file (str): Full path to the JSON document
    """

    def __init__(self, storage_dir: str, filename: str = MODELS_FILE):
        super().__init__()
        self.storage_dir = storage_dir
        self.storage_file = os.path.join(storage_dir, filename)

    async def initialize(self) -> None:
        """
        Create the storage directory and load existing versions.

        Raises:
            StorageError: If the storage file cannot be read
        """
        async with self._lock:
            os.makedirs(self.storage_dir, exist_ok=True)
            await self._load_from_storage()

    async def backup(self, backup_dir: str) -> None:
        """
        Copy the storage file into ``backup_dir``.

        Raises:
            StorageError: If backup creation fails
        """
        try:
            if os.path.exists(self.storage_file):
                os.makedirs(backup_dir, exist_ok=True)
                await copy_file(self.storage_file, os.path.join(backup_dir, os.path.basename(self.storage_file)))
        except Exception as e:
            logger.error(f"Failed to create backup: {str(e)}")
            raise StorageError(f"Backup creation failed: {str(e)}") from e

    async def restore_from_backup(self, backup_dir: str) -> None:
        """
        Replace the storage file with the copy in ``backup_dir`` and reload it.

        Raises:
            StorageError: If backup restoration fails
        """
        backup_path = os.path.join(backup_dir, os.path.basename(self.storage_file))
        async with self._lock:
            try:
                if not os.path.exists(backup_path):
                    raise FileNotFoundError(f"No backup found at {backup_path}")
                await copy_file(backup_path, self.storage_file)
            except Exception as e:
                logger.error(f"Failed to restore from backup: {str(e)}")
                raise StorageError(f"Backup restoration failed: {str(e)}") from e
            self._models.clear()
            await self._load_from_storage()

    async def _load_from_storage(self) -> None:
        try:
            document = await load_json_file(self.storage_file, default={"models": {}})
            self._models = {
                name: {int(record["version"]): version_from_record(record) for record in records}
                for name, records in document.get("models", {}).items()
            }
        except Exception as e:
            logger.error(f"Failed to load from storage: {str(e)}")
            raise StorageError(f"Storage loading failed: {str(e)}") from e

        count = sum(len(versions) for versions in self._models.values())
        logger.info(f"Loaded {count} model version(s) from {self.storage_file}")

    async def _persist(self) -> None:
        document: Dict[str, Any] = {
            "models": {
                name: [version_to_record(versions[number]) for number in sorted(versions)]
                for name, versions in self._models.items()
            }
        }
        try:
            await save_json_file(self.storage_file, document)
        except Exception as e:
            logger.error(f"Failed to persist models: {str(e)}")
            raise StorageError(f"Model persistence failed: {str(e)}") from e
        logger.debug(f"Persisted {len(document['models'])} model(s) to {self.storage_file}")
