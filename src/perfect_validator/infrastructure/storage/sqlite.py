"""
SQLite model storage.

Versions are rows of the ``model_versions`` table; the ``(name, version)``
primary key enforces that a version is stored at most once.
"""

import asyncio
import logging
import os
import sqlite3
from typing import List, Optional

import aiosqlite

from ...core.exceptions import ModelNotFoundError, StorageError, VersionConflictError
from ...core.models import ModelVersion
from .base import ModelStoragePlugin
from .constants import (
    DELETE_MODEL,
    INSERT_VERSION,
    MODEL_VERSIONS_SCHEMA,
    SELECT_LATEST_VERSION,
    SELECT_VERSION,
    SELECT_VERSION_NUMBERS,
    STORAGEDB,
)
from .persistence import backup_database, initialize_table, restore_database, version_from_row

logger = logging.getLogger(__name__)


class SqliteModelStorage(ModelStoragePlugin):
    """
    Model storage backed by a SQLite database.

    Attributes:
        storage_dir (str): Directory holding the database file
        db_path (str): Full path to the database file
    """

    def __init__(self, storage_dir: str, filename: str = STORAGEDB):
        self.storage_dir = storage_dir
        self.db_path = os.path.join(storage_dir, filename)
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        os.makedirs(self.storage_dir, exist_ok=True)
        await initialize_table(self.db_path, MODEL_VERSIONS_SCHEMA)
        logger.info(f"Initialized model storage at {self.db_path}")

    async def cleanup(self) -> None:
        # Connections are opened per operation
        pass

    async def backup(self, backup_dir: str) -> None:
        os.makedirs(backup_dir, exist_ok=True)
        backup_database(self.db_path, backup_dir)

    async def restore_from_backup(self, backup_dir: str) -> None:
        async with self._lock:
            restore_database(backup_dir, self.db_path)

    async def get_version(self, model_name: str, version: int) -> Optional[ModelVersion]:
        return await self._fetch_one(SELECT_VERSION, (model_name, version))

    async def get_latest_version(self, model_name: str) -> Optional[ModelVersion]:
        return await self._fetch_one(SELECT_LATEST_VERSION, (model_name,))

    async def put(self, model_name: str, serialized_model: str, version: int) -> ModelVersion:
        try:
            model_version = ModelVersion(name=model_name, version=version, model=serialized_model)
        except ValueError as e:
            raise StorageError(f"Invalid model version: {str(e)}") from e

        async with self._lock:
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await db.execute(
                        INSERT_VERSION,
                        (model_name, version, serialized_model, model_version.created_at.isoformat()),
                    )
                    await db.commit()
            except sqlite3.IntegrityError as e:
                raise VersionConflictError(f"Version {version} of model {model_name} already exists") from e
            except Exception as e:
                logger.error(f"Failed to store model {model_name}: {str(e)}")
                raise StorageError(f"Failed to store model: {str(e)}") from e

        logger.debug(f"Stored version {version} of model {model_name}")
        return model_version

    async def list_versions(self, model_name: str) -> List[int]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                async with db.execute(SELECT_VERSION_NUMBERS, (model_name,)) as cursor:
                    rows = await cursor.fetchall()
        except Exception as e:
            logger.error(f"Failed to list versions of {model_name}: {str(e)}")
            raise StorageError(f"Failed to list versions: {str(e)}") from e
        return [row[0] for row in rows]

    async def delete_model(self, model_name: str) -> None:
        async with self._lock:
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    cursor = await db.execute(DELETE_MODEL, (model_name,))
                    deleted = cursor.rowcount
                    await db.commit()
            except Exception as e:
                logger.error(f"Failed to delete model {model_name}: {str(e)}")
                raise StorageError(f"Failed to delete model: {str(e)}") from e

        if deleted == 0:
            raise ModelNotFoundError(f"Model {model_name} not found")
        logger.debug(f"Deleted {deleted} version(s) of model {model_name}")

    async def _fetch_one(self, query: str, params: tuple) -> Optional[ModelVersion]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                async with db.execute(query, params) as cursor:
                    row = await cursor.fetchone()
        except Exception as e:
            logger.error(f"Failed to read model versions: {str(e)}")
            raise StorageError(f"Failed to read model versions: {str(e)}") from e
        return version_from_row(row) if row else None
