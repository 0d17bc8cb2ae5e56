"""
Persistence helpers shared by the storage plugins.

- JSON documents on the filesystem, written through ``aiofiles`` with a
  ``.bak`` copy of the previous file
- SQLite tables and file-level backup through ``aiosqlite`` and ``sqlite3``
- Conversion of ``ModelVersion`` to and from storable records
"""

import json
import logging
import os
import shutil
import sqlite3
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import aiofiles
import aiosqlite

from ...core.exceptions import StorageError
from ...core.models import ModelVersion

logger = logging.getLogger(__name__)


def backup_file(file_path: str) -> None:
    """
    Copy a file to ``<file_path>.bak`` if it exists.

    Raises:
        OSError: If the copy fails
    """
    if not os.path.exists(file_path):
        return
    shutil.copy2(file_path, f"{file_path}.bak")


async def load_json_file(file_path: str, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Load a JSON document asynchronously.

    Args:
        file_path: Path to the JSON file
        default: Value returned when the file does not exist or is empty

    Returns:
        Decoded document

    Raises:
        FileNotFoundError: If the file does not exist and no default is given
        json.JSONDecodeError: If the file is not valid JSON
    """
    if not os.path.exists(file_path):
        if default is not None:
            return default
        raise FileNotFoundError(f"File not found: {file_path}")

    async with aiofiles.open(file_path, "r") as f:
        content = await f.read()
    if not content.strip():
        return default if default is not None else {}
    return json.loads(content)


async def save_json_file(file_path: str, data: Dict[str, Any], create_backup: bool = True) -> None:
    """
    Write a JSON document asynchronously.

    Args:
        file_path: Destination path
        data: Document to write
        create_backup: Keep a ``.bak`` copy of the file being replaced

    Raises:
        OSError: If writing fails
        TypeError: If the data is not JSON serializable
    """
    if create_backup:
        backup_file(file_path)

    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    content = json.dumps(data, indent=2)
    async with aiofiles.open(file_path, "w") as f:
        await f.write(content)


async def copy_file(source_path: str, target_path: str) -> None:
    """Copy a text file asynchronously."""
    async with aiofiles.open(source_path, "r") as src, aiofiles.open(target_path, "w") as dst:
        await dst.write(await src.read())


async def initialize_table(db_path: str, schema: str) -> None:
    """
    Create the model version table if the database does not have it yet.

    Args:
        db_path: Path to the SQLite database file
        schema: ``CREATE TABLE IF NOT EXISTS`` statement

    Raises:
        StorageError: If the database cannot be opened or the statement fails
    """
    try:
        async with aiosqlite.connect(db_path) as db:
            await db.execute(schema)
            await db.commit()
    except Exception as e:
        logger.error(f"Failed to create model table in {db_path}: {str(e)}")
        raise StorageError(f"Failed to initialize model table: {str(e)}") from e


def _copy_database(source_path: str, target_path: str) -> None:
    with sqlite3.connect(source_path) as src, sqlite3.connect(target_path) as dst:
        src.backup(dst)


def backup_database(db_path: str, backup_dir: str) -> None:
    """
    Copy the model database into ``backup_dir`` under the same file name.

    The copy goes through SQLite's online backup API, so versions being
    written concurrently never leave a torn file behind.

    Raises:
        StorageError: If the copy fails
    """
    target = os.path.join(backup_dir, os.path.basename(db_path))
    try:
        _copy_database(db_path, target)
    except Exception as e:
        logger.error(f"Failed to back up model database to {target}: {str(e)}")
        raise StorageError(f"Failed to backup database: {str(e)}") from e


def restore_database(backup_dir: str, db_path: str) -> None:
    """
    Overwrite the model database with the copy kept in ``backup_dir``.

    Nothing happens when the directory holds no copy of the database.

    Raises:
        StorageError: If the copy fails
    """
    source = os.path.join(backup_dir, os.path.basename(db_path))
    if not os.path.exists(source):
        logger.warning(f"No model database backup found at {source}")
        return
    try:
        _copy_database(source, db_path)
    except Exception as e:
        logger.error(f"Failed to restore model database from {source}: {str(e)}")
        raise StorageError(f"Failed to restore database: {str(e)}") from e


def version_to_record(model_version: ModelVersion) -> Dict[str, Any]:
    """Convert a ModelVersion to a JSON-safe record."""
    return {
        "name": model_version.name,
        "version": model_version.version,
        "model": model_version.model,
        "created_at": model_version.created_at.isoformat(),
    }


def version_from_record(record: Dict[str, Any]) -> ModelVersion:
    """Build a ModelVersion from a stored record."""
    return ModelVersion(
        name=record["name"],
        version=int(record["version"]),
        model=record["model"],
        created_at=datetime.fromisoformat(record["created_at"]),
    )


def version_from_row(row: Sequence[Any]) -> ModelVersion:
    """Build a ModelVersion from a ``(name, version, model, created_at)`` row."""
    name, version, model, created_at = tuple(row)
    return version_from_record({"name": name, "version": version, "model": model, "created_at": created_at})
