"""
Storage backend selection.

Builds the configured storage plugin for callers that pick a backend by
name (the CLI, applications configured from settings).
"""

import logging
from typing import Literal, Optional

from .base import ModelStoragePlugin
from .json_fs import JsonModelStorage
from .memory import InMemoryModelStorage
from .sqlite import SqliteModelStorage

logger = logging.getLogger(__name__)

StorageType = Literal["memory", "json", "sqlite"]


def create_storage(storage_type: StorageType = "json", storage_dir: Optional[str] = "data") -> ModelStoragePlugin:
    """
    Create an uninitialized storage plugin.

    Args:
        storage_type: Backend name ("memory", "json" or "sqlite")
        storage_dir: Directory for persistent backends

    Returns:
        The storage plugin; call ``initialize()`` before use

    Raises:
        ValueError: If an unsupported storage type is specified
    """
    if storage_type == "memory":
        storage: ModelStoragePlugin = InMemoryModelStorage()
    elif storage_type in ("json", "sqlite"):
        if not storage_dir:
            raise ValueError(f"A storage directory is required for {storage_type} storage")
        if storage_type == "json":
            storage = JsonModelStorage(storage_dir)
        else:
            storage = SqliteModelStorage(storage_dir)
    else:
        raise ValueError(f"Unsupported storage type: {storage_type}")

    logger.debug(f"Created {storage_type} model storage")
    return storage
