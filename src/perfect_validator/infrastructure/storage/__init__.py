"""
Model storage plugins.

This package provides the storage interface and its implementations:
- ModelStoragePlugin: abstract async interface
- InMemoryModelStorage: dictionary backed, for tests and short-lived use
- JsonModelStorage: one JSON document per storage directory
- SqliteModelStorage: ``model_versions`` table in a SQLite database
"""

from .base import ModelStoragePlugin
from .json_fs import JsonModelStorage
from .memory import InMemoryModelStorage
from .service import StorageType, create_storage
from .sqlite import SqliteModelStorage

__all__ = [
    "ModelStoragePlugin",
    "InMemoryModelStorage",
    "JsonModelStorage",
    "SqliteModelStorage",
    "StorageType",
    "create_storage",
]
