"""Infrastructure: model cache and storage plugins."""

from .cache import LRUCache, model_cache_key
from .storage import (
    InMemoryModelStorage,
    JsonModelStorage,
    ModelStoragePlugin,
    SqliteModelStorage,
    create_storage,
)

__all__ = [
    "LRUCache",
    "model_cache_key",
    "ModelStoragePlugin",
    "InMemoryModelStorage",
    "JsonModelStorage",
    "SqliteModelStorage",
    "create_storage",
]
