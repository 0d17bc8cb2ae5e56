"""
Model cache.

Thread-safe LRU cache with TTL expiry used by the façade to keep
deserialized models in memory. Entries are keyed ``name@version`` (or
``name@latest``) so that every version of a model can be dropped at once
when a new version is stored.
"""

from collections import OrderedDict
from threading import Lock
from time import monotonic
from typing import Dict, Generic, Optional, TypeVar

from ..core.constants import DEFAULT_CACHE_SIZE, DEFAULT_CACHE_TTL

T = TypeVar("T")

LATEST = "latest"


def model_cache_key(model_name: str, version: Optional[int] = None) -> str:
    """Build the cache key of a model version (``None`` addresses the latest)."""
    return f"{model_name}@{LATEST if version is None else version}"


class LRUCache(Generic[T]):
    """
    Thread-safe LRU cache with TTL support.

    The least recently used entry is evicted once ``max_size`` is reached,
    and entries expire ``ttl`` seconds after they were stored.

    Attributes:
        max_size: Maximum number of entries to store
        ttl: Time-to-live in seconds
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE, ttl: float = DEFAULT_CACHE_TTL):
        self._cache: "OrderedDict[str, T]" = OrderedDict()
        self._expiry: Dict[str, float] = {}
        self._lock = Lock()
        self.max_size = max_size
        self.ttl = ttl

        # Metrics
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[T]:
        """
        Get value from cache.

        Args:
            key: Cache key to look up

        Returns:
            Cached value if found and not expired, None otherwise
        """
        with self._lock:
            if key in self._cache and monotonic() < self._expiry[key]:
                self._hits += 1
                self._cache.move_to_end(key)
                return self._cache[key]

            self._misses += 1
            if key in self._cache:
                self._drop(key)
            return None

    def put(self, key: str, value: T) -> None:
        """
        Store value in cache.

        Args:
            key: Cache key to store value under
            value: Value to cache
        """
        with self._lock:
            self._cache[key] = value
            self._cache.move_to_end(key)
            self._expiry[key] = monotonic() + self.ttl

            while len(self._cache) > self.max_size:
                self._drop(next(iter(self._cache)))

    def remove(self, key: str) -> None:
        """Remove an entry if present."""
        with self._lock:
            if key in self._cache:
                self._drop(key)

    def remove_prefix(self, prefix: str) -> int:
        """
        Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed
        """
        with self._lock:
            keys = [key for key in self._cache if key.startswith(prefix)]
            for key in keys:
                self._drop(key)
            return len(keys)

    def clear(self) -> None:
        """Clear all entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._expiry.clear()
            self._hits = 0
            self._misses = 0

    def get_metrics(self) -> Dict[str, float]:
        """
        Get cache performance metrics.

        Returns:
            Dictionary containing hits, misses, size and hit_rate
        """
        with self._lock:
            total = self._hits + self._misses
            return {
                "hits": float(self._hits),
                "misses": float(self._misses),
                "size": float(len(self._cache)),
                "hit_rate": float(self._hits) / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _drop(self, key: str) -> None:
        # Caller holds the lock
        del self._cache[key]
        del self._expiry[key]
