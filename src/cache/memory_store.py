# src/cache/memory_store.py - v1
"""In-process LRU cache store (default CACHE_BACKEND=memory).

Bounded by max_size entries; least recently used keys are evicted first.
A max_size of 0 stores nothing and behaves like the null store.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any

from assetpipe.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000


class MemoryCacheStore(BaseCacheStore):
    """Thread-safe bounded in-memory cache store."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 0:
            raise ValueError("max_size must be >= 0")
        self._max_size = max_size
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def set(self, key: str, value: Any | None) -> Any | None:
        with self._lock:
            if value is None:
                self._entries.pop(key, None)
                return None
            if self._max_size == 0:
                return value
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache key %s", evicted)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
