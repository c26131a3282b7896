# src/cache/base_cache_store.py - v2
"""Abstract key-value cache store interface.

The build core only relies on get/set/fetch. Stores are free to drop
entries at any time; nothing assumes persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value for key, or None on miss."""

    @abstractmethod
    def set(self, key: str, value: Any | None) -> Any | None:
        """Store value under key and return it. Setting None deletes the key."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""

    def fetch(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on miss.

        The compute callable runs outside any store lock, so two threads
        may compute the same key concurrently; the last write wins.
        """
        value = self.get(key)
        if value is None:
            value = compute()
            self.set(key, value)
        return value
