# src/cache/null_store.py - v1
"""Cache store that never retains anything (CACHE_BACKEND=null)."""

from __future__ import annotations

from typing import Any

from assetpipe.cache.base_cache_store import BaseCacheStore


class NullCacheStore(BaseCacheStore):
    """Every get misses; fetch always recomputes."""

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any | None) -> Any | None:
        return value

    def clear(self) -> None:
        return None
