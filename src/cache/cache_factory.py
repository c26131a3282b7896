# src/cache/cache_factory.py - v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from assetpipe.cache.base_cache_store import BaseCacheStore
from assetpipe.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from assetpipe.cache.memory_store import DEFAULT_MAX_SIZE, MemoryCacheStore

        max_size = DEFAULT_MAX_SIZE if settings is None else settings.cache_max_size
        return MemoryCacheStore(max_size=max_size)

    if backend == "null":
        from assetpipe.cache.null_store import NullCacheStore

        return NullCacheStore()

    raise ValueError(f"Unsupported cache backend: {backend!r}")
