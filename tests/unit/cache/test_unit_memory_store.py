# tests/unit/cache/test_unit_memory_store.py - v1
"""Tests for cache/memory_store.py and cache/null_store.py."""

from __future__ import annotations

import threading

import pytest

from assetpipe.cache.memory_store import MemoryCacheStore
from assetpipe.cache.null_store import NullCacheStore


class TestMemoryCacheStore:
    def test_set_returns_value(self):
        store = MemoryCacheStore()
        assert store.set("k", "v") == "v"
        assert store.get("k") == "v"

    def test_miss_returns_none(self):
        assert MemoryCacheStore().get("missing") is None

    def test_set_none_deletes(self):
        store = MemoryCacheStore()
        store.set("k", "v")
        assert store.set("k", None) is None
        assert store.get("k") is None
        assert len(store) == 0

    def test_lru_eviction(self):
        store = MemoryCacheStore(max_size=2)
        store.set("a", 1)
        store.set("b", 2)
        store.get("a")  # a is now most recent
        store.set("c", 3)
        assert store.get("b") is None
        assert store.get("a") == 1
        assert store.get("c") == 3

    def test_zero_size_stores_nothing(self):
        store = MemoryCacheStore(max_size=0)
        assert store.set("k", "v") == "v"
        assert store.get("k") is None

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError, match="max_size"):
            MemoryCacheStore(max_size=-1)

    def test_clear(self):
        store = MemoryCacheStore()
        store.set("a", 1)
        store.set("b", 2)
        store.clear()
        assert len(store) == 0

    def test_concurrent_writes(self):
        store = MemoryCacheStore(max_size=50)

        def worker(n: int) -> None:
            for i in range(200):
                store.set(f"{n}:{i}", i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 50


class TestFetch:
    def test_computes_on_miss_only(self):
        store = MemoryCacheStore()
        calls: list[int] = []

        def compute() -> str:
            calls.append(1)
            return "computed"

        assert store.fetch("k", compute) == "computed"
        assert store.fetch("k", compute) == "computed"
        assert len(calls) == 1

    def test_none_result_not_cached(self):
        store = MemoryCacheStore()
        calls: list[int] = []

        def compute() -> None:
            calls.append(1)
            return None

        assert store.fetch("k", compute) is None
        assert store.fetch("k", compute) is None
        assert len(calls) == 2


class TestNullCacheStore:
    def test_never_stores(self):
        store = NullCacheStore()
        assert store.set("k", "v") == "v"
        assert store.get("k") is None

    def test_fetch_always_computes(self):
        store = NullCacheStore()
        calls: list[int] = []

        def compute() -> str:
            calls.append(1)
            return "x"

        store.fetch("k", compute)
        store.fetch("k", compute)
        assert len(calls) == 2

    def test_clear_is_noop(self):
        NullCacheStore().clear()
