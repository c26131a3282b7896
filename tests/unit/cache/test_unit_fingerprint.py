# tests/unit/cache/test_unit_fingerprint.py - v2
"""Tests for cache/fingerprint.py, cache/build_cache.py and the cache factory."""

from __future__ import annotations

import hashlib

import pytest

from assetpipe.cache.build_cache import BuildCache
from assetpipe.cache.cache_factory import create_cache_store
from assetpipe.cache.fingerprint import ContentFingerprinter, hash_entries, hash_file
from assetpipe.cache.memory_store import MemoryCacheStore
from assetpipe.cache.null_store import NullCacheStore
from assetpipe.config.settings import Settings
from assetpipe.core.models import StaticRecord
from assetpipe.paths.resolver import PathResolver


@pytest.fixture
def fingerprinter(asset_root) -> ContentFingerprinter:
    return ContentFingerprinter(PathResolver([str(asset_root)]), MemoryCacheStore())


class TestHashHelpers:
    def test_hash_file_matches_hashlib(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"hello world")
        assert hash_file(path) == hashlib.sha1(b"hello world").hexdigest()

    def test_hash_file_algorithm(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"x")
        assert hash_file(path, "sha256") == hashlib.sha256(b"x").hexdigest()

    def test_hash_entries_joins_with_commas(self):
        assert hash_entries(["a.js", "b.js"]) == hashlib.sha1(b"a.js,b.js").hexdigest()


class TestFingerprint:
    def test_file(self, fingerprinter, write_asset):
        path = write_asset("a.js", "A")
        assert fingerprinter.fingerprint(path) == hashlib.sha1(b"A").hexdigest()

    def test_missing_returns_none(self, fingerprinter, asset_root):
        assert fingerprinter.fingerprint(str(asset_root / "nope.js")) is None

    def test_directory_hashes_entry_names(self, fingerprinter, write_asset, asset_root):
        write_asset("lib/a.js", "A")
        write_asset("lib/b.js", "B")
        expected = hashlib.sha1(b"a.js,b.js").hexdigest()
        assert fingerprinter.fingerprint(str(asset_root / "lib")) == expected

    def test_directory_ignores_child_content(self, write_asset, asset_root):
        resolver = PathResolver([str(asset_root)])
        fp = ContentFingerprinter(resolver, NullCacheStore())
        child = write_asset("lib/a.js", "A")
        before = fp.fingerprint(str(asset_root / "lib"))
        with open(child, "w", encoding="utf-8") as fh:
            fh.write("changed")
        assert fp.fingerprint(str(asset_root / "lib")) == before

    def test_directory_changes_when_child_added(self, write_asset, asset_root):
        fp = ContentFingerprinter(PathResolver([str(asset_root)]), NullCacheStore())
        write_asset("lib/a.js", "A")
        before = fp.fingerprint(str(asset_root / "lib"))
        write_asset("lib/b.js", "B")
        assert fp.fingerprint(str(asset_root / "lib")) != before

    def test_memoized_by_path_and_mtime(self, write_asset):
        store = MemoryCacheStore()
        fp = ContentFingerprinter(PathResolver(), store)
        path = write_asset("a.js", "A", mtime=1_700_000_000)
        fp.fingerprint(path)
        assert store.get(f"hexdigest:{path}:1700000000") == hashlib.sha1(b"A").hexdigest()

    def test_same_second_rewrite_is_stale(self, write_asset):
        fp = ContentFingerprinter(PathResolver(), MemoryCacheStore())
        path = write_asset("a.js", "A", mtime=1_700_000_000)
        first = fp.fingerprint(path)
        write_asset("a.js", "B", mtime=1_700_000_000.5)
        assert fp.fingerprint(path) == first

    def test_new_mtime_recomputes(self, write_asset):
        fp = ContentFingerprinter(PathResolver(), MemoryCacheStore())
        path = write_asset("a.js", "A", mtime=1_700_000_000)
        first = fp.fingerprint(path)
        write_asset("a.js", "B", mtime=1_700_000_100)
        assert fp.fingerprint(path) != first


class TestCombinedFingerprint:
    def test_order_sensitive(self, fingerprinter, write_asset):
        a = write_asset("a.js", "A")
        b = write_asset("b.js", "B")
        assert fingerprinter.combined_fingerprint([a, b]) != (
            fingerprinter.combined_fingerprint([b, a])
        )

    def test_missing_path_contributes_empty(self, fingerprinter, write_asset, asset_root):
        a = write_asset("a.js", "A")
        missing = str(asset_root / "gone.js")
        assert fingerprinter.combined_fingerprint([a, missing]) == (
            fingerprinter.combined_fingerprint([a])
        )

    def test_empty_list(self, fingerprinter):
        assert fingerprinter.combined_fingerprint([]) == hashlib.sha1().hexdigest()

    def test_changes_with_content(self, write_asset):
        fp = ContentFingerprinter(PathResolver(), MemoryCacheStore())
        path = write_asset("a.js", "A", mtime=1_700_000_000)
        before = fp.combined_fingerprint([path])
        write_asset("a.js", "B", mtime=1_700_000_050)
        assert fp.combined_fingerprint([path]) != before


class TestBuildCache:
    def _record(self, record_id: str) -> StaticRecord:
        return StaticRecord(
            id=record_id,
            filename="/x/a.png",
            logical_path="a.png",
            content_type="image/png",
            length=1,
            digest="d",
            dependency_paths=("/x/a.png",),
            dependency_digest="dd",
            mtime=0,
        )

    def test_set_get(self):
        cache = BuildCache()
        record = self._record("1")
        assert cache.set("1", record) is record
        assert cache.get("1") is record
        assert "1" in cache
        assert len(cache) == 1

    def test_clear(self):
        cache = BuildCache()
        cache.set("1", self._record("1"))
        cache.clear()
        assert cache.get("1") is None
        assert len(cache) == 0


class TestCreateCacheStore:
    def test_default_memory(self):
        assert isinstance(create_cache_store(), MemoryCacheStore)

    def test_null_backend(self):
        s = Settings(_env_file=None, cache_backend="null")
        assert isinstance(create_cache_store(s), NullCacheStore)

    def test_memory_size_from_settings(self):
        s = Settings(_env_file=None, cache_max_size=1)
        store = create_cache_store(s)
        store.set("a", 1)
        store.set("b", 2)
        assert len(store) == 1

    def test_unsupported_backend(self):
        with pytest.raises(Exception):
            Settings(_env_file=None, cache_backend="redis")
