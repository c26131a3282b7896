# src/cache/fingerprint.py - v3
"""Content fingerprints for files, directories and dependency sets.

A file fingerprint hashes its raw bytes. A directory fingerprint hashes the
comma-joined list of its immediate entry names only, so it changes when a
child is added, removed or renamed, but not when a child's content changes.

Fingerprints are memoized in the cache store under the path's mtime
truncated to the second. A file rewritten twice within the same second, or
whose mtime was reset, can therefore report a stale fingerprint. This is an
accepted tradeoff: stat is cheap, hashing is not.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from assetpipe.cache.base_cache_store import BaseCacheStore
    from assetpipe.paths.resolver import PathResolver

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def hash_file(path: str | Path, algorithm: str = "sha1") -> str:
    """Hex digest of a file's raw bytes, read in chunks."""
    digest = hashlib.new(algorithm)
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def hash_entries(names: Iterable[str], algorithm: str = "sha1") -> str:
    """Hex digest of a directory listing."""
    return hashlib.new(algorithm, ",".join(names).encode("utf-8")).hexdigest()


class ContentFingerprinter:
    """Memoized file/directory fingerprints backed by a cache store."""

    def __init__(
        self,
        resolver: PathResolver,
        store: BaseCacheStore,
        algorithm: str = "sha1",
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._algorithm = algorithm

    def fingerprint(self, path: str) -> str | None:
        """Return the fingerprint of path, or None if it does not exist."""
        stat = self._resolver.stat(path)
        if stat is None:
            return None

        key = f"hexdigest:{path}:{int(stat.mtime)}"

        def compute() -> str | None:
            if stat.is_directory:
                return hash_entries(self._resolver.entries(path), self._algorithm)
            if stat.is_file:
                return hash_file(path, self._algorithm)
            return None

        return self._store.fetch(key, compute)

    def combined_fingerprint(self, paths: Iterable[str]) -> str:
        """Order-sensitive digest over the fingerprints of several paths.

        Missing paths contribute an empty string, so a dependency that
        disappears still changes the result.
        """
        digest = hashlib.new(self._algorithm)
        for path in paths:
            digest.update((self.fingerprint(path) or "").encode("ascii"))
        return digest.hexdigest()
