# src/core/digest.py - v1
"""Environment digest: the seed every asset digest is derived from.

The seed mixes in the asset format version and the user-assigned version,
so bumping either changes every artifact digest. The seed object itself is
private; callers only ever receive clones to update.
"""

from __future__ import annotations

import hashlib
from typing import Protocol

from assetpipe.version import FORMAT_VERSION


class HashObject(Protocol):
    """The subset of hashlib's hash object API used by the builder."""

    def update(self, data: bytes, /) -> None: ...

    def hexdigest(self) -> str: ...

    def copy(self) -> HashObject: ...


class EnvironmentDigest:
    """Immutable seed digest for one environment configuration."""

    __slots__ = ("_algorithm", "_version", "_seed")

    def __init__(self, algorithm: str = "sha1", version: str = "") -> None:
        seed = hashlib.new(algorithm)
        seed.update(FORMAT_VERSION.encode("utf-8"))
        seed.update(str(version).encode("utf-8"))
        self._algorithm = algorithm
        self._version = version
        self._seed = seed

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def version(self) -> str:
        return self._version

    def digest(self) -> HashObject:
        """Return a fresh copy of the seed, safe to update()."""
        return self._seed.copy()

    def hexdigest(self) -> str:
        """Hex form of the seed, for comparing environments across processes."""
        return self._seed.hexdigest()

    def digest_bytes(self, data: bytes) -> str:
        """Hex digest of data derived from the seed."""
        digest = self.digest()
        digest.update(data)
        return digest.hexdigest()

    def __repr__(self) -> str:
        return f"EnvironmentDigest(algorithm={self._algorithm!r}, version={self._version!r})"
