# src/core/cycle_guard.py - v1
"""Per-build detection of bundles that transitively require themselves.

A CycleGuard belongs to exactly one top-level build call and is passed down
its recursion explicitly. Independent builds, sequential or on other
threads, each start with a fresh guard and never observe each other.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from assetpipe.core.errors import CircularDependencyError

logger = logging.getLogger(__name__)


class CycleGuard:
    """Set of filenames whose bundled build is in progress on this call stack."""

    def __init__(self) -> None:
        self._active: set[str] = set()

    @contextmanager
    def guard(self, path: str) -> Iterator[None]:
        """Mark path as in progress for the duration of the block.

        Raises:
            CircularDependencyError: If path is already in progress.
        """
        if path in self._active:
            logger.warning("Circular dependency detected at %s", path)
            raise CircularDependencyError(path)
        self._active.add(path)
        try:
            yield
        finally:
            self._active.discard(path)

    def __contains__(self, path: object) -> bool:
        return path in self._active

    def __len__(self) -> int:
        return len(self._active)
