# src/cache/build_cache.py - v1
"""Process-wide memo of completed build records.

Keyed by the record's random id rather than its filename or digest, so two
builds of identical content occupy different slots. Repeat-resolution
stability comes from the identity memo layered on top (CachedEnvironment),
not from this cache. Entries are only ever dropped all at once.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetpipe.core.models import BuildRecord


class BuildCache:
    """Thread-safe id -> BuildRecord mapping."""

    def __init__(self) -> None:
        self._records: dict[str, BuildRecord] = {}
        self._lock = threading.Lock()

    def get(self, record_id: str) -> BuildRecord | None:
        with self._lock:
            return self._records.get(record_id)

    def set(self, record_id: str, record: BuildRecord) -> BuildRecord:
        with self._lock:
            self._records[record_id] = record
        return record

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records
