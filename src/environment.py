# src/environment.py - v2
"""Environment: configuration, collaborators and caches for asset builds.

Configuration and cache state form one unit guarded by a single lock. Every
configuration change (search paths, version, digest algorithm, registered
types and processors, cache store) expires the whole cache: built records
are dropped, the fingerprint store is cleared and a new digest seed and
builder are created. Builds themselves run outside the lock against the
builder snapshot taken when they started.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import networkx as nx

from assetpipe.cache.build_cache import BuildCache
from assetpipe.cache.cache_factory import create_cache_store
from assetpipe.cache.fingerprint import ContentFingerprinter
from assetpipe.config.processors import default_registry
from assetpipe.config.settings import Settings, load_settings
from assetpipe.core.builder import AssetHashBuilder
from assetpipe.core.digest import EnvironmentDigest
from assetpipe.core.graph import dependency_graph
from assetpipe.core.models import (
    BuildRecord,
    BundledRecord,
    FileStat,
    ProcessedRecord,
    StaticRecord,
)
from assetpipe.logging.context import root_context
from assetpipe.paths.resolver import PathResolver
from assetpipe.pipeline.runner import ProcessorPipeline

if TYPE_CHECKING:
    from assetpipe.cache.base_cache_store import BaseCacheStore
    from assetpipe.pipeline.plugin_kit.base_processor import ProcessorLike
    from assetpipe.pipeline.registry import ProcessorRegistry

logger = logging.getLogger(__name__)


class Environment:
    """Entry point for resolving and building assets.

    Example:
        env = Environment(paths=["app/assets/javascripts"])
        record = env.find_asset("application.js")
        record.digest_path   # "application-<digest>.js"
    """

    def __init__(
        self,
        settings: Settings | None = None,
        paths: list[str] | None = None,
        registry: ProcessorRegistry | None = None,
        cache_store: BaseCacheStore | None = None,
    ) -> None:
        self._settings = settings if settings is not None else load_settings()
        self._lock = threading.RLock()
        self._registry = registry if registry is not None else default_registry()
        self._resolver = PathResolver(
            paths if paths is not None else self._settings.asset_paths_list,
            extensions=self._registry.engine_extensions,
        )
        self._cache_store = (
            cache_store if cache_store is not None else create_cache_store(self._settings)
        )
        self._version = self._settings.asset_version
        self._digest_algorithm = self._settings.digest_algorithm
        self._build_cache = BuildCache()
        self._pipeline = ProcessorPipeline(self)
        self._generation = 0
        self._rebuild_state()

    # --- Read-only state ---

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def paths(self) -> list[str]:
        with self._lock:
            return self._resolver.paths

    @property
    def registry(self) -> ProcessorRegistry:
        """The live registry. Mutate it through the register_* methods."""
        return self._registry

    @property
    def build_cache(self) -> BuildCache:
        return self._build_cache

    @property
    def generation(self) -> int:
        """Incremented on every cache expiry."""
        with self._lock:
            return self._generation

    @property
    def digest(self) -> EnvironmentDigest:
        """Seed digest shared by every asset built in this configuration."""
        with self._lock:
            return self._digest

    @property
    def digest_hexdigest(self) -> str:
        return self.digest.hexdigest()

    @property
    def fingerprinter(self) -> ContentFingerprinter:
        with self._lock:
            return self._fingerprinter

    # --- Configuration (each change expires the cache) ---

    @property
    def version(self) -> str:
        return self._version

    @version.setter
    def version(self, version: str) -> None:
        with self._lock:
            self._version = str(version)
            self.expire_cache()

    @property
    def digest_algorithm(self) -> str:
        return self._digest_algorithm

    @digest_algorithm.setter
    def digest_algorithm(self, algorithm: str) -> None:
        with self._lock:
            EnvironmentDigest(algorithm)  # raises ValueError for unknown names
            self._digest_algorithm = algorithm
            self.expire_cache()

    @property
    def cache_store(self) -> BaseCacheStore:
        return self._cache_store

    @cache_store.setter
    def cache_store(self, store: BaseCacheStore) -> None:
        with self._lock:
            self._cache_store = store
            self.expire_cache()

    def append_path(self, path: str) -> None:
        with self._lock:
            self._resolver.append_path(path)
            self.expire_cache()

    def prepend_path(self, path: str) -> None:
        with self._lock:
            self._resolver.prepend_path(path)
            self.expire_cache()

    def clear_paths(self) -> None:
        with self._lock:
            self._resolver.clear_paths()
            self.expire_cache()

    def register_mime_type(
        self, mime_type: str, ext: str, encoding: str | None = None
    ) -> None:
        with self._lock:
            self._registry.register_mime_type(mime_type, ext, encoding=encoding)
            self.expire_cache()

    def register_engine(
        self, ext: str, processor: ProcessorLike, mime_type: str | None = None
    ) -> None:
        with self._lock:
            self._registry.register_engine(ext, processor, mime_type=mime_type)
            self._resolver.append_extension(ext)
            self.expire_cache()

    def unregister_engine(self, ext: str) -> None:
        with self._lock:
            self._registry.unregister_engine(ext)
            self._resolver.remove_extension(ext)
            self.expire_cache()

    def register_preprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        with self._lock:
            self._registry.register_preprocessor(mime_type, processor)
            self.expire_cache()

    def unregister_preprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        with self._lock:
            self._registry.unregister_preprocessor(mime_type, processor)
            self.expire_cache()

    def register_postprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        with self._lock:
            self._registry.register_postprocessor(mime_type, processor)
            self.expire_cache()

    def unregister_postprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        with self._lock:
            self._registry.unregister_postprocessor(mime_type, processor)
            self.expire_cache()

    def register_bundle_processor(self, mime_type: str, processor: ProcessorLike) -> None:
        with self._lock:
            self._registry.register_bundle_processor(mime_type, processor)
            self.expire_cache()

    def unregister_bundle_processor(
        self, mime_type: str, processor: ProcessorLike
    ) -> None:
        with self._lock:
            self._registry.unregister_bundle_processor(mime_type, processor)
            self.expire_cache()

    def expire_cache(self) -> None:
        """Drop every built record and fingerprint; rebuild the digest seed."""
        with self._lock:
            self._build_cache.clear()
            self._cache_store.clear()
            self._generation += 1
            self._rebuild_state()
            logger.info(
                "Expired asset cache (generation %d, digest %s)",
                self._generation,
                self._digest.hexdigest(),
            )

    def _rebuild_state(self) -> None:
        self._digest = EnvironmentDigest(self._digest_algorithm, self._version)
        self._fingerprinter = ContentFingerprinter(
            self._resolver, self._cache_store, algorithm=self._digest_algorithm
        )
        self._builder = AssetHashBuilder(
            resolver=self._resolver,
            registry=self._registry,
            pipeline=self._pipeline,
            fingerprinter=self._fingerprinter,
            digest=self._digest,
            default_encoding=self._settings.default_encoding,
        )

    def _current_builder(self) -> AssetHashBuilder:
        with self._lock:
            return self._builder

    # --- Asset host (used by processing contexts) ---

    def resolve(self, path: str, content_type: str | None = None) -> str:
        """Absolute filename for a logical or absolute path.

        Raises:
            FileOutsidePaths: If path is absolute and under no search root.
            FileNotFound: If no file matches (with content_type, if given).
        """
        return self._current_builder().resolve_filename(path, content_type=content_type)

    def content_type_of(self, path: str) -> str:
        return self._registry.content_type_of(path)

    def logical_path_for(self, filename: str) -> str:
        return self._resolver.logical_path_for(filename)

    def root_for(self, path: str) -> str | None:
        return self._resolver.root_for(path)

    def stat(self, path: str) -> FileStat | None:
        return self._resolver.stat(path)

    def entries(self, path: str) -> list[str]:
        return self._resolver.entries(path)

    # --- Building ---

    def find_asset(self, path: str, bundle: bool = True) -> BuildRecord:
        """Build the record for path and register it in the build cache.

        Raises:
            FileNotFound, FileOutsidePaths, CircularDependencyError,
            EncodingError, or any exception raised by a processor. Nothing
            is cached on failure.
        """
        with root_context(path):
            record = self._current_builder().resolve(path, bundle=bundle)
            with self._lock:
                cached = self._build_cache.get(record.id)
                if cached is not None:
                    return cached
                self._build_cache.set(record.id, record)
            logger.info(
                "Built %s (%s, %d bytes)", record.logical_path, record.kind, record.length
            )
            return record

    def __getitem__(self, path: str) -> BuildRecord:
        return self.find_asset(path)

    def constituents(self, record: BuildRecord) -> list[BuildRecord]:
        """Per-file records a record is made of, in bundle order."""
        if isinstance(record, BundledRecord):
            return [self.find_asset(path, bundle=False) for path in record.required_paths]
        if isinstance(record, (ProcessedRecord, StaticRecord)):
            return [record]
        raise TypeError(f"Unknown build record type: {type(record).__name__}")

    def is_fresh(self, record: BuildRecord) -> bool:
        """True while none of the record's dependency paths changed on disk."""
        current = self.fingerprinter.combined_fingerprint(record.dependency_paths)
        return current == record.dependency_digest

    def dependency_graph(self, path: str) -> nx.DiGraph:
        """Graph of a bundle and the direct requires of each of its members."""
        bundle = self.find_asset(path, bundle=True)
        return dependency_graph([bundle, *self.constituents(bundle)])

    def cached(self) -> CachedEnvironment:
        """Snapshot view that reuses records for repeated lookups."""
        return CachedEnvironment(self)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} paths={self.paths!r} "
            f"digest={self.digest_hexdigest!r}>"
        )


class CachedEnvironment:
    """Memoizes (path, bundle) -> record id over an Environment's build cache.

    Repeated lookups of the same path return the same record object until
    the environment's cache expires, after which the next lookup rebuilds.
    """

    def __init__(self, environment: Environment) -> None:
        self._environment = environment
        self._ids: dict[tuple[str, bool], str] = {}
        self._lock = threading.Lock()

    @property
    def environment(self) -> Environment:
        return self._environment

    def find_asset(self, path: str, bundle: bool = True) -> BuildRecord:
        key = (path, bundle)
        with self._lock:
            record_id = self._ids.get(key)
        if record_id is not None:
            record = self._environment.build_cache.get(record_id)
            if record is not None:
                return record

        record = self._environment.find_asset(path, bundle=bundle)
        with self._lock:
            self._ids[key] = record.id
        return record

    def __getitem__(self, path: str) -> BuildRecord:
        return self.find_asset(path)
