# src/core/builder.py - v2
"""Asset hash builder: turn a real file path into a typed, digested BuildRecord.

Three build strategies, chosen per file:

  - static:    no processors apply; the file is opaque binary, digested
               from its raw bytes.
  - processed: the file's processor chain runs once over its text.
  - bundled:   the processed form of the file and of every path it
               (transitively) requires, concatenated in dependency order
               and run through the content type's bundle processors.

Recursion through bundles is guarded by the session's CycleGuard, and
sub-builds completed earlier in the same session are reused.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from assetpipe.core.bundle_resolver import BundleResolver
from assetpipe.core.cycle_guard import CycleGuard
from assetpipe.core.errors import (
    ContentTypeMismatch,
    EncodingError,
    FileNotFound,
    FileOutsidePaths,
)
from assetpipe.core.models import (
    BuildRecord,
    BundledRecord,
    ProcessedRecord,
    StaticRecord,
)
from assetpipe.logging.context import build_context

if TYPE_CHECKING:
    from assetpipe.cache.fingerprint import ContentFingerprinter
    from assetpipe.core.digest import EnvironmentDigest
    from assetpipe.paths.resolver import PathResolver
    from assetpipe.pipeline.plugin_kit.base_processor import BaseProcessor
    from assetpipe.pipeline.registry import ProcessorRegistry
    from assetpipe.pipeline.runner import ProcessorPipeline

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


@dataclass
class BuildSession:
    """State owned by one top-level resolve call and shared by its recursion."""

    guard: CycleGuard = field(default_factory=CycleGuard)
    records: dict[tuple[str, bool], BuildRecord] = field(default_factory=dict)


class AssetHashBuilder:
    """Builds records against one fixed snapshot of environment configuration."""

    def __init__(
        self,
        resolver: PathResolver,
        registry: ProcessorRegistry,
        pipeline: ProcessorPipeline,
        fingerprinter: ContentFingerprinter,
        digest: EnvironmentDigest,
        default_encoding: str = "utf-8",
    ) -> None:
        self._resolver = resolver
        self._registry = registry
        self._pipeline = pipeline
        self._fingerprinter = fingerprinter
        self._digest = digest
        self._default_encoding = default_encoding
        self._bundles = BundleResolver(self, resolver)

    # --- Path resolution ---

    def resolve_filename(self, path: str, content_type: str | None = None) -> str:
        """Map a logical or absolute path to the highest priority real file.

        Raises:
            FileOutsidePaths: If path is absolute and under no search root.
            FileNotFound: If nothing matches.
        """
        if os.path.isabs(path) and self._resolver.root_for(path) is None:
            raise FileOutsidePaths(
                f"{path} isn't in paths: {', '.join(self._resolver.paths)}"
            )

        for candidate in self._resolver.resolve_candidates(path):
            if content_type is None:
                return candidate
            if self._registry.content_type_of(candidate) == content_type:
                return candidate

        message = f"couldn't find file '{path}'"
        if content_type:
            message += f" with content type '{content_type}'"
        raise FileNotFound(message)

    def resolve(
        self,
        path: str,
        bundle: bool = True,
        session: BuildSession | None = None,
    ) -> BuildRecord:
        """Resolve path and build its record."""
        filename = self.resolve_filename(path)
        return self.build(filename, bundle=bundle, session=session or BuildSession())

    # --- Dispatch ---

    def build(self, filename: str, bundle: bool, session: BuildSession) -> BuildRecord:
        """Build (or reuse from session) the record for a resolved filename."""
        key = (filename, bundle)
        if key in session.records:
            return session.records[key]

        attributes = {
            "id": uuid.uuid4().hex,
            "filename": filename,
            "logical_path": self._resolver.logical_path_for(filename),
            "content_type": self._registry.content_type_of(filename),
        }

        processors = self._registry.processors_for(filename)
        record: BuildRecord
        if not processors:
            with build_context(attributes["logical_path"], "static"):
                record = self._build_static(attributes)
        elif not bundle:
            with build_context(attributes["logical_path"], "processed"):
                t0 = time.perf_counter()
                record = self._build_processed(attributes, processors)
                logger.debug(
                    "Compiled %s  (%dms)",
                    attributes["logical_path"],
                    (time.perf_counter() - t0) * 1000,
                )
        else:
            with session.guard.guard(filename), build_context(
                attributes["logical_path"], "bundled"
            ):
                record = self._build_bundled(attributes, session)

        session.records[key] = record
        return record

    # --- Strategies ---

    def _build_static(self, attributes: dict[str, str]) -> StaticRecord:
        filename = attributes["filename"]
        stat = self._resolver.stat(filename)
        if stat is None:
            raise FileNotFound(f"could not find {filename}")

        digest = self._digest.digest()
        with open(filename, "rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                digest.update(chunk)

        return StaticRecord(
            **attributes,
            length=stat.size,
            mtime=int(stat.mtime),
            digest=digest.hexdigest(),
            dependency_paths=(filename,),
            dependency_digest=self._fingerprinter.combined_fingerprint([filename]),
        )

    def _build_processed(
        self, attributes: dict[str, str], processors: list[BaseProcessor]
    ) -> ProcessedRecord:
        filename = attributes["filename"]
        encoding = self._registry.encoding_for(
            attributes["content_type"], default=self._default_encoding
        )
        data = self._read_text(filename, encoding)

        result = self._pipeline.run(processors, filename, data)

        dependency_paths = dict.fromkeys([filename, *result.dependency_paths])
        source = result.data
        encoded = source.encode("utf-8")

        return ProcessedRecord(
            **attributes,
            source=source,
            length=len(encoded),
            digest=self._digest.digest_bytes(encoded),
            required_paths=tuple(dict.fromkeys((*result.required_paths, filename))),
            stubbed_paths=tuple(result.stubbed_paths),
            dependency_paths=tuple(dependency_paths),
            dependency_digest=self._fingerprinter.combined_fingerprint(dependency_paths),
            mtime=self._latest_mtime(dependency_paths),
        )

    def _build_bundled(
        self, attributes: dict[str, str], session: BuildSession
    ) -> BundledRecord:
        filename = attributes["filename"]
        own = self.build(filename, bundle=False, session=session)

        required_paths = self._bundles.expand(filename, own.required_paths, session)
        stubbed_paths = self._bundles.expand(filename, own.stubbed_paths, session)
        stubbed = set(stubbed_paths)
        required_paths = [path for path in required_paths if path not in stubbed]

        members: list[ProcessedRecord] = []
        for path in required_paths:
            member = self.build(path, bundle=False, session=session)
            if not isinstance(member, ProcessedRecord):
                raise ContentTypeMismatch(
                    f"{member.logical_path} is a {member.kind} asset and cannot be "
                    f"bundled into {attributes['logical_path']}"
                )
            members.append(member)

        dependency_paths: dict[str, None] = {filename: None}
        for member in members:
            dependency_paths.update(dict.fromkeys(member.dependency_paths))

        source = self._pipeline.run(
            self._registry.bundle_processors_for(attributes["content_type"]),
            filename,
            "".join(member.source for member in members),
        ).data
        encoded = source.encode("utf-8")

        logger.debug(
            "Bundled %s from %d file(s)", attributes["logical_path"], len(members)
        )
        return BundledRecord(
            **attributes,
            source=source,
            length=len(encoded),
            digest=self._digest.digest_bytes(encoded),
            required_paths=tuple(required_paths),
            stubbed_paths=tuple(stubbed_paths),
            dependency_paths=tuple(dependency_paths),
            dependency_digest=self._fingerprinter.combined_fingerprint(dependency_paths),
            mtime=max((member.mtime for member in members), default=own.mtime),
        )

    # --- Helpers ---

    @staticmethod
    def _read_text(filename: str, encoding: str) -> str:
        with open(filename, "rb") as fh:
            raw = fh.read()
        try:
            data = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise EncodingError(filename, encoding) from exc
        if data.startswith("\ufeff"):
            data = data[1:]
        return data

    def _latest_mtime(self, paths: dict[str, None]) -> int:
        mtimes = [
            int(stat.mtime)
            for stat in (self._resolver.stat(path) for path in paths)
            if stat is not None
        ]
        return max(mtimes, default=0)
