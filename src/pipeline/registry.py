# src/pipeline/registry.py - v2
"""Processor registry: mime types, engines and per-type processor chains.

A file's processor chain is its content type's preprocessors, then the
engines for its engine extensions applied right to left, then the content
type's postprocessors. Bundle processors run once over a whole
concatenated bundle. A file whose chain is empty is served as static
binary.
"""

from __future__ import annotations

import logging
import posixpath

from assetpipe.pipeline.plugin_kit.base_processor import (
    BaseProcessor,
    ProcessorLike,
    as_processor,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class RegistryError(Exception):
    """Raised when a registration or lookup is invalid."""


def _normalize_ext(ext: str) -> str:
    ext = ext.lower()
    return ext if ext.startswith(".") else f".{ext}"


class ProcessorRegistry:
    """Registry of content types and the processors that apply to them."""

    def __init__(self) -> None:
        self._mime_types: dict[str, str] = {}
        self._encodings: dict[str, str] = {}
        self._engines: dict[str, BaseProcessor] = {}
        self._engine_mime_types: dict[str, str] = {}
        self._preprocessors: dict[str, list[BaseProcessor]] = {}
        self._postprocessors: dict[str, list[BaseProcessor]] = {}
        self._bundle_processors: dict[str, list[BaseProcessor]] = {}

    # --- Mime types ---

    @property
    def mime_types(self) -> dict[str, str]:
        """Return mapping of extension -> content type."""
        return dict(self._mime_types)

    def register_mime_type(
        self, mime_type: str, ext: str, encoding: str | None = None
    ) -> None:
        """Map ext to mime_type, optionally with a non-default text encoding."""
        self._mime_types[_normalize_ext(ext)] = mime_type
        if encoding:
            self._encodings[mime_type] = encoding

    def encoding_for(self, content_type: str, default: str = "utf-8") -> str:
        return self._encodings.get(content_type, default)

    # --- Engines ---

    @property
    def engine_extensions(self) -> list[str]:
        return list(self._engines)

    def register_engine(
        self, ext: str, processor: ProcessorLike, mime_type: str | None = None
    ) -> None:
        """Register processor for files carrying ext as an engine extension.

        mime_type is the content type of files whose only extension is ext.
        """
        ext = _normalize_ext(ext)
        if ext in self._engines:
            logger.warning("Overwriting existing engine for %s", ext)
        self._engines[ext] = as_processor(processor)
        if mime_type:
            self._engine_mime_types[ext] = mime_type

    def unregister_engine(self, ext: str) -> None:
        ext = _normalize_ext(ext)
        if ext not in self._engines:
            raise RegistryError(f"No engine registered for '{ext}'")
        del self._engines[ext]
        self._engine_mime_types.pop(ext, None)

    # --- Processor chains ---

    def register_preprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        self._append(self._preprocessors, mime_type, processor)

    def unregister_preprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        self._remove(self._preprocessors, mime_type, processor, "preprocessor")

    def register_postprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        self._append(self._postprocessors, mime_type, processor)

    def unregister_postprocessor(self, mime_type: str, processor: ProcessorLike) -> None:
        self._remove(self._postprocessors, mime_type, processor, "postprocessor")

    def register_bundle_processor(self, mime_type: str, processor: ProcessorLike) -> None:
        self._append(self._bundle_processors, mime_type, processor)

    def unregister_bundle_processor(
        self, mime_type: str, processor: ProcessorLike
    ) -> None:
        self._remove(self._bundle_processors, mime_type, processor, "bundle processor")

    def preprocessors(self, mime_type: str) -> list[BaseProcessor]:
        return list(self._preprocessors.get(mime_type, []))

    def postprocessors(self, mime_type: str) -> list[BaseProcessor]:
        return list(self._postprocessors.get(mime_type, []))

    def bundle_processors_for(self, content_type: str) -> list[BaseProcessor]:
        return list(self._bundle_processors.get(content_type, []))

    # --- Lookup by path ---

    def engine_extensions_for(self, path: str) -> list[str]:
        """Trailing engine extensions of path, outermost (rightmost) last."""
        name = posixpath.basename(path.replace("\\", "/"))
        found: list[str] = []
        while True:
            stem, ext = posixpath.splitext(name)
            if not ext or _normalize_ext(ext) not in self._engines:
                break
            found.insert(0, _normalize_ext(ext))
            name = stem
        return found

    def content_type_of(self, path: str) -> str:
        """Content type from the format extension left after engines are stripped."""
        name = posixpath.basename(path.replace("\\", "/"))
        engine_exts = self.engine_extensions_for(name)
        for _ in engine_exts:
            name = posixpath.splitext(name)[0]
        ext = _normalize_ext(posixpath.splitext(name)[1]) if "." in name else ""
        if ext and ext in self._mime_types:
            return self._mime_types[ext]
        for engine_ext in engine_exts:
            if engine_ext in self._engine_mime_types:
                return self._engine_mime_types[engine_ext]
        return DEFAULT_CONTENT_TYPE

    def processors_for(self, path: str) -> list[BaseProcessor]:
        """Full ordered processor chain for path."""
        content_type = self.content_type_of(path)
        engines = [
            self._engines[ext] for ext in reversed(self.engine_extensions_for(path))
        ]
        return (
            self.preprocessors(content_type)
            + engines
            + self.postprocessors(content_type)
        )

    # --- Internals ---

    @staticmethod
    def _append(
        table: dict[str, list[BaseProcessor]], mime_type: str, processor: ProcessorLike
    ) -> None:
        table.setdefault(mime_type, []).append(as_processor(processor))

    @staticmethod
    def _remove(
        table: dict[str, list[BaseProcessor]],
        mime_type: str,
        processor: ProcessorLike,
        kind: str,
    ) -> None:
        target = as_processor(processor)
        chain = table.get(mime_type, [])
        if target not in chain:
            raise RegistryError(f"{target!r} is not a registered {kind} for {mime_type}")
        chain.remove(target)
