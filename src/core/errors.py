# src/core/errors.py - v2
"""Build error taxonomy.

Every failure surfaced by a resolution is one of these. Errors raised by
individual processors are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class AssetError(Exception):
    """Base class for all asset build errors."""


class FileNotFound(AssetError):
    """A logical reference or declared dependency has no real path."""


class FileOutsidePaths(AssetError):
    """An absolute path lies outside every configured search root."""


class ContentTypeMismatch(AssetError):
    """A resolved file does not match the requested content type."""


class CircularDependencyError(AssetError):
    """A bundle transitively requires itself."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} has already been required")
        self.path = path


class ProcessorError(AssetError):
    """A bundled processor rejected its input (e.g. malformed directive)."""


class EncodingError(AssetError):
    """A file's bytes are not valid in the encoding of its content type."""

    def __init__(self, filename: str, encoding: str) -> None:
        super().__init__(f"{filename} has an invalid {encoding} byte sequence")
        self.filename = filename
        self.encoding = encoding
