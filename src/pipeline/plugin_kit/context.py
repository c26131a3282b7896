# src/pipeline/plugin_kit/context.py - v2
"""Processing context handed to every processor in a chain.

Collects what processors declare while transforming one file: required
paths (in declaration order), stubbed paths and extra dependency paths.
"""

from __future__ import annotations

import os
import posixpath
from typing import Protocol

from assetpipe.core.errors import ContentTypeMismatch, FileNotFound, FileOutsidePaths
from assetpipe.core.models import FileStat


class AssetHost(Protocol):
    """What a context needs from its environment."""

    def resolve(self, path: str, content_type: str | None = None) -> str: ...

    def content_type_of(self, path: str) -> str: ...

    def logical_path_for(self, filename: str) -> str: ...

    def root_for(self, path: str) -> str | None: ...

    def stat(self, path: str) -> FileStat | None: ...

    def entries(self, path: str) -> list[str]: ...


class ProcessingContext:
    """Per-file state shared by the processors of one chain run."""

    def __init__(self, host: AssetHost, filename: str) -> None:
        self.host = host
        self.filename = filename
        self.logical_path = host.logical_path_for(filename)
        self.content_type = host.content_type_of(filename)
        # dicts used as insertion-ordered sets
        self._required: dict[str, None] = {}
        self._stubbed: dict[str, None] = {}
        self._dependencies: dict[str, None] = {filename: None}

    @property
    def dirname(self) -> str:
        return os.path.dirname(self.filename)

    @property
    def required_paths(self) -> list[str]:
        return list(self._required)

    @property
    def stubbed_paths(self) -> list[str]:
        return list(self._stubbed)

    @property
    def dependency_paths(self) -> list[str]:
        return list(self._dependencies)

    # --- Resolution ---

    def expand_relative(self, path: str) -> str:
        """Absolute form of a ``./`` or ``../`` path, relative to this file."""
        return os.path.normpath(os.path.join(self.dirname, path))

    def resolve(self, path: str, content_type: str | None = None) -> str:
        """Resolve a reference made from inside this file.

        Relative references (``./x``, ``../x``) are looked up next to the
        file; anything else goes through the search roots. A reference
        without an extension borrows this file's format extension.
        """
        if not posixpath.splitext(posixpath.basename(path))[1]:
            path = f"{path}{posixpath.splitext(self.logical_path)[1]}"
        if path.startswith(("./", "../")):
            path = self.expand_relative(path)
        return self.host.resolve(path, content_type=content_type)

    def resolve_directory(self, path: str) -> str:
        """Absolute path of a directory referenced relative to this file."""
        directory = self.expand_relative(path)
        if self.host.root_for(directory) is None:
            raise FileOutsidePaths(f"{path} from {self.logical_path} isn't in paths")
        stat = self.host.stat(directory)
        if stat is None or not stat.is_directory:
            raise FileNotFound(f"could not find directory '{path}' from {self.logical_path}")
        return directory

    # --- Declarations ---

    def require_asset(self, path: str) -> str:
        """Declare path as a bundle member; returns the resolved filename."""
        ext = posixpath.splitext(posixpath.basename(path))[1]
        if ext:
            declared_type = self.host.content_type_of(path)
            if declared_type != self.content_type:
                raise ContentTypeMismatch(
                    f"{path} is '{declared_type}', not '{self.content_type}'"
                )
        filename = self.resolve(path, content_type=self.content_type)
        self._required.setdefault(filename, None)
        return filename

    def require_self(self) -> None:
        """Place this file's own content at the current position of the bundle."""
        self._required.setdefault(self.filename, None)

    def require_filename(self, filename: str) -> None:
        """Declare an already-resolved absolute filename as a bundle member."""
        self._required.setdefault(filename, None)

    def stub_asset(self, path: str) -> str:
        """Exclude path (and everything it requires) from the bundle."""
        filename = self.resolve(path, content_type=self.content_type)
        self._stubbed.setdefault(filename, None)
        return filename

    def depend_on(self, path: str) -> str:
        """Invalidate this file when path changes, without bundling it.

        Directories are accepted and tracked by their entry names only.
        """
        candidate = self.expand_relative(path) if path.startswith(".") else path
        stat = self.host.stat(candidate) if os.path.isabs(candidate) else None
        if stat is not None and stat.is_directory:
            if self.host.root_for(candidate) is None:
                raise FileOutsidePaths(f"{path} from {self.logical_path} isn't in paths")
            filename = candidate
        else:
            filename = self.resolve(path)
        self._dependencies.setdefault(filename, None)
        return filename
