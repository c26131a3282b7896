# src/paths/resolver.py - v2
"""Search-path lookup: map logical names to real files under configured roots.

Roots are searched in priority order. For each root the exact logical path
is tried first, then the logical path with each registered engine extension
appended (``app.js`` also matches ``app.js.upper``). A candidate whose
resolved form leaves its root is never returned.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from stat import S_ISDIR, S_ISREG

from assetpipe.core.models import FileStat

logger = logging.getLogger(__name__)


def _is_hidden_entry(name: str) -> bool:
    """Editor backups, dotfiles and emacs lock files are never assets."""
    return name.startswith(".") or name.endswith("~") or (
        name.startswith("#") and name.endswith("#")
    )


def _is_within(path: str, root: str) -> bool:
    """True when path, with symlinks and .. segments resolved, lies under root."""
    return Path(path).resolve(strict=False).is_relative_to(root)


class PathResolver:
    """Filesystem-backed resolver over an ordered list of search roots."""

    def __init__(
        self,
        paths: list[str] | None = None,
        extensions: list[str] | None = None,
    ) -> None:
        self._paths: list[str] = []
        self._extensions: list[str] = []
        for path in paths or []:
            self.append_path(path)
        for ext in extensions or []:
            self.append_extension(ext)

    # --- Configuration ---

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    @property
    def extensions(self) -> list[str]:
        return list(self._extensions)

    def append_path(self, path: str | Path) -> None:
        self._paths.append(str(Path(path).expanduser().resolve()))

    def prepend_path(self, path: str | Path) -> None:
        self._paths.insert(0, str(Path(path).expanduser().resolve()))

    def clear_paths(self) -> None:
        self._paths.clear()

    def append_extension(self, ext: str) -> None:
        ext = ext if ext.startswith(".") else f".{ext}"
        if ext not in self._extensions:
            self._extensions.append(ext)

    def remove_extension(self, ext: str) -> None:
        ext = ext if ext.startswith(".") else f".{ext}"
        if ext in self._extensions:
            self._extensions.remove(ext)

    # --- Lookup ---

    def root_for(self, path: str) -> str | None:
        """Return the first search root containing path, if any."""
        for root in self._paths:
            if _is_within(path, root):
                return root
        return None

    def resolve_candidates(self, logical_path: str) -> list[str]:
        """Return existing files matching logical_path, highest priority first."""
        if os.path.isabs(logical_path):
            base = os.path.normpath(logical_path)
            root = self.root_for(base)
            bases = [(base, root)] if root is not None else []
        else:
            rel = logical_path.replace("\\", "/").lstrip("/")
            bases = [(os.path.normpath(os.path.join(root, rel)), root) for root in self._paths]

        candidates: list[str] = []
        for base, root in bases:
            for option in [base, *(base + ext for ext in self._extensions)]:
                if option in candidates or not _is_within(option, root):
                    continue
                stat = self.stat(option)
                if stat is not None and stat.is_file:
                    candidates.append(option)
        return candidates

    def logical_path_for(self, filename: str) -> str:
        """Path relative to its search root with engine extensions stripped."""
        root = self.root_for(filename)
        rel = os.path.relpath(filename, root) if root else os.path.basename(filename)
        rel = rel.replace(os.sep, "/")
        stripped = True
        while stripped:
            stripped = False
            for ext in self._extensions:
                if rel.endswith(ext) and len(rel) > len(ext):
                    rel = rel[: -len(ext)]
                    stripped = True
        return rel

    # --- Filesystem ---

    def stat(self, path: str) -> FileStat | None:
        """Stat path, returning None when it does not exist."""
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        return FileStat(
            exists=True,
            is_directory=S_ISDIR(st.st_mode),
            is_file=S_ISREG(st.st_mode),
            size=st.st_size,
            mtime=st.st_mtime,
        )

    def entries(self, path: str) -> list[str]:
        """Sorted immediate children of a directory, hidden entries skipped."""
        try:
            names = os.listdir(path)
        except (FileNotFoundError, NotADirectoryError):
            return []
        return sorted(name for name in names if not _is_hidden_entry(name))
