# src/core/bundle_resolver.py - v1
"""Expand a file's declared required/stubbed paths into full bundle membership."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from assetpipe.core.errors import FileNotFound

if TYPE_CHECKING:
    from assetpipe.core.builder import AssetHashBuilder, BuildSession
    from assetpipe.paths.resolver import PathResolver


class BundleResolver:
    """Flattens declared paths through each one's own bundle."""

    def __init__(self, builder: AssetHashBuilder, resolver: PathResolver) -> None:
        self._builder = builder
        self._resolver = resolver

    def expand(
        self,
        filename: str,
        declared_paths: Iterable[str],
        session: BuildSession,
    ) -> list[str]:
        """Return the ordered, deduplicated paths that declared_paths stand for.

        The bundle's own filename is taken as-is so it does not re-trigger
        its own expansion. Any other path contributes the required paths of
        its bundled build, in first-seen order.

        Raises:
            FileNotFound: If a declared path no longer exists on disk.
        """
        # dict as an insertion-ordered set
        expanded: dict[str, None] = {}
        for path in declared_paths:
            if path == filename:
                expanded.setdefault(path, None)
                continue
            if self._resolver.stat(path) is None:
                raise FileNotFound(f"could not find {path}")
            record = self._builder.build(path, bundle=True, session=session)
            # static files have no required paths of their own
            expanded.update(dict.fromkeys(record.required_paths or (path,)))
        return list(expanded)
