# src/logging/context.py - v3
"""Contextual logging support: attach the asset being built to log records."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

# Context variables for structured logging, set per build step.
_asset: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "asset", default=None
)
_kind: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "kind", default=None
)
_root_asset: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "root_asset", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    root_asset: str | None = None
    asset: str | None = None
    kind: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        root_asset=_root_asset.get(),
        asset=_asset.get(),
        kind=_kind.get(),
    )


def set_build_context(asset: str, kind: str | None = None) -> None:
    """Set the asset currently being built (called per build step)."""
    _asset.set(asset)
    _kind.set(kind)


def clear_context() -> None:
    """Reset all context variables."""
    _root_asset.set(None)
    _asset.set(None)
    _kind.set(None)


@contextmanager
def root_context(root_asset: str) -> Iterator[None]:
    """Scope the top-level asset requested by the caller to one lookup."""
    token = _root_asset.set(root_asset)
    try:
        yield
    finally:
        _root_asset.reset(token)


@contextmanager
def build_context(asset: str, kind: str | None = None) -> Iterator[None]:
    """Scope the asset/kind context to one (possibly nested) build step."""
    asset_token = _asset.set(asset)
    kind_token = _kind.set(kind)
    try:
        yield
    finally:
        _kind.reset(kind_token)
        _asset.reset(asset_token)
