# src/pipeline/plugin_kit/base_processor.py - v1
"""Standard processor interface for pipeline plugins.

A processor receives the file's current text plus a ProcessingContext and
returns the transformed text. It declares dependencies through the context
(require_asset, stub_asset, depend_on) rather than through its return value.
Processors must be deterministic for identical input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from assetpipe.pipeline.plugin_kit.context import ProcessingContext


class BaseProcessor(ABC):
    """Standard interface for all content processors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique processor identifier (e.g., 'directives', 'safety_colons')."""

    @abstractmethod
    def process(self, context: ProcessingContext, data: str) -> str:
        """Transform data for the file described by context."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class CallableProcessor(BaseProcessor):
    """Adapts a plain ``fn(context, data) -> str`` to the processor interface."""

    def __init__(
        self,
        fn: Callable[[ProcessingContext, str], str],
        name: str | None = None,
    ) -> None:
        self._fn = fn
        self._name = name or getattr(fn, "__name__", "callable")

    @property
    def name(self) -> str:
        return self._name

    def process(self, context: ProcessingContext, data: str) -> str:
        return self._fn(context, data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CallableProcessor):
            return self._fn is other._fn
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._fn)


ProcessorLike = Union[BaseProcessor, Callable[["ProcessingContext", str], str]]


def as_processor(processor: ProcessorLike) -> BaseProcessor:
    """Wrap callables so registries only ever hold BaseProcessor instances."""
    if isinstance(processor, BaseProcessor):
        return processor
    if callable(processor):
        return CallableProcessor(processor)
    raise TypeError(f"{processor!r} is neither a BaseProcessor nor callable")
