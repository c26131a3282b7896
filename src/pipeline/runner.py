# src/pipeline/runner.py - v2
"""Processor pipeline: run an ordered processor chain over one file.

Each processor receives the previous processor's output. Declarations made
through the shared ProcessingContext are returned alongside the final data.
Processor exceptions propagate unchanged.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Sequence

from assetpipe.core.models import ProcessorResult
from assetpipe.pipeline.plugin_kit.context import AssetHost, ProcessingContext

if TYPE_CHECKING:
    from assetpipe.pipeline.plugin_kit.base_processor import BaseProcessor

logger = logging.getLogger(__name__)


class ProcessorPipeline:
    """Runs processor chains on behalf of an asset host (the Environment)."""

    def __init__(self, host: AssetHost) -> None:
        self._host = host

    def run(
        self,
        processors: Sequence[BaseProcessor],
        path: str,
        data: str,
    ) -> ProcessorResult:
        """Run processors in order over data for the file at path."""
        context = ProcessingContext(self._host, path)

        for processor in processors:
            t0 = time.perf_counter()
            data = processor.process(context, data)
            logger.debug(
                "%s processed %s (%.1fms)",
                processor.name,
                context.logical_path,
                (time.perf_counter() - t0) * 1000,
            )

        return ProcessorResult(
            data=data,
            required_paths=context.required_paths,
            stubbed_paths=context.stubbed_paths,
            dependency_paths=context.dependency_paths,
        )
