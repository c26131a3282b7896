# src/pipeline/processors/safety_colons.py - v1
"""Terminate JavaScript files with a semicolon so concatenation stays valid."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from assetpipe.pipeline.plugin_kit.base_processor import BaseProcessor

if TYPE_CHECKING:
    from assetpipe.pipeline.plugin_kit.context import ProcessingContext

_BLANK = re.compile(r"\A\s*\Z")
_TERMINATED = re.compile(r";\s*\Z")


class SafetyColons(BaseProcessor):
    """Append ``;\\n`` unless the source is blank or already ends with ``;``."""

    @property
    def name(self) -> str:
        return "safety_colons"

    def process(self, context: ProcessingContext, data: str) -> str:
        if _BLANK.match(data) or _TERMINATED.search(data):
            return data
        return f"{data};\n"
