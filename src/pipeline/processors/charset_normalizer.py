# src/pipeline/processors/charset_normalizer.py - v1
"""Bundle processor hoisting a single ``@charset`` rule to the top of a stylesheet.

CSS only honours ``@charset`` as the very first rule, so after concatenation
every occurrence is removed and the first one found is re-emitted first.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from assetpipe.pipeline.plugin_kit.base_processor import BaseProcessor

if TYPE_CHECKING:
    from assetpipe.pipeline.plugin_kit.context import ProcessingContext

CHARSET_PATTERN = re.compile(r'^@charset "([^"]+)";$', re.MULTILINE)


class CharsetNormalizer(BaseProcessor):
    """Keep only the first ``@charset`` rule, moved to the start of the bundle."""

    @property
    def name(self) -> str:
        return "charset_normalizer"

    def process(self, context: ProcessingContext, data: str) -> str:
        match = CHARSET_PATTERN.search(data)
        if match is None:
            return data
        return f"{match.group(0)}\n{CHARSET_PATTERN.sub('', data)}"
