# src/config/processors.py - v1
"""Default content types and processor chains.

Edit DEFAULT_MIME_TYPES to serve new formats. Formats without any
registered processor (images, fonts) are passed through as static binary.
"""

from __future__ import annotations

from assetpipe.pipeline.processors.charset_normalizer import CharsetNormalizer
from assetpipe.pipeline.processors.directive_processor import DirectiveProcessor
from assetpipe.pipeline.processors.safety_colons import SafetyColons
from assetpipe.pipeline.registry import ProcessorRegistry

JAVASCRIPT = "application/javascript"
CSS = "text/css"

DEFAULT_MIME_TYPES: dict[str, str] = {
    ".js": JAVASCRIPT,
    ".css": CSS,
    ".html": "text/html",
    ".txt": "text/plain",
    ".json": "application/json",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".ico": "image/vnd.microsoft.icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def default_registry() -> ProcessorRegistry:
    """Registry with the default mime types and JS/CSS processor chains."""
    registry = ProcessorRegistry()
    for ext, mime_type in DEFAULT_MIME_TYPES.items():
        registry.register_mime_type(mime_type, ext)

    directives = DirectiveProcessor()
    registry.register_preprocessor(JAVASCRIPT, directives)
    registry.register_preprocessor(CSS, directives)
    registry.register_postprocessor(JAVASCRIPT, SafetyColons())
    registry.register_bundle_processor(CSS, CharsetNormalizer())
    return registry
