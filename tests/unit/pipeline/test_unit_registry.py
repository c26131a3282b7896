# tests/unit/pipeline/test_unit_registry.py - v1
"""Tests for pipeline/registry.py and config/processors.py."""

from __future__ import annotations

import logging

import pytest

from assetpipe.config.processors import CSS, JAVASCRIPT, default_registry
from assetpipe.pipeline.plugin_kit.base_processor import CallableProcessor, as_processor
from assetpipe.pipeline.processors.charset_normalizer import CharsetNormalizer
from assetpipe.pipeline.processors.directive_processor import DirectiveProcessor
from assetpipe.pipeline.processors.safety_colons import SafetyColons
from assetpipe.pipeline.registry import (
    DEFAULT_CONTENT_TYPE,
    ProcessorRegistry,
    RegistryError,
)


def upper(context, data):
    return data.upper()


def strip(context, data):
    return data.strip()


@pytest.fixture
def registry() -> ProcessorRegistry:
    reg = ProcessorRegistry()
    reg.register_mime_type(JAVASCRIPT, ".js")
    reg.register_mime_type(CSS, "css")
    return reg


class TestContentTypes:
    def test_by_extension(self, registry):
        assert registry.content_type_of("/a/b.js") == JAVASCRIPT
        assert registry.content_type_of("b.CSS") == CSS

    def test_unknown_is_octet_stream(self, registry):
        assert registry.content_type_of("README") == DEFAULT_CONTENT_TYPE
        assert registry.content_type_of("a.xyz") == DEFAULT_CONTENT_TYPE

    def test_engine_extension_stripped(self, registry):
        registry.register_engine(".upper", upper)
        assert registry.content_type_of("a.js.upper") == JAVASCRIPT

    def test_engine_mime_type_fallback(self, registry):
        registry.register_engine(".coffee", upper, mime_type=JAVASCRIPT)
        assert registry.content_type_of("a.coffee") == JAVASCRIPT

    def test_encoding(self, registry):
        registry.register_mime_type("text/x-legacy", ".lgc", encoding="latin-1")
        assert registry.encoding_for("text/x-legacy") == "latin-1"
        assert registry.encoding_for(JAVASCRIPT, default="utf-16") == "utf-16"


class TestEngines:
    def test_engine_extensions_outermost_last(self, registry):
        registry.register_engine(".upper", upper)
        registry.register_engine(".strip", strip)
        assert registry.engine_extensions_for("a.js.strip.upper") == [".strip", ".upper"]

    def test_non_engine_extension_stops_scan(self, registry):
        registry.register_engine(".upper", upper)
        assert registry.engine_extensions_for("a.upper.js") == []

    def test_overwrite_warns(self, registry, caplog):
        registry.register_engine(".upper", upper)
        with caplog.at_level(logging.WARNING):
            registry.register_engine(".upper", strip)
        assert "Overwriting" in caplog.text

    def test_unregister(self, registry):
        registry.register_engine(".upper", upper)
        registry.unregister_engine("upper")
        assert registry.engine_extensions == []
        with pytest.raises(RegistryError):
            registry.unregister_engine(".upper")


class TestProcessorChain:
    def test_order(self, registry):
        pre = as_processor(strip)
        post = SafetyColons()
        registry.register_preprocessor(JAVASCRIPT, pre)
        registry.register_postprocessor(JAVASCRIPT, post)
        registry.register_engine(".upper", upper)
        registry.register_engine(".strip", strip)
        chain = registry.processors_for("a.js.strip.upper")
        # engines run right to left
        assert [p.name for p in chain] == ["strip", "upper", "strip", "safety_colons"]

    def test_empty_chain_for_static(self, registry):
        assert registry.processors_for("logo.png") == []

    def test_unregister_callable(self, registry):
        registry.register_preprocessor(JAVASCRIPT, upper)
        registry.unregister_preprocessor(JAVASCRIPT, upper)
        assert registry.preprocessors(JAVASCRIPT) == []

    def test_unregister_unknown(self, registry):
        with pytest.raises(RegistryError, match="not a registered postprocessor"):
            registry.unregister_postprocessor(JAVASCRIPT, upper)

    def test_bundle_processors(self, registry):
        normalizer = CharsetNormalizer()
        registry.register_bundle_processor(CSS, normalizer)
        assert registry.bundle_processors_for(CSS) == [normalizer]
        registry.unregister_bundle_processor(CSS, normalizer)
        assert registry.bundle_processors_for(CSS) == []

    def test_returned_lists_are_copies(self, registry):
        registry.register_preprocessor(JAVASCRIPT, upper)
        registry.preprocessors(JAVASCRIPT).clear()
        assert len(registry.preprocessors(JAVASCRIPT)) == 1


class TestCallableProcessor:
    def test_equality_by_function(self):
        assert CallableProcessor(upper) == CallableProcessor(upper)
        assert CallableProcessor(upper) != CallableProcessor(strip)

    def test_name_defaults_to_function_name(self):
        assert CallableProcessor(upper).name == "upper"
        assert CallableProcessor(upper, name="shout").name == "shout"

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            as_processor("nope")  # type: ignore[arg-type]


class TestDefaultRegistry:
    def test_js_chain(self):
        chain = default_registry().processors_for("app.js")
        assert isinstance(chain[0], DirectiveProcessor)
        assert isinstance(chain[-1], SafetyColons)

    def test_css_chain(self):
        registry = default_registry()
        assert [type(p) for p in registry.processors_for("app.css")] == [DirectiveProcessor]
        assert [type(p) for p in registry.bundle_processors_for(CSS)] == [CharsetNormalizer]

    def test_images_are_static(self):
        assert default_registry().processors_for("logo.png") == []
        assert default_registry().content_type_of("logo.png") == "image/png"
