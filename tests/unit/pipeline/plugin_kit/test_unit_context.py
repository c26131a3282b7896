# tests/unit/pipeline/plugin_kit/test_unit_context.py - v1
"""Tests for pipeline/plugin_kit/context.py and pipeline/runner.py."""

from __future__ import annotations

import pytest

from assetpipe.core.errors import ContentTypeMismatch, FileNotFound
from assetpipe.pipeline.plugin_kit.base_processor import as_processor
from assetpipe.pipeline.plugin_kit.context import ProcessingContext
from assetpipe.pipeline.runner import ProcessorPipeline


class TestResolution:
    def test_extension_borrowed(self, env, write_asset):
        a = write_asset("a.js")
        b = write_asset("b.js")
        assert ProcessingContext(env, a).resolve("b") == b

    def test_relative_to_file(self, env, write_asset):
        a = write_asset("lib/a.js")
        b = write_asset("lib/b.js")
        write_asset("b.js")
        assert ProcessingContext(env, a).resolve("./b") == b

    def test_parent_relative(self, env, write_asset):
        a = write_asset("lib/deep/a.js")
        b = write_asset("lib/b.js")
        assert ProcessingContext(env, a).resolve("../b.js") == b

    def test_bare_name_goes_through_roots(self, env, write_asset):
        a = write_asset("lib/a.js")
        top = write_asset("b.js")
        write_asset("lib/b.js")
        assert ProcessingContext(env, a).resolve("b") == top

    def test_resolve_directory(self, env, write_asset, asset_root):
        a = write_asset("a.js")
        write_asset("lib/x.js")
        context = ProcessingContext(env, a)
        assert context.resolve_directory("./lib") == str((asset_root / "lib").resolve())
        with pytest.raises(FileNotFound, match="could not find directory"):
            context.resolve_directory("./missing")


class TestDeclarations:
    def test_require_asset_deduplicates(self, env, write_asset):
        a = write_asset("a.js")
        b = write_asset("b.js")
        context = ProcessingContext(env, a)
        context.require_asset("b")
        context.require_asset("b.js")
        assert context.required_paths == [b]

    def test_require_asset_type_mismatch(self, env, write_asset):
        a = write_asset("a.js")
        write_asset("b.css")
        with pytest.raises(ContentTypeMismatch, match="b.css is 'text/css'"):
            ProcessingContext(env, a).require_asset("b.css")

    def test_stub_asset(self, env, write_asset):
        a = write_asset("a.js")
        b = write_asset("b.js")
        context = ProcessingContext(env, a)
        context.stub_asset("b")
        assert context.stubbed_paths == [b]
        assert context.required_paths == []

    def test_dependencies_start_with_self(self, env, write_asset):
        a = write_asset("a.js")
        assert ProcessingContext(env, a).dependency_paths == [a]

    def test_depend_on_directory(self, env, write_asset, asset_root):
        a = write_asset("a.js")
        write_asset("lib/x.js")
        context = ProcessingContext(env, a)
        directory = context.depend_on("./lib")
        assert directory == str((asset_root / "lib").resolve())
        assert context.dependency_paths == [a, directory]

    def test_depend_on_missing(self, env, write_asset):
        a = write_asset("a.js")
        with pytest.raises(FileNotFound):
            ProcessingContext(env, a).depend_on("missing.json")


class TestProcessorPipeline:
    def test_runs_in_order_and_collects(self, env, write_asset):
        a = write_asset("a.js")
        b = write_asset("b.js")

        def declare(context, data):
            context.require_asset("b")
            return data + "1"

        def append(context, data):
            return data + "2"

        result = ProcessorPipeline(env).run(
            [as_processor(declare), as_processor(append)], a, "x"
        )
        assert result.data == "x12"
        assert result.required_paths == [b]
        assert result.dependency_paths == [a]

    def test_empty_chain_returns_input(self, env, write_asset):
        a = write_asset("a.js")
        result = ProcessorPipeline(env).run([], a, "x")
        assert result.data == "x"
        assert result.required_paths == []

    def test_processor_errors_propagate(self, env, write_asset):
        a = write_asset("a.js")

        def boom(context, data):
            raise RuntimeError("processor failed")

        with pytest.raises(RuntimeError, match="processor failed"):
            ProcessorPipeline(env).run([as_processor(boom)], a, "x")
