# src/pipeline/processors/directive_processor.py - v1
"""Dependency directives declared in a file's leading comment block.

Recognized in ``//=``, ``#=`` and ``*=`` (inside ``/* */``) comment lines
at the top of a file::

    //= require jquery
    //= require_self
    //= require_directory ./widgets
    //= require_tree ./lib
    //= depend_on ./config.json
    //= stub legacy

Directive lines are removed from the output; other header lines and the
body are left untouched. Unknown directive names are left in place.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
from typing import TYPE_CHECKING, Callable

from assetpipe.core.errors import ProcessorError
from assetpipe.pipeline.plugin_kit.base_processor import BaseProcessor

if TYPE_CHECKING:
    from assetpipe.pipeline.plugin_kit.context import ProcessingContext

logger = logging.getLogger(__name__)

# Leading run of line comments (// or #) and block comments, with whitespace.
HEADER_PATTERN = re.compile(
    r"\A(?:\s*(?://[^\n]*(?:\n|\Z)|\#[^\n]*(?:\n|\Z)|/\*.*?\*/))+",
    re.DOTALL,
)

# "//= require foo", " *= require foo", "#= require foo", "/*= require foo */"
DIRECTIVE_PATTERN = re.compile(r"^\W*=\s*(\w+.*?)(\*/)?\s*$")


class DirectiveProcessor(BaseProcessor):
    """Reads require/stub/depend_on directives and strips them from the source."""

    @property
    def name(self) -> str:
        return "directives"

    def process(self, context: ProcessingContext, data: str) -> str:
        match = HEADER_PATTERN.match(data)
        header = match.group(0) if match else ""
        body = data[len(header):]

        kept: list[str] = []
        for lineno, line in enumerate(header.splitlines(keepends=True), start=1):
            directive = self._parse(line)
            if directive is None:
                kept.append(line)
                continue
            name, args = directive
            handler = self._handlers().get(name)
            if handler is None:
                kept.append(line)
                continue
            logger.debug("%s:%d %s %s", context.logical_path, lineno, name, args)
            handler(context, args)
            # A directive inside a block comment may close the block.
            if line.rstrip().endswith("*/") and not line.lstrip().startswith("/*"):
                kept.append(" */\n" if line.endswith("\n") else " */")

        return "".join(kept) + body

    # --- Parsing ---

    @staticmethod
    def _parse(line: str) -> tuple[str, list[str]] | None:
        match = DIRECTIVE_PATTERN.match(line.rstrip("\n"))
        if not match:
            return None
        try:
            words = shlex.split(match.group(1))
        except ValueError as exc:
            raise ProcessorError(f"malformed directive {line.strip()!r}: {exc}") from exc
        return words[0], words[1:]

    def _handlers(self) -> dict[str, Callable[[ProcessingContext, list[str]], None]]:
        return {
            "require": self._require,
            "require_self": self._require_self,
            "require_directory": self._require_directory,
            "require_tree": self._require_tree,
            "depend_on": self._depend_on,
            "stub": self._stub,
        }

    # --- Directives ---

    @staticmethod
    def _expect(name: str, args: list[str], count: int) -> None:
        if len(args) != count:
            raise ProcessorError(f"{name} expects {count} argument(s), got {len(args)}")

    def _require(self, context: ProcessingContext, args: list[str]) -> None:
        self._expect("require", args, 1)
        context.require_asset(args[0])

    def _require_self(self, context: ProcessingContext, args: list[str]) -> None:
        self._expect("require_self", args, 0)
        context.require_self()

    def _require_directory(self, context: ProcessingContext, args: list[str]) -> None:
        path = args[0] if args else "."
        directory = context.resolve_directory(path)
        context.depend_on(directory)
        for name in context.host.entries(directory):
            self._require_if_same_type(context, os.path.join(directory, name))

    def _require_tree(self, context: ProcessingContext, args: list[str]) -> None:
        path = args[0] if args else "."
        self._walk_tree(context, context.resolve_directory(path))

    def _walk_tree(self, context: ProcessingContext, directory: str) -> None:
        context.depend_on(directory)
        for name in context.host.entries(directory):
            full = os.path.join(directory, name)
            stat = context.host.stat(full)
            if stat is not None and stat.is_directory:
                self._walk_tree(context, full)
            else:
                self._require_if_same_type(context, full)

    def _depend_on(self, context: ProcessingContext, args: list[str]) -> None:
        self._expect("depend_on", args, 1)
        context.depend_on(args[0])

    def _stub(self, context: ProcessingContext, args: list[str]) -> None:
        self._expect("stub", args, 1)
        context.stub_asset(args[0])

    @staticmethod
    def _require_if_same_type(context: ProcessingContext, filename: str) -> None:
        if filename == context.filename:
            return
        stat = context.host.stat(filename)
        if stat is None or not stat.is_file:
            return
        if context.host.content_type_of(filename) == context.content_type:
            context.require_filename(filename)
