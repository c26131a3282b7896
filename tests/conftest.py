# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides on-disk asset trees under tmp_path, settings that ignore any local
.env file, and environments wired to those trees.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

from assetpipe.config.settings import Settings
from assetpipe.environment import Environment
from assetpipe.logging.context import clear_context


# === FIXTURES: Configuration ===


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env lookup)."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_context()


# === FIXTURES: Asset trees ===


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    """Empty search root."""
    root = tmp_path / "assets"
    root.mkdir()
    return root


@pytest.fixture
def write_asset(asset_root: Path) -> Callable[..., str]:
    """Write a file under asset_root and return its absolute filename.

    Usage: write_asset("lib/b.js", "B\\n", mtime=1_700_000_000)
    """

    def _write(rel: str, content: str | bytes = "", mtime: float | None = None) -> str:
        path = asset_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return str(path.resolve())

    return _write


@pytest.fixture
def env(settings: Settings, asset_root: Path) -> Environment:
    """Environment with the default registry searching asset_root only."""
    return Environment(settings=settings, paths=[str(asset_root)])


@pytest.fixture
def sample_tree(write_asset) -> dict[str, str]:
    """A small JS tree: application requires jquery and the widgets dir."""
    return {
        "jquery": write_asset("jquery.js", "var $ = {};\n"),
        "application": write_asset(
            "application.js",
            "//= require jquery\n//= require_directory ./widgets\n\nstart();\n",
        ),
        "menu": write_asset("widgets/menu.js", "menu();\n"),
        "tabs": write_asset("widgets/tabs.js", "tabs();\n"),
        "logo": write_asset("logo.png", b"\x89PNG\r\n\x1a\n\x00\x01"),
    }
