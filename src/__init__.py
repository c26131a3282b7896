# src/__init__.py - v1
"""assetpipe: dependency-aware, content-addressed asset build pipeline."""

from assetpipe.version import __version__

__all__ = ["__version__"]
