# src/main.py - v3
"""CLI entry point: build and deps commands.

Usage:
    assetpipe build <path> [-I root]... [--no-bundle] [-o dir]
    assetpipe deps <path> [-I root]...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from assetpipe.config.settings import ConfigurationError, load_settings
from assetpipe.core.errors import AssetError
from assetpipe.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from assetpipe.logging.logger import setup_logging_from_settings

    overrides: dict[str, object] = {}
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if args.version_string is not None:
        overrides["asset_version"] = args.version_string
    try:
        settings = load_settings(**overrides)
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    setup_logging_from_settings(settings)

    try:
        return args.func(args, settings)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (AssetError, ConfigurationError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="assetpipe",
        description=f"assetpipe v{__version__} - dependency-aware asset builder",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-I", "--include", dest="paths", action="append", default=[],
        help="Search root (repeatable, highest priority first)",
    )
    common.add_argument(
        "--asset-version", dest="version_string", default=None,
        help="User version mixed into every digest",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- build ---
    p_build = subparsers.add_parser(
        "build", parents=[common], help="Build one asset",
    )
    p_build.add_argument("path", help="Logical or absolute path of the asset")
    p_build.add_argument(
        "--no-bundle", action="store_true",
        help="Build the file alone, without its required dependencies",
    )
    p_build.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write the built source to <output>/<digest path> instead of printing a summary",
    )
    p_build.set_defaults(func=_cmd_build)

    # --- deps ---
    p_deps = subparsers.add_parser(
        "deps", parents=[common], help="List the files a bundle is made of",
    )
    p_deps.add_argument("path", help="Logical or absolute path of the asset")
    p_deps.set_defaults(func=_cmd_deps)

    return parser


def _environment(args: argparse.Namespace, settings):
    from assetpipe.environment import Environment

    paths = args.paths or settings.asset_paths_list or [str(Path.cwd())]
    return Environment(settings=settings, paths=paths)


def _cmd_build(args: argparse.Namespace, settings) -> int:
    """Build one asset and print its summary or write it out."""
    env = _environment(args, settings)
    record = env.find_asset(args.path, bundle=not args.no_bundle)

    if args.output is None:
        summary = record.model_dump(mode="json", exclude={"source"})
        summary["digest_path"] = record.digest_path
        print(json.dumps(summary, indent=2))
        return 0

    target = args.output / record.digest_path
    target.parent.mkdir(parents=True, exist_ok=True)
    if record.source is None:
        target.write_bytes(Path(record.filename).read_bytes())
    else:
        target.write_text(record.source, encoding="utf-8")
    logger.info("Wrote %s (%d bytes)", target, record.length)
    print(target)
    return 0


def _cmd_deps(args: argparse.Namespace, settings) -> int:
    """Print a bundle's member files in concatenation order."""
    env = _environment(args, settings)
    record = env.find_asset(args.path, bundle=True)
    for path in record.required_paths or (record.filename,):
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
