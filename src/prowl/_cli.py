"""Prowl CLI: prowl watch / prowl build.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from prowl.config import DEFAULT_CONFIG_FILE


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        action="append",
        default=None,
        help=f"Configuration file (repeatable, default {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--ext",
        action="append",
        default=[],
        dest="extensions",
        help="Extra content extension (repeatable)",
    )
    parser.add_argument("--drafts", action="store_true", help="Render drafts")
    parser.add_argument("--future", action="store_true", help="Render future posts")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument("--prefix", default="Prowl", help="Status line prefix")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Change-driven build orchestrator for static sites.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Build, then rebuild or sync on every change",
    )
    _add_common(watch_parser)
    watch_parser.add_argument(
        "--serve", action="store_true", help="Run the preview server",
    )
    watch_parser.add_argument(
        "--server-config", default=None, help="Python file defining an ASGI app",
    )

    # prowl build
    build_parser = subparsers.add_parser(
        "build",
        help="Run one full build",
    )
    _add_common(build_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def _options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {
        "extensions": tuple(args.extensions),
        "drafts": args.drafts,
        "future": args.future,
        "silent": args.silent,
        "msg_prefix": args.prefix,
    }
    if args.config:
        options["config"] = tuple(args.config)
    return options


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from prowl.app import build, watch

    if args.command == "watch":
        watch(serve=args.serve, server_config=args.server_config, **_options(args))
    elif args.command == "build":
        if not build(**_options(args)):
            sys.exit(1)


if __name__ == "__main__":
    main()
