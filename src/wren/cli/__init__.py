"""Wren CLI — inspect a router's route catalog.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"

Every command takes an import string naming a ``Router`` instance or a
zero-argument factory returning one (``myapp.routes:router``).
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren — a client-side application router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("router", help="Import string (e.g. myapp:router)")

    # -- wren match -------------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show which route a path matches")
    match_parser.add_argument("router", help="Import string (e.g. myapp:router)")
    match_parser.add_argument("path", help="URL path to match (e.g. /users/42)")

    # -- wren check -------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the route catalog")
    check_parser.add_argument("router", help="Import string (e.g. myapp:router)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from wren.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from wren.cli._match import run_match

        run_match(args)
    elif args.command == "check":
        from wren.cli._check import run_check

        run_check(args)
