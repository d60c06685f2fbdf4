"""``wren match`` — show which route a path resolves to, and its params."""

import argparse
import sys

from wren.cli._resolve import load_router
from wren.routing.location import parse_query, split_url


def run_match(args: argparse.Namespace) -> None:
    """Print the matched route pattern, params and query. Exit 1 when nothing matches."""
    router = load_router(args.router)
    path, query_string = split_url(args.path)
    match = router.registry.match(path)
    if match is None:
        print(f"Route not found: {path}", file=sys.stderr)
        raise SystemExit(1)

    print(f"route:  {match.route.path}")
    if match.route.name:
        print(f"name:   {match.route.name}")
    for key, value in match.params.items():
        print(f"param:  {key} = {value}")
    for key, value in parse_query(query_string).items():
        print(f"query:  {key} = {value}")
