"""``wren check`` — static validation of a router's route catalog.

Reports, without navigating:

- routes shadowed by an earlier catch-all route
- component or layout names missing from the component registry
- inline mapping components without a template

Exits with code 1 if any problem is found.
"""

import argparse
import sys
from collections.abc import Mapping

from wren.cli._resolve import load_router
from wren.router import Router


def _check_ref(router: Router, path: str, role: str, ref: object) -> list[str]:
    if isinstance(ref, str):
        if ref not in router.components:
            return [f"{path}: {role} {ref!r} is not registered"]
    elif isinstance(ref, Mapping) and "template" not in ref:
        return [f"{path}: {role} mapping has no template"]
    return []


def collect_problems(router: Router) -> list[str]:
    """Every problem found in *router*'s catalog, in catalog order."""
    problems: list[str] = []
    catch_all: str | None = None
    for route in router.get_routes():
        if catch_all is not None:
            problems.append(f"{route.path}: unreachable, shadowed by {catch_all!r}")
        if len(route.segments) == 1 and route.segments[0].kind == "wildcard":
            catch_all = catch_all or route.path
        if route.component is None:
            problems.append(f"{route.path}: no component")
        problems.extend(_check_ref(router, route.path, "component", route.component))
        problems.extend(_check_ref(router, route.path, "layout", route.layout))
    return problems


def run_check(args: argparse.Namespace) -> None:
    router = load_router(args.router)
    problems = collect_problems(router)
    if not problems:
        print(f"{len(router.get_routes())} routes OK")
        return
    for problem in problems:
        print(problem, file=sys.stderr)
    print(f"{len(problems)} problem(s) found", file=sys.stderr)
    raise SystemExit(1)
