"""``wren routes`` — list the route catalog in precedence order."""

import argparse

from wren.cli._resolve import describe_component, load_router


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of PATH, NAME, COMPONENT, LAYOUT and GUARDS."""
    router = load_router(args.router)
    routes = router.get_routes()
    if not routes:
        print("No routes registered.")
        return

    rows = [
        (
            route.path,
            route.name or "-",
            describe_component(route.component),
            describe_component(route.layout),
            ", ".join(route.guards) or "-",
        )
        for route in routes
    ]
    headers = ("PATH", "NAME", "COMPONENT", "LAYOUT", "GUARDS")
    widths = [max(len(header), *(len(row[i]) for row in rows)) for i, header in enumerate(headers)]

    fmt = "  ".join(f"{{:<{width}}}" for width in widths[:-1]) + "  {}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row))
