"""Path pattern parsing and catalog matching.

Patterns are parsed once into segment tuples when a route enters the
catalog. Matching walks the catalog in order and returns the first full
match, so earlier, more specific routes win over later catch-alls.
"""

import re
from collections.abc import Iterable
from urllib.parse import unquote

from wren.errors import ConfigurationError
from wren.routing.route import WILDCARD, RouteDefinition, RouteMatch, Segment

_REPEATED_SLASHES = re.compile(r"/+")

# Param name bound to the remainder of the path by a trailing ``*``
PATH_MATCH = "pathMatch"


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and strip the trailing one.

    ``""`` and ``"/"`` both normalize to ``"/"``; a missing leading slash
    is added.
    """
    normalized = _REPEATED_SLASHES.sub("/", path).rstrip("/")
    if not normalized:
        return "/"
    if not normalized.startswith("/"):
        normalized = f"/{normalized}"
    return normalized


def split_path(path: str) -> list[str]:
    """Split a concrete path into its non-empty segments."""
    return [part for part in normalize_path(path).split("/") if part]


def parse_path(pattern: str) -> tuple[Segment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/"            -> ()
        "/users"       -> (Segment("static", "users"),)
        "/users/:id"   -> (Segment("static", "users"), Segment("param", name="id"))
        "/files/*"     -> (Segment("static", "files"), Segment("wildcard", WILDCARD))
        "*"            -> (Segment("wildcard", WILDCARD),)

    Raises ``ConfigurationError`` for an empty pattern, a ``:`` with no
    name, or a ``*`` anywhere but the last segment.
    """
    if not isinstance(pattern, str) or not pattern:
        msg = f"Route path must be a non-empty string, got {pattern!r}"
        raise ConfigurationError(msg)

    parts = split_path(pattern)
    segments: list[Segment] = []
    for index, part in enumerate(parts):
        if part.startswith(":"):
            name = part[1:]
            if not name:
                msg = f"Invalid parameter segment {part!r} in route path {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(Segment("param", name=name))
        elif part == WILDCARD:
            if index != len(parts) - 1:
                msg = f"Wildcard must be the last segment of route path {pattern!r}"
                raise ConfigurationError(msg)
            segments.append(Segment("wildcard", WILDCARD, name=PATH_MATCH))
        else:
            segments.append(Segment("static", part))
    return tuple(segments)


def match_route(route: RouteDefinition, parts: list[str]) -> dict[str, str] | None:
    """Match pre-split path *parts* against one route.

    Returns the extracted params, or ``None`` when the route does not
    match. Static segments compare case-sensitively; param segments bind
    the URL-decoded path segment.
    """
    segments = route.segments
    if not segments:
        return {} if not parts else None

    has_wildcard = segments[-1].kind == "wildcard"
    fixed = segments[:-1] if has_wildcard else segments
    if has_wildcard:
        if len(parts) < len(fixed):
            return None
    elif len(parts) != len(fixed):
        return None

    params: dict[str, str] = {}
    for segment, part in zip(fixed, parts, strict=False):
        if segment.kind == "param":
            params[segment.name or ""] = unquote(part)
        elif segment.value != part:
            return None

    if has_wildcard:
        params[PATH_MATCH] = unquote("/".join(parts[len(fixed):]))
    return params


def match_path(path: str, routes: Iterable[RouteDefinition]) -> RouteMatch | None:
    """Return the first route in catalog order that fully matches *path*."""
    parts = split_path(path)
    for route in routes:
        params = match_route(route, parts)
        if params is not None:
            return RouteMatch(route=route, params=params)
    return None


def match_wildcard(path: str, routes: Iterable[RouteDefinition]) -> RouteMatch | None:
    """Fall back to the catch-all route (``path == "*"``) if one is registered.

    ``params["pathMatch"]`` is the decoded path without its leading slash.
    """
    for route in routes:
        if route.is_wildcard:
            remainder = normalize_path(path).lstrip("/")
            return RouteMatch(route=route, params={PATH_MATCH: unquote(remainder)})
    return None
