"""The live route catalog.

Holds parsed ``RouteDefinition`` objects in precedence order. The initial
catalog keeps the order it was given in; routes added later are slotted
in front of the catch-all so it stays the last resort.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from wren.errors import ConfigurationError
from wren.routing.matcher import match_path, match_wildcard, parse_path
from wren.routing.route import RouteDefinition, RouteMatch

logger = logging.getLogger("wren.routing")

type Warn = Callable[[str, dict[str, Any]], None]


def _log_warning(message: str, details: dict[str, Any]) -> None:
    logger.warning(message, extra={"details": details})


def coerce_route(route: RouteDefinition | Mapping[str, Any]) -> RouteDefinition:
    """Accept a ``RouteDefinition`` or a plain mapping and return a definition."""
    if isinstance(route, RouteDefinition):
        return route
    if isinstance(route, Mapping):
        return RouteDefinition.from_mapping(route)
    msg = f"Route definition must be a RouteDefinition or mapping, got {type(route).__name__}"
    raise TypeError(msg)


def compile_route(route: RouteDefinition | Mapping[str, Any]) -> RouteDefinition:
    """Parse a definition's path into segments.

    Raises ``ConfigurationError`` when the path cannot be parsed.
    """
    definition = coerce_route(route)
    return dataclasses.replace(definition, segments=parse_path(definition.path))


def _is_catch_all(route: RouteDefinition) -> bool:
    return len(route.segments) == 1 and route.segments[0].kind == "wildcard"


class RouteRegistry:
    """Mutable, ordered catalog of route definitions.

    Usage::

        registry = RouteRegistry([{"path": "/", "component": Home}])
        registry.add({"path": "/about", "component": About})
        match = registry.match("/about")
    """

    __slots__ = ("_routes", "_warn")

    def __init__(
        self,
        routes: Iterable[RouteDefinition | Mapping[str, Any]] = (),
        *,
        warn: Warn | None = None,
    ) -> None:
        self._warn: Warn = warn or _log_warning
        self._routes: list[RouteDefinition] = []
        for route in routes:
            try:
                compiled = compile_route(route)
            except (ConfigurationError, TypeError) as exc:
                path = getattr(route, "path", None) or (
                    route.get("path") if isinstance(route, Mapping) else None
                )
                self._warn(
                    f"Invalid path in route definition {path or 'undefined'!r}: {exc}",
                    {"route": route, "error": exc},
                )
                continue
            self._routes.append(compiled)

    # -- Mutation --

    def add(self, route: RouteDefinition | Mapping[str, Any]) -> RouteDefinition | None:
        """Add a route at runtime, ahead of any catch-all route.

        Returns the parsed definition, or ``None`` when the route was
        rejected (missing path or duplicate path — both warned).
        Raises ``ConfigurationError`` for a malformed path.
        """
        definition = coerce_route(route)
        if not definition.path:
            self._warn("Invalid route definition: missing path", {"route": definition})
            return None
        if self.has(definition.path):
            self._warn(f"Route {definition.path!r} already exists", {"route": definition})
            return None

        compiled = compile_route(definition)
        for index, existing in enumerate(self._routes):
            if _is_catch_all(existing):
                self._routes.insert(index, compiled)
                break
        else:
            self._routes.append(compiled)
        logger.debug("route added: %s", compiled.path)
        return compiled

    def remove(self, path: str) -> RouteDefinition | None:
        """Remove the route registered under *path*; return it, or ``None``."""
        for index, route in enumerate(self._routes):
            if route.path == path:
                del self._routes[index]
                logger.debug("route removed: %s", path)
                return route
        return None

    # -- Lookup --

    def has(self, path: str) -> bool:
        return any(route.path == path for route in self._routes)

    def get(self, path: str) -> RouteDefinition | None:
        for route in self._routes:
            if route.path == path:
                return route
        return None

    @property
    def routes(self) -> list[RouteDefinition]:
        """A copy of the catalog, in precedence order."""
        return list(self._routes)

    def match(self, path: str) -> RouteMatch | None:
        """Match *path* in catalog order, falling back to the ``*`` route."""
        return match_path(path, self._routes) or match_wildcard(path, self._routes)

    def __iter__(self) -> Iterator[RouteDefinition]:
        return iter(list(self._routes))

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.has(path)
