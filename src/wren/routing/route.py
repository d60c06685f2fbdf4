"""Route definitions, resolved locations, and navigation targets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from wren._internal.types import Guard, Hook

WILDCARD = "*"


@dataclass(frozen=True, slots=True)
class Segment:
    """A parsed segment of a route path.

    Static:  ``/users``  (kind="static", value="users")
    Param:   ``/:id``    (kind="param", name="id")
    Rest:    ``/*``      (kind="wildcard", name="pathMatch"), last segment only
    """

    kind: Literal["static", "param", "wildcard"]
    value: str = ""
    name: str | None = None

    @property
    def is_param(self) -> bool:
        return self.kind == "param"


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A route in the catalog.

    ``component`` and ``layout`` accept any component reference the
    resolver understands: a registered name, a ``ComponentDefinition``,
    a template mapping, a factory function, or a ``Lazy`` loader.

    ``segments`` is filled in by the catalog when the definition is
    added; definitions built by hand start with an empty tuple.
    """

    path: str
    component: Any
    layout: Any = None
    name: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    before_enter: Guard | None = None
    after_enter: Hook | None = None
    before_leave: Guard | None = None
    after_leave: Hook | None = None
    segments: tuple[Segment, ...] = ()

    @property
    def is_wildcard(self) -> bool:
        return self.path == WILDCARD

    @property
    def guards(self) -> tuple[str, ...]:
        """Names of the hooks this route declares, for introspection."""
        return tuple(
            hook
            for hook in ("before_enter", "after_enter", "before_leave", "after_leave")
            if getattr(self, hook) is not None
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteDefinition:
        """Build a definition from a plain dict such as ``{"path": "/", "component": Home}``."""
        known = {
            "path",
            "component",
            "layout",
            "name",
            "meta",
            "before_enter",
            "after_enter",
            "before_leave",
            "after_leave",
        }
        unknown = set(data) - known
        if unknown:
            msg = f"Unknown route definition keys: {', '.join(sorted(unknown))}"
            raise TypeError(msg)
        return cls(
            path=data.get("path", ""),
            component=data.get("component"),
            layout=data.get("layout"),
            name=data.get("name"),
            meta=dict(data.get("meta") or {}),
            before_enter=data.get("before_enter"),
            after_enter=data.get("after_enter"),
            before_leave=data.get("before_leave"),
            after_leave=data.get("after_leave"),
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: RouteDefinition
    params: dict[str, str]


@dataclass(frozen=True, slots=True)
class RouteLocation:
    """A concrete location resolved against the catalog.

    Created fresh on every successful match and held in the router's
    ``current_route`` signal. ``params`` has a value for every param
    segment of ``matched``.
    """

    path: str
    query: dict[str, str]
    full_url: str
    params: dict[str, str]
    meta: Mapping[str, Any]
    matched: RouteDefinition
    name: str | None = None


@dataclass(frozen=True, slots=True)
class NavigationTarget:
    """Object form of a ``Router.navigate()`` target.

    ``path`` may contain ``:name`` placeholders filled from ``params``.
    """

    path: str
    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    replace: bool = False
    state: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(
        cls,
        location: str | Mapping[str, Any] | NavigationTarget,
        params: Mapping[str, Any] | None = None,
    ) -> NavigationTarget:
        """Normalize every accepted ``navigate()`` argument shape."""
        if isinstance(location, NavigationTarget):
            return location
        if isinstance(location, str):
            return cls(path=location, params=dict(params or {}))
        if isinstance(location, Mapping):
            if "path" not in location:
                msg = "Navigation target mapping requires a 'path' key"
                raise TypeError(msg)
            return cls(
                path=location["path"],
                params=dict(location.get("params") or {}),
                query=dict(location.get("query") or {}),
                replace=bool(location.get("replace", False)),
                state=dict(location.get("state") or {}),
            )
        msg = f"Cannot navigate to {type(location).__name__}: expected a path or target"
        raise TypeError(msg)
