"""Router context handed to every mounted layout, page and child component.

Components read it as ``ctx["router"]`` in ``setup`` and as ``router`` in
templates::

    UserPage = ComponentDefinition(
        template="<h1>User {{ router.params.id }}</h1>",
    )

All properties read the router's ``current_route`` signal at access
time, so a component that outlives a navigation sees the new location.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.router import Router
    from wren.routing.route import RouteLocation
    from wren.signals import Signal


class RouterContext:
    __slots__ = ("_router",)

    def __init__(self, router: Router) -> None:
        self._router = router

    @property
    def navigate(self):
        return self._router.navigate

    @property
    def current(self) -> Signal[RouteLocation | None]:
        return self._router.current_route

    @property
    def previous(self) -> Signal[RouteLocation | None]:
        return self._router.previous_route

    @property
    def params(self) -> dict[str, str]:
        route = self.current.value
        return route.params if route is not None else {}

    @property
    def query(self) -> dict[str, str]:
        route = self.current.value
        return route.query if route is not None else {}

    @property
    def path(self) -> str:
        route = self.current.value
        return route.path if route is not None else "/"

    @property
    def full_url(self) -> str:
        route = self.current.value
        return route.full_url if route is not None else self._router.browser.location.href

    @property
    def meta(self) -> Mapping[str, Any]:
        route = self.current.value
        return route.meta if route is not None else {}

    def __repr__(self) -> str:
        return f"<RouterContext {self.path}>"
