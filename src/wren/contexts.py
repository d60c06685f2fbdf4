"""Per-phase context objects passed to navigation event listeners.

Each context lives for one phase of one transition. Listeners of
``before_each`` and ``before_resolve`` may set ``cancelled`` or
``redirect_to`` to stop the transition; the other contexts are
informational.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.components.definition import ComponentDefinition
    from wren.routing.route import NavigationTarget, RouteDefinition, RouteLocation

type RedirectTarget = str | dict[str, Any] | NavigationTarget


@dataclass(slots=True)
class NavigationContext:
    """Passed to ``before_each`` listeners before any guard runs."""

    to: RouteLocation
    from_: RouteLocation | None
    cancelled: bool = False
    redirect_to: RedirectTarget | None = None

    def cancel(self) -> None:
        self.cancelled = True

    def redirect(self, target: RedirectTarget) -> None:
        self.redirect_to = target


@dataclass(slots=True)
class ResolveContext:
    """Passed to ``before_resolve`` and ``after_resolve``.

    The component fields are filled in after resolution, so they are
    ``None`` in ``before_resolve``.
    """

    to: RouteLocation
    from_: RouteLocation | None
    route: RouteDefinition
    layout_component: ComponentDefinition | None = None
    page_component: ComponentDefinition | None = None
    cancelled: bool = False
    redirect_to: RedirectTarget | None = None

    def cancel(self) -> None:
        self.cancelled = True

    def redirect(self, target: RedirectTarget) -> None:
        self.redirect_to = target


@dataclass(slots=True)
class RenderContext:
    """Passed to ``before_render`` and ``after_render``."""

    to: RouteLocation
    from_: RouteLocation | None
    layout_component: ComponentDefinition | None
    page_component: ComponentDefinition


@dataclass(slots=True)
class ScrollContext:
    """Passed to ``scroll`` after render.

    ``saved_position`` is the ``(x, y)`` offset remembered for ``to.path``
    when the transition came from browser back/forward, else ``None``.
    """

    to: RouteLocation
    from_: RouteLocation | None
    saved_position: tuple[float, float] | None = None
