"""Guard pipeline — the ordered checks that decide whether a transition proceeds.

Stages, each able to stop the rest:

1. ``before_each`` event with a mutable ``NavigationContext``
   (listeners cancel or redirect by mutating it)
2. global guards, in registration order
3. ``before_leave`` of the route being left
4. ``before_enter`` of the route being entered

A guard's return value decides the outcome: ``False`` aborts, a path
string, target mapping or ``NavigationTarget`` redirects, anything else
(``None``, ``True``) continues. Guards may be async; each is awaited
before the next runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wren._internal.invoke import invoke
from wren.contexts import NavigationContext
from wren.events import BEFORE_EACH, EventBus
from wren.routing.route import NavigationTarget

if TYPE_CHECKING:
    from wren._internal.types import Guard
    from wren.contexts import RedirectTarget
    from wren.routing.route import RouteDefinition, RouteLocation

logger = logging.getLogger("wren.router")


@dataclass(frozen=True, slots=True)
class GuardOutcome:
    """Result of running the pipeline. Truthy when the transition may proceed."""

    allowed: bool
    redirect: RedirectTarget | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = GuardOutcome(allowed=True)
ABORT = GuardOutcome(allowed=False)


def interpret_guard_result(result: Any) -> GuardOutcome:
    """Map a guard's return value onto allow / abort / redirect."""
    if result is False:
        return ABORT
    if isinstance(result, (str, Mapping, NavigationTarget)):
        return GuardOutcome(allowed=False, redirect=result)
    return ALLOW


class GuardPipeline:
    """Runs the guard stages for one transition.

    *guards* is the router's live list of global guards; guards added or
    removed between navigations are picked up on the next run.
    """

    __slots__ = ("_events", "_guards")

    def __init__(self, events: EventBus, guards: Sequence[Guard]) -> None:
        self._events = events
        self._guards = guards

    async def run(
        self,
        to: RouteLocation,
        from_: RouteLocation | None,
        route: RouteDefinition,
    ) -> GuardOutcome:
        context = NavigationContext(to=to, from_=from_)
        await self._events.emit(BEFORE_EACH, context)
        if context.cancelled:
            logger.debug("navigation to %s cancelled by before_each listener", to.path)
            return ABORT
        if context.redirect_to:
            return GuardOutcome(allowed=False, redirect=context.redirect_to)

        guards: list[Guard] = list(self._guards)
        if from_ is not None and from_.matched.before_leave is not None:
            guards.append(from_.matched.before_leave)
        if route.before_enter is not None:
            guards.append(route.before_enter)

        for guard in guards:
            outcome = interpret_guard_result(await invoke(guard, to, from_))
            if not outcome:
                logger.debug(
                    "navigation to %s stopped by guard %s",
                    to.path,
                    getattr(guard, "__name__", guard),
                )
                return outcome
        return ALLOW
