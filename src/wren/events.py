"""Router event bus — ordered, awaited listener lists per event name.

Every lifecycle phase of a navigation is announced here. Listeners run
one after another in registration order; async listeners are awaited
before the next one starts, so a listener can rely on every earlier
phase having finished.

Event names::

    ready, before_each, before_resolve, after_resolve, after_leave,
    before_render, after_render, scroll, after_enter, after_each,
    error, route_added, route_removed
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable

from wren._internal.invoke import invoke
from wren._internal.types import Listener, Unsubscribe

logger = logging.getLogger("wren.router")

READY = "ready"
BEFORE_EACH = "before_each"
BEFORE_RESOLVE = "before_resolve"
AFTER_RESOLVE = "after_resolve"
AFTER_LEAVE = "after_leave"
BEFORE_RENDER = "before_render"
AFTER_RENDER = "after_render"
SCROLL = "scroll"
AFTER_ENTER = "after_enter"
AFTER_EACH = "after_each"
ERROR = "error"
ROUTE_ADDED = "route_added"
ROUTE_REMOVED = "route_removed"

# Navigation phases in the order one successful transition emits them
NAVIGATION_EVENTS: tuple[str, ...] = (
    BEFORE_EACH,
    BEFORE_RESOLVE,
    AFTER_RESOLVE,
    AFTER_LEAVE,
    BEFORE_RENDER,
    AFTER_RENDER,
    SCROLL,
    AFTER_ENTER,
    AFTER_EACH,
)

ALL_EVENTS: tuple[str, ...] = (READY, *NAVIGATION_EVENTS, ERROR, ROUTE_ADDED, ROUTE_REMOVED)


class EventBus:
    """Named events with ordered listener lists.

    Usage::

        bus = EventBus()
        off = bus.on("after_each", lambda to, from_: print(to.path))
        await bus.emit("after_each", to, from_)
        off()
    """

    __slots__ = ("_listeners", "_pending")

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        # Tasks spawned by emit_sync for async listeners
        self._pending: set[asyncio.Task[object]] = set()

    def on(self, event: str, listener: Listener) -> Unsubscribe:
        """Register *listener* for *event*. Returns a function that removes it."""
        self._listeners.setdefault(event, []).append(listener)
        return lambda: self.off(event, listener)

    def off(self, event: str, listener: Listener | None = None) -> None:
        """Remove one listener, or every listener of *event* when none is given."""
        if listener is None:
            self._listeners.pop(event, None)
            return
        listeners = self._listeners.get(event)
        if not listeners:
            return
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            del self._listeners[event]

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    async def emit(self, event: str, *args: object) -> None:
        """Call every listener of *event* in order, awaiting async ones.

        Exceptions propagate to the caller; the navigation engine catches
        them at the transition boundary.
        """
        for listener in self.listeners(event):
            await invoke(listener, *args)

    def emit_sync(self, event: str, *args: object) -> None:
        """Notify listeners from synchronous code.

        Sync listeners run immediately. Async listeners are scheduled on
        the running loop; with no loop running they are dropped with a
        warning.
        """
        for listener in self.listeners(event):
            result = listener(*args)
            if inspect.isawaitable(result):
                self._schedule(event, result)

    def _schedule(self, event: str, awaitable: Awaitable[object]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning("Dropped async %r listener: no running event loop", event)
            return
        task = loop.create_task(_await(event, awaitable))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for async listeners scheduled by ``emit_sync`` to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


async def _await(event: str, awaitable: Awaitable[object]) -> None:
    try:
        await awaitable
    except Exception:
        logger.exception("Async %r listener failed", event)
