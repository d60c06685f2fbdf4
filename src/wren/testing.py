"""Test utilities for wren routers.

Builds routers against an in-memory browser and records the events a
navigation emits::

    from wren.testing import EventRecorder, make_router

    router = make_router([{"path": "/", "component": {"template": "<p>home</p>"}}])
    recorder = EventRecorder(router)
    await router.start()
    assert recorder.names == ["before_each", "before_resolve", ...]
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wren.browser import MemoryBrowser
from wren.config import RouterConfig
from wren.events import ALL_EVENTS
from wren.router import Router
from wren.routing.route import RouteDefinition


@dataclass(frozen=True, slots=True)
class RecordedEvent:
    """One emitted event and its arguments."""

    name: str
    args: tuple[Any, ...]


class EventRecorder:
    """Subscribes to every router event and keeps them in emission order."""

    __slots__ = ("_unsubscribe", "events")

    def __init__(self, router: Router, events: Iterable[str] = ALL_EVENTS) -> None:
        self.events: list[RecordedEvent] = []
        self._unsubscribe = [router.on(name, self._listener(name)) for name in events]

    def _listener(self, name: str):
        def record(*args: Any) -> None:
            self.events.append(RecordedEvent(name, args))

        return record

    @property
    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def of(self, name: str) -> list[RecordedEvent]:
        """Recorded events called *name*."""
        return [event for event in self.events if event.name == name]

    def clear(self) -> None:
        self.events.clear()

    def close(self) -> None:
        """Stop recording."""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []


def make_router(
    routes: Iterable[RouteDefinition | Mapping[str, Any]] = (),
    *,
    mode: str = "history",
    url: str = "/",
    html: str = '<div id="app"></div>',
    components: Mapping[str, Any] | None = None,
    **config: Any,
) -> Router:
    """A router on a fresh ``MemoryBrowser`` that waits for ``await router.start()``."""
    config.setdefault("auto_start", False)
    return Router(
        RouterConfig(mode=mode, **config),
        routes=routes,
        components=components,
        browser=MemoryBrowser(url, html=html),
    )
