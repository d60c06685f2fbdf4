"""Browser host — location, session history, scroll, and events.

The router talks to the browser only through the ``Browser`` protocol.
``MemoryBrowser`` implements it in memory with a session-history stack,
for headless apps and tests::

    browser = MemoryBrowser("/", html='<div id="app"></div>')
    router = Router(RouterConfig(mode="history"), routes=routes, browser=browser)
    await router.start()
    await router.navigate("/about")
    await browser.back()          # dispatches popstate, router re-renders "/"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urljoin, urlsplit

from wren._internal.invoke import invoke
from wren._internal.types import Listener, Unsubscribe
from wren.rendering.dom import Document, Element

_BASE = "http://wren.local"


@dataclass(frozen=True, slots=True)
class Location:
    """The parts of a URL the router reads.

    ``search`` keeps its leading ``?`` and ``hash`` its leading ``#``
    (both empty when absent), as ``window.location`` does.
    """

    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @property
    def href(self) -> str:
        return f"{self.pathname}{self.search}{self.hash}"

    @classmethod
    def parse(cls, url: str, base: Location | None = None) -> Location:
        """Parse *url*, resolving it against *base* when relative."""
        absolute = urljoin(f"{_BASE}{base.href if base else '/'}", url)
        parts = urlsplit(absolute)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )


class Browser(Protocol):
    """What the router needs from its host environment."""

    document: Any

    @property
    def location(self) -> Location: ...

    def push_state(self, state: dict[str, Any], url: str) -> None: ...

    def replace_state(self, state: dict[str, Any], url: str) -> None: ...

    async def set_hash(self, fragment: str) -> None: ...

    def scroll_position(self) -> tuple[float, float] | None: ...

    def add_event_listener(self, event: str, listener: Listener) -> Unsubscribe: ...


@dataclass(slots=True)
class HistoryEntry:
    location: Location
    state: dict[str, Any] = field(default_factory=dict)


class MemoryBrowser:
    """In-memory ``Browser`` with a session-history stack.

    ``push_state``/``replace_state`` never fire events, like the real
    History API. ``set_hash`` fires ``hashchange``; ``back``, ``forward``
    and ``go`` fire ``popstate`` and, when the hash differs, ``hashchange``.
    Listeners are awaited in registration order.

    Pass ``scrollable=False`` to model a host with no scroll API.
    """

    def __init__(
        self,
        url: str = "/",
        *,
        html: str = '<div id="app"></div>',
        scrollable: bool = True,
    ) -> None:
        self.document = Document(html)
        self._entries: list[HistoryEntry] = [HistoryEntry(Location.parse(url))]
        self._index = 0
        self._listeners: dict[str, list[Listener]] = {}
        self._scroll: tuple[float, float] | None = (0.0, 0.0) if scrollable else None

    # -- Location / history --

    @property
    def location(self) -> Location:
        return self._entries[self._index].location

    @property
    def state(self) -> dict[str, Any]:
        return self._entries[self._index].state

    @property
    def history_length(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[str]:
        """Every entry's href, oldest first."""
        return [entry.location.href for entry in self._entries]

    def push_state(self, state: dict[str, Any], url: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(Location.parse(url, self.location), dict(state)))
        self._index += 1

    def replace_state(self, state: dict[str, Any], url: str) -> None:
        self._entries[self._index] = HistoryEntry(Location.parse(url, self.location), dict(state))

    async def set_hash(self, fragment: str) -> None:
        """Assign ``location.hash``. A new hash adds an entry and fires ``hashchange``."""
        new_hash = f"#{fragment.lstrip('#')}" if fragment else ""
        if new_hash == self.location.hash:
            return
        current = self.location
        self.push_state({}, f"{current.pathname}{current.search}{new_hash}")
        await self.dispatch("hashchange")

    async def go(self, delta: int) -> None:
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        previous = self.location
        self._index = target
        await self.dispatch("popstate")
        if self.location.hash != previous.hash:
            await self.dispatch("hashchange")

    async def back(self) -> None:
        await self.go(-1)

    async def forward(self) -> None:
        await self.go(1)

    # -- Scroll --

    def scroll_position(self) -> tuple[float, float] | None:
        return self._scroll

    def scroll_to(self, x: float, y: float) -> None:
        if self._scroll is not None:
            self._scroll = (float(x), float(y))

    # -- Events --

    def add_event_listener(self, event: str, listener: Listener) -> Unsubscribe:
        self._listeners.setdefault(event, []).append(listener)

        def remove() -> None:
            listeners = self._listeners.get(event, [])
            if listener in listeners:
                listeners.remove(listener)

        return remove

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    async def dispatch(self, event: str) -> None:
        for listener in list(self._listeners.get(event, ())):
            await invoke(listener)

    def query_selector(self, selector: str) -> Element | None:
        return self.document.query_selector(selector)

