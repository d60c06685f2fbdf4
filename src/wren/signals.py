"""Signals — single reactive values with change subscription.

The router keeps its observable state (current route, params, query,
mounted layout and view, readiness) in signals. Anything can read
``signal.value`` or ``watch()`` it; only the router writes.

Watchers run synchronously, in registration order, inside the
assignment. Writes made one after another therefore leave no window in
which a watcher observes a partially updated set.
"""

from collections.abc import Callable
from typing import Any

type Watcher[T] = Callable[[T], Any]


class Signal[T]:
    """A mutable value that notifies watchers when a different object is assigned.

    Usage::

        count = Signal(0)
        unwatch = count.watch(lambda value: print("now", value))
        count.value = 1   # prints "now 1"
        unwatch()
    """

    __slots__ = ("_value", "_watchers")

    def __init__(self, value: T) -> None:
        self._value = value
        self._watchers: list[Watcher[T]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value is self._value:
            return
        self._value = new_value
        for watcher in list(self._watchers):
            watcher(new_value)

    def watch(self, watcher: Watcher[T]) -> Callable[[], None]:
        """Call *watcher* with each new value. Returns an unwatch function."""
        self._watchers.append(watcher)

        def unwatch() -> None:
            if watcher in self._watchers:
                self._watchers.remove(watcher)

        return unwatch

    def __repr__(self) -> str:
        return f"Signal({self._value!r})"


def signal[T](initial: T) -> Signal[T]:
    """Default signal factory used by the router."""
    return Signal(initial)
