"""Wren exception hierarchy.

Shared across the route catalog, the component resolver and the
navigation engine so every module raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when router configuration is invalid.

    Always raised synchronously at setup time: unknown routing mode,
    missing mount selector, malformed route path, invalid plugin.
    """


class ComponentResolutionError(WrenError):
    """A route's component or layout could not be turned into a definition.

    Fatal to the current transition only. The previous view stays mounted.
    """


@dataclass(frozen=True, slots=True)
class NavigationError(WrenError):
    """A transition-scoped failure.

    Reported through the ``error`` event rather than raised out of
    ``Router.navigate()``.
    """

    detail: str
    to: str | None = None
    from_: str | None = None

    def __str__(self) -> str:
        return self.detail


class RouteNotFound(NavigationError):  # noqa: N818
    """No route matched the path and no wildcard route is registered."""

    def __init__(self, path: str, from_: str | None = None) -> None:
        super().__init__(detail=f"Route not found: {path}", to=path, from_=from_)


class RedirectLimitExceeded(NavigationError):  # noqa: N818
    """A chain of guard redirects grew past ``RouterConfig.max_redirects``."""

    def __init__(self, path: str, limit: int) -> None:
        super().__init__(
            detail=f"Redirect limit of {limit} exceeded while navigating to {path}",
            to=path,
        )


class RouterError(WrenError):
    """A formatted error raised by ``CoreErrorHandler.handle()``.

    Keeps the original exception, the phase it happened in, and any
    extra details for plugins that replace the error handler.
    """

    def __init__(
        self,
        message: str,
        *,
        original: BaseException,
        context: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.original = original
        self.context = context
        self.details = details or {}
