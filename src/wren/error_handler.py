"""Router error handler — the single funnel for navigation failures.

The router never formats or reports errors itself; it calls
``router.error_handler.handle/warn/log``. Plugins can swap the handler
with ``Router.set_error_handler()`` to change formatting or reporting
without touching the engine.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn, Protocol

from wren.errors import RouterError

_PREFIX = "[wren.router]"


class ErrorHandler(Protocol):
    """Shape every error handler must have."""

    def handle(
        self, error: BaseException, context: str, details: dict[str, Any] | None = None
    ) -> NoReturn: ...

    def warn(self, message: str, details: dict[str, Any] | None = None) -> None: ...

    def log(
        self, message: str, error: BaseException, details: dict[str, Any] | None = None
    ) -> None: ...


def is_error_handler(candidate: object) -> bool:
    """True when *candidate* has callable ``handle``, ``warn`` and ``log``."""
    return all(callable(getattr(candidate, name, None)) for name in ("handle", "warn", "log"))


class CoreErrorHandler:
    """Default handler, backed by the ``wren.router`` logger.

    - ``handle`` logs and raises a ``RouterError`` chained to the original
    - ``warn`` logs a warning
    - ``log`` logs an error with the exception's traceback, without raising
    """

    __slots__ = ("logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("wren.router")

    def handle(
        self, error: BaseException, context: str, details: dict[str, Any] | None = None
    ) -> NoReturn:
        message = f"{_PREFIX} {context}: {error}"
        self.logger.error(message, extra={"details": details or {}})
        raise RouterError(message, original=error, context=context, details=details) from error

    def warn(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.logger.warning(f"{_PREFIX} {message}", extra={"details": details or {}})

    def log(
        self, message: str, error: BaseException, details: dict[str, Any] | None = None
    ) -> None:
        self.logger.error(
            f"{_PREFIX} {message}: {error}",
            exc_info=error,
            extra={"details": details or {}},
        )
