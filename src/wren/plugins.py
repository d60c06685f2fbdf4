"""Router plugins — named extensions that hook into the event bus.

A plugin is any object with a ``name`` and an ``install(router, options)``
method. No base class required::

    class Analytics:
        name = "analytics"
        version = "1.0.0"

        def install(self, router, options):
            self._off = router.on_after_each(lambda to, from_: track(to.path))

        def destroy(self, router):
            self._off()

    router.use(Analytics(), {"site": "docs"})

Plugins receive the public ``Router`` API: they subscribe to events,
register guards and swap the error handler, but never write router
state directly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from wren._internal.invoke import invoke
from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.router import Router

logger = logging.getLogger("wren.plugins")


@runtime_checkable
class RouterPlugin(Protocol):
    """Protocol for router plugins. ``version`` and ``destroy`` are optional."""

    name: str

    def install(self, router: Router, options: Mapping[str, Any]) -> Any: ...


class PluginHost:
    """Registered plugins, in installation order."""

    __slots__ = ("_plugins",)

    def __init__(self) -> None:
        self._plugins: dict[str, Any] = {}

    def install(
        self,
        router: Router,
        plugin: Any,
        options: Mapping[str, Any] | None = None,
    ) -> bool:
        """Install *plugin*. Returns ``False`` if its name is already taken.

        Raises ``ConfigurationError`` when the plugin has no ``install``
        method or no name.
        """
        if not callable(getattr(plugin, "install", None)):
            msg = "Plugin must have an install method"
            raise ConfigurationError(msg)
        name = getattr(plugin, "name", None)
        if not name or not isinstance(name, str):
            msg = "Plugin must have a non-empty string name"
            raise ConfigurationError(msg)
        if name in self._plugins:
            router.error_handler.warn(
                f"Plugin {name!r} is already registered",
                {"existing_plugin": self._plugins[name]},
            )
            return False

        self._plugins[name] = plugin
        try:
            plugin.install(router, dict(options or {}))
        except Exception:
            del self._plugins[name]
            raise
        logger.debug("plugin installed: %s %s", name, getattr(plugin, "version", ""))
        return True

    async def remove(self, router: Router, name: str) -> bool:
        """Run the plugin's ``destroy`` hook and forget it."""
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            return False
        await self._destroy(router, name, plugin)
        return True

    async def destroy_all(self, router: Router) -> None:
        """Run every plugin's ``destroy`` hook; one failure never stops the rest."""
        for name, plugin in list(self._plugins.items()):
            await self._destroy(router, name, plugin)

    async def _destroy(self, router: Router, name: str, plugin: Any) -> None:
        destroy = getattr(plugin, "destroy", None)
        if not callable(destroy):
            return
        try:
            await invoke(destroy, router)
        except Exception as exc:
            router.error_handler.log(f"Plugin {name} destroy failed", exc)

    def get(self, name: str) -> Any | None:
        return self._plugins.get(name)

    def all(self) -> list[Any]:
        return list(self._plugins.values())

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)
