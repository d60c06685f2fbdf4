"""Wren — a client-side application router.

Maps URL paths to components, runs guards and lifecycle hooks around every
transition, and keeps the URL and the rendered view in sync.

Basic usage::

    from wren import ComponentDefinition, MemoryBrowser, Router, RouterConfig

    Home = ComponentDefinition(template="<h1>Home</h1>")
    User = ComponentDefinition(template="<h1>User {{ router.params.id }}</h1>")

    router = Router(
        RouterConfig(mode="history", auto_start=False),
        routes=[
            {"path": "/", "component": Home},
            {"path": "/users/:id", "component": User},
        ],
        browser=MemoryBrowser("/"),
    )
    await router.start()
    await router.navigate("/users/42")

Lazy components::

    from wren import lazy

    routes = [{"path": "/admin", "component": lazy("myapp.admin:Dashboard")}]
"""

__version__ = "0.1.0"
__all__ = [
    "ComponentDefinition",
    "ComponentRegistry",
    "ComponentResolutionError",
    "ConfigurationError",
    "CoreErrorHandler",
    "EventBus",
    "Lazy",
    "MemoryBrowser",
    "Mounter",
    "NavigationError",
    "NavigationTarget",
    "RedirectLimitExceeded",
    "RouteDefinition",
    "RouteLocation",
    "RouteNotFound",
    "Router",
    "RouterConfig",
    "RouterContext",
    "RouterError",
    "RouterPlugin",
    "Signal",
    "WrenError",
    "lazy",
    "signal",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ComponentDefinition": "wren.components.definition",
    "ComponentRegistry": "wren.components.registry",
    "ComponentResolutionError": "wren.errors",
    "ConfigurationError": "wren.errors",
    "CoreErrorHandler": "wren.error_handler",
    "EventBus": "wren.events",
    "Lazy": "wren.components.definition",
    "MemoryBrowser": "wren.browser",
    "Mounter": "wren.rendering.mount",
    "NavigationError": "wren.errors",
    "NavigationTarget": "wren.routing.route",
    "RedirectLimitExceeded": "wren.errors",
    "RouteDefinition": "wren.routing.route",
    "RouteLocation": "wren.routing.route",
    "RouteNotFound": "wren.errors",
    "Router": "wren.router",
    "RouterConfig": "wren.config",
    "RouterContext": "wren.context",
    "RouterError": "wren.errors",
    "RouterPlugin": "wren.plugins",
    "Signal": "wren.signals",
    "WrenError": "wren.errors",
    "lazy": "wren.components.definition",
    "signal": "wren.signals",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` cheap; kida and anyio load on first use.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_path), name)
