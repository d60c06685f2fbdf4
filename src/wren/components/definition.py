"""Component definitions and the explicit lazy-loader marker."""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from wren.errors import ComponentResolutionError


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """A renderable component.

    Attributes:
        template: Kida template source, or a callable receiving the render
            context and returning template source.
        setup: Optional ``setup(ctx)`` (sync or async). A returned dict is
            merged into the render context.
        children: Selector -> component reference, mounted into matching
            elements after the template renders.
        name: Optional display name.
        on_unmount: Optional callback (sync or async) run on unmount.
    """

    template: str | Callable[[dict[str, Any]], Any]
    setup: Callable[..., Any] | None = None
    children: Mapping[str, Any] = field(default_factory=dict)
    name: str | None = None
    on_unmount: Callable[..., Any] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ComponentDefinition:
        """Build a definition from ``{"template": ..., "setup": ...}``.

        Raises ``ComponentResolutionError`` when ``template`` is missing or
        is neither a string nor a callable.
        """
        template = data.get("template")
        if not isinstance(template, str) and not callable(template):
            msg = "Component missing template property"
            raise ComponentResolutionError(msg)
        return cls(
            template=template,
            setup=data.get("setup"),
            children=dict(data.get("children") or {}),
            name=data.get("name"),
            on_unmount=data.get("on_unmount"),
        )


def unwrap_module(value: Any) -> Any:
    """Return the default export of a module-shaped value.

    Modules and objects exposing ``default`` yield that attribute; mappings
    with a ``"default"`` key yield the value. Anything else is returned
    unchanged.
    """
    if isinstance(value, ModuleType):
        if not hasattr(value, "default"):
            msg = f"Module {value.__name__!r} has no 'default' component"
            raise ComponentResolutionError(msg)
        return value.default
    if isinstance(value, Mapping) and "default" in value:
        return value["default"]
    return value


@dataclass(frozen=True, slots=True)
class Lazy:
    """A component loaded on first navigation to its route.

    *loader* is either an import string (``"pkg.module:Attr"``, or
    ``"pkg.module"`` for the module's ``default``) or a zero-arg callable,
    sync or async. Module-shaped results are unwrapped to their default
    export.
    """

    loader: str | Callable[[], Any]

    async def load(self) -> Any:
        if isinstance(self.loader, str):
            module_path, _, attr_name = self.loader.partition(":")
            module = importlib.import_module(module_path)
            if attr_name:
                return getattr(module, attr_name)
            return unwrap_module(module)

        result = self.loader()
        if inspect.isawaitable(result):
            result = await result
        return unwrap_module(result)


def lazy(loader: str | Callable[[], Any]) -> Lazy:
    """Mark *loader* as a lazy component import.

    Usage::

        routes = [
            {"path": "/reports", "component": lazy("myapp.pages.reports:ReportsPage")},
            {"path": "/chart", "component": lazy(load_chart_module)},
        ]
    """
    return Lazy(loader)
