"""Route component resolution.

Turns the component references declared on a route into concrete
``ComponentDefinition`` objects before anything is unmounted, so a
failed lazy import leaves the current view untouched.

Resolution by reference shape:

- ``None`` -> ``None`` (no layout)
- ``str`` -> registry lookup; an unregistered name is fatal
- ``ComponentDefinition`` -> validated, returned as-is
- mapping -> converted with ``ComponentDefinition.from_mapping``
- ``Lazy`` -> loaded, module-shaped results unwrapped to their default
- other callables -> treated as factories and called, result used as-is

Only ``Lazy`` results are unwrapped. A plain callable that happens to
return a module is a factory bug, not a lazy import.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import anyio

from wren._internal.invoke import invoke
from wren.components.definition import ComponentDefinition, Lazy
from wren.errors import ComponentResolutionError

if TYPE_CHECKING:
    from wren.components.registry import ComponentRegistry
    from wren.routing.route import RouteDefinition

logger = logging.getLogger("wren.components")


@dataclass(frozen=True, slots=True)
class ResolvedComponents:
    """The layout (if any) and page definitions for one route."""

    layout: ComponentDefinition | None
    page: ComponentDefinition


def _validate(value: Any) -> ComponentDefinition:
    if isinstance(value, ComponentDefinition):
        if not isinstance(value.template, str) and not callable(value.template):
            msg = "Component missing template property"
            raise ComponentResolutionError(msg)
        return value
    if isinstance(value, Mapping):
        return ComponentDefinition.from_mapping(value)
    msg = f"Invalid component definition: {type(value).__name__}"
    raise ComponentResolutionError(msg)


def _first_error(error: BaseException) -> BaseException:
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


class ComponentResolver:
    """Resolves component references against a ``ComponentRegistry``."""

    __slots__ = ("_registry",)

    def __init__(self, registry: ComponentRegistry) -> None:
        self._registry = registry

    async def resolve(self, ref: Any) -> ComponentDefinition | None:
        """Resolve one reference. Raises ``ComponentResolutionError``."""
        match ref:
            case None:
                return None
            case str():
                return await self._resolve_name(ref)
            case ComponentDefinition() | Mapping():
                return _validate(ref)
            case Lazy():
                return await self._resolve_lazy(ref)
            case _ if callable(ref):
                return await self._resolve_factory(ref)
        msg = f"Invalid component definition: {type(ref).__name__}"
        raise ComponentResolutionError(msg)

    async def _resolve_name(self, name: str) -> ComponentDefinition:
        registered = self._registry.get(name)
        if registered is None:
            available = ", ".join(self._registry.names()) or "none"
            msg = f'Component "{name}" not registered. Available components: {available}'
            raise ComponentResolutionError(msg)
        if isinstance(registered, str):
            msg = f'Component "{name}" is registered as another name ({registered!r})'
            raise ComponentResolutionError(msg)
        return await self.resolve(registered)

    async def _resolve_lazy(self, ref: Lazy) -> ComponentDefinition:
        try:
            loaded = await ref.load()
        except ComponentResolutionError:
            raise
        except Exception as exc:
            msg = f"Failed to load async component: {exc}"
            raise ComponentResolutionError(msg) from exc
        logger.debug("lazy component loaded: %r", ref.loader)
        return _validate(loaded)

    async def _resolve_factory(self, factory: Any) -> ComponentDefinition:
        try:
            produced = await invoke(factory)
        except Exception as exc:
            msg = f"Component factory {getattr(factory, '__name__', factory)!r} failed: {exc}"
            raise ComponentResolutionError(msg) from exc
        return _validate(produced)

    async def resolve_route(
        self,
        route: RouteDefinition,
        global_layout: Any = None,
    ) -> ResolvedComponents:
        """Resolve a route's layout and page concurrently.

        The route's own layout wins over *global_layout*. A missing layout
        means "no layout"; a missing page is fatal.
        """
        layout_ref = route.layout if route.layout is not None else global_layout
        resolved: dict[str, ComponentDefinition | None] = {}

        async def _resolve(key: str, ref: Any) -> None:
            resolved[key] = await self.resolve(ref)

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(_resolve, "layout", layout_ref)
                tg.start_soon(_resolve, "page", route.component)
        except BaseExceptionGroup as group:
            raise _first_error(group) from None

        page = resolved.get("page")
        if page is None:
            msg = f"Page component is missing for route: {route.path}"
            raise ComponentResolutionError(msg)
        return ResolvedComponents(layout=resolved.get("layout"), page=page)
