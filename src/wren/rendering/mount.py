"""Default mount function — render a component into an element.

``Mounter`` is what the router calls to put a layout or page on screen::

    result = await mounter(container, definition, {"router": router.context})
    ...
    await result.unmount()

Mount steps:

1. run ``setup(ctx)`` (sync or async); a returned mapping extends ``ctx``
2. produce template source (string, or ``template(ctx)``)
3. render the source with kida and write it into the container
4. mount ``children`` into every element matching their selectors
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from wren._internal.invoke import invoke
from wren.components.definition import ComponentDefinition
from wren.errors import ComponentResolutionError

if TYPE_CHECKING:
    from kida import Environment

    from wren.components.resolver import ComponentResolver
    from wren.rendering.dom import Element

logger = logging.getLogger("wren.components")

# Context keys handed down from a component to its children
INHERITED_KEYS: tuple[str, ...] = ("router",)


class MountResult:
    """A mounted component instance."""

    __slots__ = ("children", "container", "context", "definition", "mounted")

    def __init__(
        self,
        container: Element,
        definition: ComponentDefinition,
        context: dict[str, Any],
    ) -> None:
        self.container = container
        self.definition = definition
        self.context = context
        self.children: list[MountResult] = []
        self.mounted = True

    async def unmount(self) -> None:
        """Unmount children, run ``on_unmount``, and clear the container.

        Calling it twice is a no-op.
        """
        if not self.mounted:
            return
        self.mounted = False
        for child in reversed(self.children):
            await child.unmount()
        self.children = []
        if self.definition.on_unmount is not None:
            await invoke(self.definition.on_unmount, self.context)
        self.container.clear()

    def __repr__(self) -> str:
        name = self.definition.name or "component"
        return f"<MountResult {name} in {self.container!r}>"


class Mounter:
    """Renders component definitions into elements with a kida environment.

    The environment is created on first render unless one is passed in.
    *resolver* is needed only when children are given by name or loader.
    """

    __slots__ = ("_env", "_resolver", "_templates")

    def __init__(
        self,
        env: Environment | None = None,
        *,
        resolver: ComponentResolver | None = None,
    ) -> None:
        self._env = env
        self._resolver = resolver
        self._templates: dict[str, Any] = {}

    @property
    def env(self) -> Environment:
        if self._env is None:
            from kida import Environment

            self._env = Environment()
        return self._env

    def bind_resolver(self, resolver: ComponentResolver) -> None:
        if self._resolver is None:
            self._resolver = resolver

    def render(self, source: str, context: Mapping[str, Any]) -> str:
        """Render template *source* with *context*. Compiled templates are cached."""
        template = self._templates.get(source)
        if template is None:
            template = self.env.from_string(source)
            self._templates[source] = template
        return template.render(dict(context))

    async def __call__(
        self,
        container: Element,
        definition: ComponentDefinition,
        props: Mapping[str, Any] | None = None,
    ) -> MountResult:
        context: dict[str, Any] = {**(props or {}), "props": dict(props or {})}
        if definition.setup is not None:
            data = await invoke(definition.setup, context)
            if isinstance(data, Mapping):
                context.update(data)

        source = definition.template
        if callable(source):
            source = source(context)
            if inspect.isawaitable(source):
                source = await source
        container.set_html(self.render(str(source), context))

        result = MountResult(container, definition, context)
        for selector, child_ref in definition.children.items():
            child = await self._resolve_child(child_ref)
            for element in container.query_selector_all(selector):
                child_props = dict(element.attrs)
                child_props.update({key: context[key] for key in INHERITED_KEYS if key in context})
                result.children.append(await self(element, child, child_props))
        logger.debug("mounted %s into %r", definition.name or "component", container)
        return result

    async def _resolve_child(self, ref: Any) -> ComponentDefinition:
        if isinstance(ref, ComponentDefinition):
            return ref
        if isinstance(ref, Mapping):
            return ComponentDefinition.from_mapping(ref)
        if self._resolver is None:
            msg = f"Cannot resolve child component {ref!r} without a resolver"
            raise ComponentResolutionError(msg)
        child = await self._resolver.resolve(ref)
        if child is None:
            msg = "Child component reference resolved to nothing"
            raise ComponentResolutionError(msg)
        return child
