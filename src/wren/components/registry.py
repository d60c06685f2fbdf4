"""Name -> component registry used to resolve string component references."""

from collections.abc import Iterator, Mapping
from typing import Any

from wren.components.definition import ComponentDefinition


class ComponentRegistry:
    """Registered components, looked up by name.

    Values are stored as given (definition, mapping, factory or ``Lazy``)
    and resolved on use.
    """

    __slots__ = ("_components",)

    def __init__(self, components: Mapping[str, Any] | None = None) -> None:
        self._components: dict[str, Any] = dict(components or {})

    def register(self, name: str, component: ComponentDefinition | Any) -> None:
        if not name:
            msg = "Component name must be a non-empty string"
            raise ValueError(msg)
        self._components[name] = component

    def unregister(self, name: str) -> bool:
        return self._components.pop(name, None) is not None

    def get(self, name: str) -> Any | None:
        return self._components.get(name)

    def names(self) -> list[str]:
        return sorted(self._components)

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)
