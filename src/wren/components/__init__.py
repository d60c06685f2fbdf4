"""Components — definitions, the name registry, and route component resolution.

A route's ``component`` (and ``layout``) may be given as:

- a registered name (``"UserPage"``)
- a ``ComponentDefinition`` or a mapping with a ``"template"`` key
- a zero-arg factory, sync or async, returning a definition
- a ``Lazy`` loader (``lazy("myapp.pages:UserPage")`` or
  ``lazy(async_loader)``) whose result may be module-shaped
"""

from wren.components.definition import ComponentDefinition, Lazy, lazy
from wren.components.registry import ComponentRegistry
from wren.components.resolver import ComponentResolver, ResolvedComponents

__all__ = [
    "ComponentDefinition",
    "ComponentRegistry",
    "ComponentResolver",
    "Lazy",
    "ResolvedComponents",
    "lazy",
]
