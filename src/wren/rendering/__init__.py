"""Rendering — the host element tree and the default mount function.

The router only needs ``mount(container, definition, props) -> MountResult``
and ``container.query_selector(selector)``. ``Mounter`` and ``Element``
are the defaults; any object with the same shape can replace them.
"""

from wren.rendering.dom import Document, Element
from wren.rendering.mount import MountResult, Mounter

__all__ = ["Document", "Element", "MountResult", "Mounter"]
