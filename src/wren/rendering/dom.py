"""A small element tree for rendering without a browser.

Supports exactly what routing needs: replacing an element's content
with rendered HTML and finding elements by simple selectors.

Supported selectors::

    #id        .class        [attr]        [attr=value]        tag
"""

from __future__ import annotations

import html
import re
from html.parser import HTMLParser

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)

_ATTR_SELECTOR = re.compile(r"^\[([\w:-]+)(?:=[\"']?([^\"'\]]*)[\"']?)?\]$")
_NAME = re.compile(r"^[\w-]+$")


class Element:
    """An element node. Children are ``Element`` objects or text strings."""

    __slots__ = ("attrs", "children", "parent", "tag")

    def __init__(self, tag: str, attrs: dict[str, str] | None = None) -> None:
        self.tag = tag.lower()
        self.attrs: dict[str, str] = dict(attrs or {})
        self.children: list[Element | str] = []
        self.parent: Element | None = None

    # -- Tree mutation --

    def append(self, child: Element | str) -> None:
        if isinstance(child, Element):
            child.parent = self
        self.children.append(child)

    def clear(self) -> None:
        for child in self.children:
            if isinstance(child, Element):
                child.parent = None
        self.children = []

    def set_html(self, markup: str) -> None:
        """Replace this element's content with parsed *markup*."""
        self.clear()
        builder = _TreeBuilder(self)
        builder.feed(markup)
        builder.close()

    # -- Reading --

    @property
    def id(self) -> str | None:
        return self.attrs.get("id")

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    @property
    def inner_html(self) -> str:
        return "".join(
            child.outer_html if isinstance(child, Element) else html.escape(child, quote=False)
            for child in self.children
        )

    @property
    def outer_html(self) -> str:
        attrs = "".join(
            f' {name}="{html.escape(value)}"' if value else f" {name}"
            for name, value in self.attrs.items()
        )
        if self.tag in VOID_ELEMENTS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{self.inner_html}</{self.tag}>"

    @property
    def text_content(self) -> str:
        return "".join(
            child.text_content if isinstance(child, Element) else child
            for child in self.children
        )

    def iter_descendants(self):
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_descendants()

    def matches(self, selector: str) -> bool:
        selector = selector.strip()
        if selector.startswith("#"):
            return self.id == selector[1:]
        if selector.startswith("."):
            return selector[1:] in self.classes
        if attr := _ATTR_SELECTOR.match(selector):
            name, value = attr.groups()
            if name not in self.attrs:
                return False
            return value is None or self.attrs[name] == value
        if _NAME.match(selector):
            return self.tag == selector.lower()
        msg = f"Unsupported selector: {selector!r}"
        raise ValueError(msg)

    def query_selector(self, selector: str) -> Element | None:
        """Return the first descendant matching *selector* (document order)."""
        for element in self.iter_descendants():
            if element.matches(selector):
                return element
        return None

    def query_selector_all(self, selector: str) -> list[Element]:
        return [element for element in self.iter_descendants() if element.matches(selector)]

    def __repr__(self) -> str:
        label = f"#{self.id}" if self.id else ""
        return f"<Element {self.tag}{label}>"


class Document:
    """The host document: a ``<body>`` element plus selector lookup."""

    __slots__ = ("body",)

    def __init__(self, markup: str = "") -> None:
        self.body = Element("body")
        if markup:
            self.body.set_html(markup)

    def query_selector(self, selector: str) -> Element | None:
        if self.body.matches(selector):
            return self.body
        return self.body.query_selector(selector)


class _TreeBuilder(HTMLParser):
    """Feeds parser events into an ``Element`` subtree."""

    def __init__(self, root: Element) -> None:
        super().__init__(convert_charrefs=True)
        self._stack: list[Element] = [root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = Element(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].append(element)
        if element.tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._stack[-1].append(Element(tag, {name: value or "" for name, value in attrs}))

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        # Close back to the matching open element; stray end tags are ignored
        for index in range(len(self._stack) - 1, 0, -1):
            if self._stack[index].tag == tag:
                del self._stack[index:]
                return

    def handle_data(self, data: str) -> None:
        self._stack[-1].append(data)
