"""Tests for wren.rendering.dom — the in-memory element tree."""

import pytest

from wren.rendering.dom import Document, Element


class TestSetHtml:
    def test_parses_nested_markup(self) -> None:
        el = Element("div")
        el.set_html('<ul class="list"><li>a</li><li>b</li></ul>')
        assert el.inner_html == '<ul class="list"><li>a</li><li>b</li></ul>'
        assert el.text_content == "ab"

    def test_replaces_content(self) -> None:
        el = Element("div")
        el.set_html("<p>one</p>")
        el.set_html("<p>two</p>")
        assert el.text_content == "two"

    def test_void_elements(self) -> None:
        el = Element("div")
        el.set_html('<p>a<br>b</p><input name="q">')
        assert el.query_selector("input") is not None
        assert el.query_selector("p").text_content == "ab"

    def test_clear(self) -> None:
        el = Element("div")
        el.set_html("<p>x</p>")
        child = el.query_selector("p")
        el.clear()
        assert el.inner_html == ""
        assert child.parent is None


class TestSelectors:
    @pytest.fixture
    def tree(self) -> Element:
        el = Element("div")
        el.set_html(
            '<header id="top" class="bar main"></header>'
            '<section data-root="yes"><span data-kind="a">1</span>'
            '<span data-kind="b">2</span></section>'
        )
        return el

    def test_id(self, tree: Element) -> None:
        assert tree.query_selector("#top").tag == "header"

    def test_class(self, tree: Element) -> None:
        assert tree.query_selector(".main").id == "top"

    def test_attribute_presence(self, tree: Element) -> None:
        assert tree.query_selector("[data-root]").tag == "section"

    def test_attribute_value(self, tree: Element) -> None:
        assert tree.query_selector('[data-kind="b"]').text_content == "2"

    def test_tag(self, tree: Element) -> None:
        assert len(tree.query_selector_all("span")) == 2

    def test_no_match(self, tree: Element) -> None:
        assert tree.query_selector("#missing") is None

    def test_unsupported(self, tree: Element) -> None:
        with pytest.raises(ValueError, match="Unsupported selector"):
            tree.query_selector("div > span")


class TestDocument:
    def test_query(self) -> None:
        doc = Document('<div id="app"></div>')
        assert doc.query_selector("#app") is not None

    def test_body(self) -> None:
        assert Document().query_selector("body") is not None
