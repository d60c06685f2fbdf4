"""Tests for wren.rendering.mount — the default mount function."""

import pytest

from wren.components import ComponentDefinition, ComponentRegistry, ComponentResolver
from wren.errors import ComponentResolutionError
from wren.rendering.dom import Element
from wren.rendering.mount import Mounter


def _container() -> Element:
    return Element("div", {"id": "app"})


class TestMount:
    @pytest.mark.asyncio
    async def test_static_template(self) -> None:
        el = _container()
        result = await Mounter()(el, ComponentDefinition(template="<h1>Home</h1>"))
        assert el.inner_html == "<h1>Home</h1>"
        assert result.mounted is True
        assert result.container is el

    @pytest.mark.asyncio
    async def test_kida_variables(self) -> None:
        el = _container()
        definition = ComponentDefinition(template="<h1>{{ title }}</h1>")
        await Mounter()(el, definition, {"title": "Hello"})
        assert el.text_content == "Hello"

    @pytest.mark.asyncio
    async def test_setup_extends_context(self) -> None:
        async def setup(ctx):
            return {"title": f"User {ctx['props']['id']}"}

        el = _container()
        definition = ComponentDefinition(template="<p>{{ title }}</p>", setup=setup)
        result = await Mounter()(el, definition, {"id": "7"})
        assert el.text_content == "User 7"
        assert result.context["title"] == "User 7"

    @pytest.mark.asyncio
    async def test_callable_template(self) -> None:
        el = _container()
        definition = ComponentDefinition(template=lambda ctx: f"<p>{ctx['name']}</p>")
        await Mounter()(el, definition, {"name": "wren"})
        assert el.inner_html == "<p>wren</p>"

    @pytest.mark.asyncio
    async def test_async_callable_template(self) -> None:
        async def template(ctx):
            return "<p>async</p>"

        el = _container()
        await Mounter()(el, ComponentDefinition(template=template))
        assert el.text_content == "async"

    @pytest.mark.asyncio
    async def test_templates_cached(self) -> None:
        mounter = Mounter()
        mounter.render("<p>{{ x }}</p>", {"x": 1})
        mounter.render("<p>{{ x }}</p>", {"x": 2})
        assert len(mounter._templates) == 1


class TestChildren:
    @pytest.mark.asyncio
    async def test_children_mounted_with_attrs(self) -> None:
        badge = ComponentDefinition(template=lambda ctx: f"<b>{ctx['label']}</b>")
        parent = ComponentDefinition(
            template='<span class="badge" label="new"></span><span class="badge" label="hot"></span>',
            children={".badge": badge},
        )
        el = _container()
        result = await Mounter()(el, parent)
        assert el.text_content == "newhot"
        assert len(result.children) == 2

    @pytest.mark.asyncio
    async def test_router_context_inherited(self) -> None:
        child = ComponentDefinition(template=lambda ctx: f"<i>{ctx['router']}</i>")
        parent = ComponentDefinition(template="<em></em>", children={"em": child})
        el = _container()
        await Mounter()(el, parent, {"router": "ROUTER"})
        assert el.text_content == "ROUTER"

    @pytest.mark.asyncio
    async def test_named_child_needs_resolver(self) -> None:
        parent = ComponentDefinition(template="<em></em>", children={"em": "Child"})
        with pytest.raises(ComponentResolutionError, match="without a resolver"):
            await Mounter()(_container(), parent)

    @pytest.mark.asyncio
    async def test_named_child_resolved(self) -> None:
        registry = ComponentRegistry({"Child": {"template": "<i>child</i>"}})
        mounter = Mounter(resolver=ComponentResolver(registry))
        parent = ComponentDefinition(template="<em></em>", children={"em": "Child"})
        el = _container()
        await mounter(el, parent)
        assert el.text_content == "child"


class TestUnmount:
    @pytest.mark.asyncio
    async def test_unmount_clears_and_calls_hook(self) -> None:
        calls: list[str] = []
        definition = ComponentDefinition(
            template="<p>x</p>", on_unmount=lambda ctx: calls.append("unmounted")
        )
        el = _container()
        result = await Mounter()(el, definition)
        await result.unmount()
        assert el.inner_html == ""
        assert calls == ["unmounted"]
        assert result.mounted is False

    @pytest.mark.asyncio
    async def test_unmount_twice_is_noop(self) -> None:
        calls: list[str] = []
        definition = ComponentDefinition(
            template="<p>x</p>", on_unmount=lambda ctx: calls.append("unmounted")
        )
        result = await Mounter()(_container(), definition)
        await result.unmount()
        await result.unmount()
        assert calls == ["unmounted"]

    @pytest.mark.asyncio
    async def test_children_unmounted_first(self) -> None:
        order: list[str] = []
        child = ComponentDefinition(
            template="<i></i>", on_unmount=lambda ctx: order.append("child")
        )
        parent = ComponentDefinition(
            template="<em></em>",
            children={"em": child},
            on_unmount=lambda ctx: order.append("parent"),
        )
        result = await Mounter()(_container(), parent)
        await result.unmount()
        assert order == ["child", "parent"]
