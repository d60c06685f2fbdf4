"""Tests for wren.components — definitions, lazy loaders and the resolver."""

import asyncio
import sys
import types

import pytest

from wren.components import ComponentDefinition, ComponentRegistry, ComponentResolver, lazy
from wren.components.definition import unwrap_module
from wren.errors import ComponentResolutionError
from wren.routing.route import RouteDefinition

HOME = ComponentDefinition(template="<h1>Home</h1>", name="Home")
SHELL = ComponentDefinition(template='<main id="root"></main>', name="Shell")


def _resolver(**components) -> ComponentResolver:
    return ComponentResolver(ComponentRegistry(components))


@pytest.fixture
def _fake_pages_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module exporting components on sys.modules."""
    mod = types.ModuleType("_fake_wren_pages")
    mod.default = HOME  # type: ignore[attr-defined]
    mod.Shell = SHELL  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_pages", mod)


class TestComponentDefinition:
    def test_from_mapping(self) -> None:
        definition = ComponentDefinition.from_mapping({"template": "<p/>", "name": "P"})
        assert definition.template == "<p/>"
        assert definition.name == "P"
        assert definition.children == {}

    def test_from_mapping_missing_template(self) -> None:
        with pytest.raises(ComponentResolutionError, match="missing template"):
            ComponentDefinition.from_mapping({"setup": lambda ctx: None})

    def test_unwrap_mapping_default(self) -> None:
        assert unwrap_module({"default": HOME}) is HOME

    def test_unwrap_plain_value(self) -> None:
        assert unwrap_module(HOME) is HOME

    def test_unwrap_module_without_default(self) -> None:
        with pytest.raises(ComponentResolutionError, match="no 'default'"):
            unwrap_module(types.ModuleType("_empty"))


class TestComponentRegistry:
    def test_register_and_lookup(self) -> None:
        registry = ComponentRegistry()
        registry.register("Home", HOME)
        assert "Home" in registry
        assert registry.get("Home") is HOME
        assert len(registry) == 1

    def test_names_sorted(self) -> None:
        registry = ComponentRegistry({"b": HOME, "a": HOME})
        assert registry.names() == ["a", "b"]

    def test_unregister(self) -> None:
        registry = ComponentRegistry({"Home": HOME})
        assert registry.unregister("Home") is True
        assert registry.unregister("Home") is False

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            ComponentRegistry().register("", HOME)


class TestResolve:
    @pytest.mark.asyncio
    async def test_none(self) -> None:
        assert await _resolver().resolve(None) is None

    @pytest.mark.asyncio
    async def test_definition(self) -> None:
        assert await _resolver().resolve(HOME) is HOME

    @pytest.mark.asyncio
    async def test_mapping(self) -> None:
        resolved = await _resolver().resolve({"template": "<p>x</p>"})
        assert isinstance(resolved, ComponentDefinition)

    @pytest.mark.asyncio
    async def test_registered_name(self) -> None:
        assert await _resolver(Home=HOME).resolve("Home") is HOME

    @pytest.mark.asyncio
    async def test_registered_lazy(self) -> None:
        resolver = _resolver(Home=lazy(lambda: HOME))
        assert await resolver.resolve("Home") is HOME

    @pytest.mark.asyncio
    async def test_unregistered_name(self) -> None:
        resolver = _resolver(About=HOME, Home=HOME)
        with pytest.raises(ComponentResolutionError) as exc_info:
            await resolver.resolve("Missing")
        message = str(exc_info.value)
        assert 'Component "Missing" not registered' in message
        assert "About, Home" in message

    @pytest.mark.asyncio
    async def test_sync_factory(self) -> None:
        assert await _resolver().resolve(lambda: HOME) is HOME

    @pytest.mark.asyncio
    async def test_async_factory(self) -> None:
        async def factory() -> ComponentDefinition:
            return HOME

        assert await _resolver().resolve(factory) is HOME

    @pytest.mark.asyncio
    async def test_factory_module_not_unwrapped(self) -> None:
        with pytest.raises(ComponentResolutionError):
            await _resolver().resolve(lambda: {"default": HOME})

    @pytest.mark.asyncio
    async def test_factory_failure_wrapped(self) -> None:
        def factory() -> None:
            raise RuntimeError("boom")

        with pytest.raises(ComponentResolutionError, match="boom"):
            await _resolver().resolve(factory)

    @pytest.mark.asyncio
    async def test_lazy_callable_module_shape(self) -> None:
        async def load() -> dict:
            await asyncio.sleep(0)
            return {"default": HOME}

        assert await _resolver().resolve(lazy(load)) is HOME

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("_fake_pages_module")
    async def test_lazy_import_string(self) -> None:
        assert await _resolver().resolve(lazy("_fake_wren_pages:Shell")) is SHELL

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("_fake_pages_module")
    async def test_lazy_import_module_default(self) -> None:
        assert await _resolver().resolve(lazy("_fake_wren_pages")) is HOME

    @pytest.mark.asyncio
    async def test_lazy_failure_wrapped(self) -> None:
        with pytest.raises(ComponentResolutionError, match="Failed to load async component"):
            await _resolver().resolve(lazy("_no_such_wren_module:Page"))

    @pytest.mark.asyncio
    async def test_invalid_reference(self) -> None:
        with pytest.raises(ComponentResolutionError, match="Invalid component definition"):
            await _resolver().resolve(42)


class TestResolveRoute:
    @pytest.mark.asyncio
    async def test_page_only(self) -> None:
        route = RouteDefinition(path="/", component=HOME)
        resolved = await _resolver().resolve_route(route)
        assert resolved.page is HOME
        assert resolved.layout is None

    @pytest.mark.asyncio
    async def test_route_layout_wins(self) -> None:
        other = ComponentDefinition(template="<div></div>")
        route = RouteDefinition(path="/", component=HOME, layout=SHELL)
        resolved = await _resolver().resolve_route(route, global_layout=other)
        assert resolved.layout is SHELL

    @pytest.mark.asyncio
    async def test_global_layout_fallback(self) -> None:
        route = RouteDefinition(path="/", component=HOME)
        resolved = await _resolver(Shell=SHELL).resolve_route(route, global_layout="Shell")
        assert resolved.layout is SHELL

    @pytest.mark.asyncio
    async def test_missing_page(self) -> None:
        route = RouteDefinition(path="/empty", component=None)
        with pytest.raises(ComponentResolutionError, match="Page component is missing"):
            await _resolver().resolve_route(route)

    @pytest.mark.asyncio
    async def test_failure_is_unwrapped(self) -> None:
        route = RouteDefinition(path="/", component="Nope", layout=SHELL)
        with pytest.raises(ComponentResolutionError, match="not registered"):
            await _resolver().resolve_route(route)
