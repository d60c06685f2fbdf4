"""Wren router — the navigation engine.

Owns the route catalog, the reactive location signals and the browser
listener, and runs every transition through the same pipeline whether it
came from ``navigate()`` or from back/forward::

    guards -> before_resolve -> resolve components -> after_resolve
    -> unmount old -> commit signals -> before_render -> render
    -> after_render -> scroll -> after_enter -> after_each -> sync URL

Concurrency:
    Everything runs on one event loop. Each transition takes a new
    generation number when it starts and re-checks it after guards,
    after resolution, after unmounting and after rendering. A transition
    that is no longer the newest stops there; if it had already torn
    down the view it puts the committed route back on screen. A failure
    after the old view was unmounted rolls the location signals back and
    remounts the previous route. Browser events that arrive while a
    programmatic navigation is in flight are ignored.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from wren._internal.invoke import invoke
from wren._internal.types import Guard, Hook, Listener, Unsubscribe
from wren.browser import Browser, MemoryBrowser
from wren.components.registry import ComponentRegistry
from wren.components.resolver import ComponentResolver, ResolvedComponents
from wren.config import MODES, RouterConfig
from wren.context import RouterContext
from wren.contexts import RedirectTarget, RenderContext, ResolveContext, ScrollContext
from wren.error_handler import CoreErrorHandler, ErrorHandler, is_error_handler
from wren.errors import ConfigurationError, RedirectLimitExceeded, RouteNotFound
from wren.events import (
    AFTER_EACH,
    AFTER_ENTER,
    AFTER_LEAVE,
    AFTER_RENDER,
    AFTER_RESOLVE,
    BEFORE_RENDER,
    BEFORE_RESOLVE,
    ERROR,
    READY,
    ROUTE_ADDED,
    ROUTE_REMOVED,
    SCROLL,
    EventBus,
)
from wren.guards import GuardPipeline
from wren.plugins import PluginHost
from wren.rendering.mount import Mounter
from wren.routing.location import build_path, build_query, join_url, parse_query, split_url
from wren.routing.matcher import normalize_path
from wren.routing.registry import RouteRegistry
from wren.routing.route import NavigationTarget, RouteDefinition, RouteLocation
from wren.signals import Signal, signal

logger = logging.getLogger("wren.router")


class Router:
    """Client-side router.

    Usage::

        router = Router(
            RouterConfig(mode="history", mount="#app"),
            routes=[
                {"path": "/", "component": Home},
                {"path": "/users/:id", "component": "UserPage"},
                {"path": "*", "component": NotFound},
            ],
            components={"UserPage": UserPage},
            browser=MemoryBrowser("/"),
        )
        await router.start()
        await router.navigate("/users/42")
        router.current_params.value  # {"id": "42"}
    """

    __slots__ = (
        "_guards",
        "_in_flight",
        "_listeners",
        "_mount",
        "_navigation_id",
        "_pipeline",
        "_plugins",
        "_registry",
        "_resolved",
        "_scroll_positions",
        "_start_task",
        "browser",
        "components",
        "config",
        "context",
        # Reactive state (written only by the router)
        "current_layout",
        "current_params",
        "current_query",
        "current_route",
        "current_view",
        "error_handler",
        "events",
        "is_ready",
        "is_started",
        "previous_route",
        "resolver",
    )

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        routes: Iterable[RouteDefinition | Mapping[str, Any]] = (),
        on_before_each: Guard | None = None,
        components: ComponentRegistry | Mapping[str, Any] | None = None,
        mount: Callable[..., Any] | None = None,
        browser: Browser | None = None,
        signal_factory: Callable[[Any], Signal[Any]] = signal,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.error_handler: ErrorHandler = CoreErrorHandler()
        self._validate_config(routes)

        self.events = EventBus()
        if isinstance(components, ComponentRegistry):
            self.components = components
        else:
            self.components = ComponentRegistry(components)
        self.resolver = ComponentResolver(self.components)
        if mount is None:
            mount = Mounter(resolver=self.resolver)
        elif isinstance(mount, Mounter):
            mount.bind_resolver(self.resolver)
        self._mount = mount
        self.browser: Browser = browser if browser is not None else MemoryBrowser()
        self.context = RouterContext(self)

        self._registry = RouteRegistry(routes, warn=self._warn)
        self._guards: list[Guard] = [on_before_each] if on_before_each is not None else []
        self._pipeline = GuardPipeline(self.events, self._guards)
        self._plugins = PluginHost()

        self.current_route: Signal[RouteLocation | None] = signal_factory(None)
        self.previous_route: Signal[RouteLocation | None] = signal_factory(None)
        self.current_params: Signal[dict[str, str]] = signal_factory({})
        self.current_query: Signal[dict[str, str]] = signal_factory({})
        self.current_layout: Signal[Any] = signal_factory(None)
        self.current_view: Signal[Any] = signal_factory(None)
        self.is_ready: Signal[bool] = signal_factory(False)

        self.is_started = False
        self._navigation_id = 0
        self._in_flight = 0
        self._listeners: list[Unsubscribe] = []
        self._scroll_positions: dict[str, tuple[float, float]] = {}
        self._resolved: ResolvedComponents | None = None
        self._start_task: asyncio.Task[Router] | None = None

        if self.config.auto_start:
            self._schedule_start()

    def _validate_config(self, routes: object) -> None:
        if self.config.mode not in MODES:
            msg = (
                f"Invalid routing mode: {self.config.mode}. "
                'Must be "hash", "query", or "history".'
            )
            raise ConfigurationError(msg)
        if not self.config.mount:
            msg = "'mount' option is required"
            raise ConfigurationError(msg)
        if isinstance(routes, (str, Mapping)) or not isinstance(routes, Iterable):
            msg = "'routes' option must be a list of route definitions"
            raise ConfigurationError(msg)

    def _warn(self, message: str, details: dict[str, Any]) -> None:
        self.error_handler.warn(message, details)

    def _schedule_start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("auto_start deferred: no running event loop, await router.start()")
            return
        self._start_task = loop.create_task(self.start())

    # -- Lifecycle --

    async def start(self) -> Router:
        """Listen to the browser and render the current location.

        Warns and returns without starting when already started or when
        the mount element is missing.
        """
        if self.is_started:
            self.error_handler.warn("Router is already started")
            return self
        if self._mount_element() is None:
            self.error_handler.warn(
                f"Mount element {self.config.mount!r} was not found in the document. "
                "The router will not start.",
                {"mount_selector": self.config.mount},
            )
            return self

        event = "hashchange" if self.config.mode == "hash" else "popstate"
        self._listeners.append(self.browser.add_event_listener(event, self._on_browser_event))
        self.is_started = True

        # The initial render is not a back/forward traversal
        await self._handle_route_change(is_pop_state=False)
        self.is_ready.value = True
        try:
            await self.events.emit(READY, self)
        except Exception as exc:
            self.error_handler.log("Ready listener failed", exc)
        return self

    async def destroy(self) -> None:
        """Tear down plugins, browser listeners and the mounted view."""
        if not self.is_started:
            return
        await self._plugins.destroy_all(self)

        for remove in self._listeners:
            remove()
        self._listeners = []

        await self._try_unmount(self.current_view.value)
        await self._try_unmount(self.current_layout.value)
        self.current_view.value = None
        self.current_layout.value = None
        self.is_started = False
        self.is_ready.value = False

    async def stop(self) -> None:
        """Alias for ``destroy()``."""
        await self.destroy()

    async def __aenter__(self) -> Router:
        return await self.start()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.destroy()

    # -- Navigation --

    @property
    def navigation_id(self) -> int:
        """Generation number of the newest transition started so far."""
        return self._navigation_id

    async def navigate(
        self,
        location: str | Mapping[str, Any] | NavigationTarget,
        params: Mapping[str, Any] | None = None,
    ) -> bool:
        """Navigate to *location*.

        *location* is a path (``"/users/42"``, ``"/users/:id"`` with
        *params``) or a target (``NavigationTarget`` or a mapping with
        ``path``, ``params``, ``query``, ``replace``, ``state``).

        Returns ``True`` when the new route was rendered (or was already
        current), ``False`` when a guard blocked or redirected it or it
        failed. Never raises for navigation failures; they are reported
        through the ``error`` event.
        """
        return await self._navigate(location, params)

    async def _navigate(
        self,
        location: str | Mapping[str, Any] | NavigationTarget,
        params: Mapping[str, Any] | None = None,
        *,
        redirect_depth: int = 0,
    ) -> bool:
        self._in_flight += 1
        try:
            target = NavigationTarget.coerce(location, params)
            path, embedded_query = split_url(build_path(target.path, target.params))
            query = parse_query(embedded_query)
            query.update({key: str(value) for key, value in target.query.items()})
            full_url = join_url(path, query)

            if self._is_same_route(path, query):
                return True

            to = await self._transition(full_url, redirect_depth=redirect_depth)
            if to is None:
                return False
            # A newer transition that committed after this one owns the URL
            if self.current_route.value is to:
                await self._sync_history(full_url, replace=target.replace, state=target.state)
            return True
        except Exception as exc:
            self.error_handler.log("Navigation failed", exc)
            await self._emit_error(exc)
            return False
        finally:
            self._in_flight -= 1

    def _is_same_route(self, path: str, query: Mapping[str, str]) -> bool:
        current = self.current_route.value
        if current is None:
            return False
        return normalize_path(current.path) == normalize_path(path) and current.query == dict(query)

    async def _on_browser_event(self) -> None:
        await self._handle_route_change(is_pop_state=True)

    async def _handle_route_change(self, *, is_pop_state: bool) -> None:
        """Run a transition for the location the browser currently shows."""
        if self._in_flight:
            logger.debug("browser event ignored: programmatic navigation in flight")
            return

        from_ = self.current_route.value
        full_url = self._read_location()
        try:
            to = await self._transition(full_url, is_pop_state=is_pop_state)
            # Blocked with nothing committed: put the old URL back
            if to is None and from_ is not None and self.current_route.value is from_:
                await self._sync_history(from_.full_url, replace=True)
        except Exception as exc:
            self.error_handler.log(
                "Route change handling failed",
                exc,
                {"current_url": self.browser.location.href},
            )
            await self._emit_error(exc)

    async def _transition(
        self,
        full_url: str,
        *,
        is_pop_state: bool = False,
        redirect_depth: int = 0,
    ) -> RouteLocation | None:
        """Run one transition. Returns the committed location, or ``None`` if aborted."""
        self._navigation_id += 1
        navigation_id = self._navigation_id
        from_ = self.current_route.value

        path, query_string = split_url(full_url)
        match = self._registry.match(path)
        if match is None:
            error = RouteNotFound(path, from_.path if from_ else None)
            self.error_handler.warn(str(error), {"path": path})
            await self._emit_error(error, None, from_)
            return None

        route = match.route
        to = RouteLocation(
            path=path,
            query=parse_query(query_string),
            full_url=full_url,
            params=match.params,
            meta=route.meta,
            matched=route,
            name=route.name,
        )
        logger.debug(
            "navigation %d: %s -> %s", navigation_id, from_.path if from_ else None, to.path
        )

        try:
            outcome = await self._pipeline.run(to, from_, route)
            if not outcome:
                if outcome.redirect is not None:
                    await self._redirect(outcome.redirect, redirect_depth)
                return None
            if self._superseded(navigation_id):
                return None

            self._save_scroll(from_)

            resolve_context = ResolveContext(to=to, from_=from_, route=route)
            await self.events.emit(BEFORE_RESOLVE, resolve_context)
            if resolve_context.cancelled:
                return None
            if resolve_context.redirect_to:
                await self._redirect(resolve_context.redirect_to, redirect_depth)
                return None

            resolved = await self.resolver.resolve_route(route, self.config.global_layout)
            resolve_context.layout_component = resolved.layout
            resolve_context.page_component = resolved.page
            await self.events.emit(AFTER_RESOLVE, resolve_context)
            if self._superseded(navigation_id):
                return None

            previous = self.previous_route.value
            previous_resolved = self._resolved
            try:
                await self._unmount_previous(to, from_)
                if self._superseded(navigation_id):
                    if self.current_route.value is from_:
                        await self._restore(from_, previous, previous_resolved)
                    return None

                self._commit(from_, to, resolved)

                render_context = RenderContext(
                    to=to,
                    from_=from_,
                    layout_component=resolved.layout,
                    page_component=resolved.page,
                )
                await self.events.emit(BEFORE_RENDER, render_context)
                if self._overtaken(navigation_id, to):
                    return None
                await self._render(resolved.layout, resolved.page)
                if self._overtaken(navigation_id, to):
                    # Our mount landed over a newer transition's view
                    await self._restore(
                        self.current_route.value, self.previous_route.value, self._resolved
                    )
                    return None
                await self.events.emit(AFTER_RENDER, render_context)

                saved = self._scroll_positions.get(to.path) if is_pop_state else None
                await self.events.emit(
                    SCROLL, ScrollContext(to=to, from_=from_, saved_position=saved)
                )

                if route.after_enter is not None:
                    await invoke(route.after_enter, to, from_)
                await self.events.emit(AFTER_ENTER, to, from_)
                await self.events.emit(AFTER_EACH, to, from_)
            except Exception:
                if self.current_route.value is from_ or self.current_route.value is to:
                    await self._restore(from_, previous, previous_resolved)
                raise
            if self._overtaken(navigation_id, to):
                return None
            return to
        except Exception as exc:
            self.error_handler.log(
                "Error during navigation",
                exc,
                {"to": to.path, "from": from_.path if from_ else None},
            )
            await self._emit_error(exc, to, from_)
            return None

    def _superseded(self, navigation_id: int) -> bool:
        if navigation_id != self._navigation_id:
            logger.debug(
                "navigation %d superseded by %d", navigation_id, self._navigation_id
            )
            return True
        return False

    def _overtaken(self, navigation_id: int, to: RouteLocation) -> bool:
        """True once a newer transition has committed over *to*."""
        return self._superseded(navigation_id) and self.current_route.value is not to

    def _commit(
        self,
        previous: RouteLocation | None,
        current: RouteLocation | None,
        resolved: ResolvedComponents | None,
    ) -> None:
        # Synchronous writes, no await in between
        self.previous_route.value = previous
        self.current_route.value = current
        self.current_params.value = dict(current.params) if current else {}
        self.current_query.value = dict(current.query) if current else {}
        self._resolved = resolved

    async def _restore(
        self,
        location: RouteLocation | None,
        previous: RouteLocation | None,
        resolved: ResolvedComponents | None,
    ) -> None:
        """Put *location* back in the signals and on screen."""
        await self._try_unmount(self.current_view.value)
        await self._try_unmount(self.current_layout.value)
        self.current_view.value = None
        self.current_layout.value = None
        if self.current_route.value is not location or self._resolved is not resolved:
            self._commit(previous, location, resolved)
        if location is None or resolved is None:
            return
        logger.debug("restoring view for %s", location.path)
        try:
            await self._render(resolved.layout, resolved.page)
        except Exception as exc:
            self.error_handler.log(
                "Restoring the previous view failed", exc, {"path": location.path}
            )

    async def _redirect(self, target: RedirectTarget, depth: int) -> None:
        if depth >= self.config.max_redirects:
            path = NavigationTarget.coerce(target).path
            error = RedirectLimitExceeded(path, self.config.max_redirects)
            self.error_handler.warn(str(error), {"target": path})
            await self._emit_error(error, None, self.current_route.value)
            return
        await self._navigate(target, redirect_depth=depth + 1)

    def _save_scroll(self, from_: RouteLocation | None) -> None:
        if from_ is None:
            return
        position = self.browser.scroll_position()
        if position is not None:
            self._scroll_positions[from_.path] = position

    def saved_scroll_position(self, path: str) -> tuple[float, float] | None:
        """Scroll position recorded when *path* was last left, if any."""
        return self._scroll_positions.get(path)

    # -- Rendering --

    def _effective_layout(self, route: RouteDefinition) -> Any:
        return route.layout if route.layout is not None else self.config.global_layout

    async def _try_unmount(self, instance: Any) -> None:
        if instance is None:
            return
        try:
            await instance.unmount()
        except Exception as exc:
            self.error_handler.warn(
                "Error during component unmount", {"error": exc, "instance": instance}
            )

    async def _unmount_previous(self, to: RouteLocation, from_: RouteLocation | None) -> None:
        if from_ is None:
            return
        if self._effective_layout(to.matched) != self._effective_layout(from_.matched):
            # Layout changes: tear down the view, then the layout around it
            await self._try_unmount(self.current_view.value)
            await self._try_unmount(self.current_layout.value)
            self.current_view.value = None
            self.current_layout.value = None
        else:
            await self._try_unmount(self.current_view.value)
            self.current_view.value = None

        if from_.matched.after_leave is not None:
            await invoke(from_.matched.after_leave, to, from_)
        await self.events.emit(AFTER_LEAVE, to, from_)

    def _mount_element(self) -> Any:
        return self.browser.document.query_selector(self.config.mount)

    def _find_view_element(self, container: Any) -> Any:
        """Locate the layout's view slot: ``#name``, ``.name``, ``[data-name]``, ``name``."""
        name = self.config.view_selector
        for selector in (f"#{name}", f".{name}", f"[data-{name}]", name):
            try:
                element = container.query_selector(selector)
            except ValueError:
                continue
            if element is not None:
                return element
        return container

    async def _render(self, layout_component: Any, page_component: Any) -> None:
        mount_element = self._mount_element()
        if mount_element is None:
            self.error_handler.handle(
                ConfigurationError(f"Mount element {self.config.mount!r} not found."),
                "Render failed",
                {"mount_selector": self.config.mount},
            )

        props = {"router": self.context}
        if layout_component is None:
            self.current_view.value = await self._mount(mount_element, page_component, props)
            self.current_layout.value = None
            return

        layout = self.current_layout.value
        keep_layout = (
            layout is not None
            and getattr(layout, "mounted", True)
            and getattr(layout, "definition", layout_component) == layout_component
        )
        if not keep_layout:
            await self._try_unmount(layout)
            layout = await self._mount(mount_element, layout_component, props)
            self.current_layout.value = layout
        view_element = self._find_view_element(layout.container)
        self.current_view.value = await self._mount(view_element, page_component, props)

    # -- URL synchronization --

    def _read_location(self) -> str:
        """The full URL (``/path?query``) the browser currently shows, per mode."""
        location = self.browser.location
        match self.config.mode:
            case "hash":
                return location.hash[1:] or "/"
            case "query":
                query = parse_query(location.search)
                path = query.pop(self.config.query_param, "") or "/"
                return join_url(path if path.startswith("/") else f"/{path}", query)
            case _:
                return f"{location.pathname or '/'}{location.search}"

    def _build_query_url(self, full_url: str) -> str:
        path, query_string = split_url(full_url)
        location = self.browser.location
        query = parse_query(location.search)
        previous = self.previous_route.value
        if previous is not None:
            for key in previous.query:
                query.pop(key, None)
        query.update(parse_query(query_string))
        query[self.config.query_param] = path
        return f"{location.pathname}?{build_query(query)}"

    async def _sync_history(
        self,
        full_url: str,
        *,
        replace: bool = False,
        state: Mapping[str, Any] | None = None,
    ) -> None:
        state = dict(state or {})
        location = self.browser.location
        match self.config.mode:
            case "hash":
                if replace:
                    self.browser.replace_state(
                        state, f"{location.pathname}{location.search}#{full_url}"
                    )
                else:
                    await self.browser.set_hash(full_url)
            case "query":
                url = self._build_query_url(full_url)
                if replace:
                    self.browser.replace_state(state, url)
                else:
                    self.browser.push_state(state, url)
            case _:
                if replace:
                    self.browser.replace_state(state, full_url)
                else:
                    self.browser.push_state(state, full_url)

    # -- Errors --

    async def _emit_error(
        self,
        error: BaseException,
        to: RouteLocation | None = None,
        from_: RouteLocation | None = None,
    ) -> None:
        try:
            await self.events.emit(ERROR, error, to, from_)
        except Exception as exc:
            self.error_handler.log("Error listener failed", exc)

    def set_error_handler(self, error_handler: Any) -> None:
        """Replace the error handler. Objects without handle/warn/log are rejected."""
        if is_error_handler(error_handler):
            self.error_handler = error_handler
            return
        logger.warning(
            "[wren.router] Invalid error handler provided. Must have handle, warn, and log methods."
        )

    # -- Route catalog --

    def add_route(self, route: RouteDefinition | Mapping[str, Any]) -> Callable[[], bool]:
        """Add a route ahead of any catch-all. Returns a function that removes it.

        Duplicate paths are warned and ignored. Raises ``ConfigurationError``
        for a malformed path.
        """
        added = self._registry.add(route)
        if added is None:
            return lambda: False
        self.events.emit_sync(ROUTE_ADDED, added)
        return lambda: self.remove_route(added.path)

    def remove_route(self, path: str) -> bool:
        removed = self._registry.remove(path)
        if removed is None:
            return False
        self.events.emit_sync(ROUTE_REMOVED, removed)
        return True

    def has_route(self, path: str) -> bool:
        return self._registry.has(path)

    def get_route(self, path: str) -> RouteDefinition | None:
        return self._registry.get(path)

    def get_routes(self) -> list[RouteDefinition]:
        return self._registry.routes

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    # -- Guards, hooks and events --

    def on_before_each(self, guard: Guard) -> Unsubscribe:
        """Add a global guard. Guards run in registration order."""
        self._guards.append(guard)

        def remove() -> None:
            if guard in self._guards:
                self._guards.remove(guard)

        return remove

    def on_after_enter(self, hook: Hook) -> Unsubscribe:
        return self.events.on(AFTER_ENTER, hook)

    def on_after_leave(self, hook: Hook) -> Unsubscribe:
        return self.events.on(AFTER_LEAVE, hook)

    def on_after_each(self, hook: Hook) -> Unsubscribe:
        return self.events.on(AFTER_EACH, hook)

    def on_error(self, listener: Listener) -> Unsubscribe:
        """Listen for navigation errors; called with ``(error, to, from_)``."""
        return self.events.on(ERROR, listener)

    def on(self, event: str, listener: Listener) -> Unsubscribe:
        """Listen to any router event by name."""
        return self.events.on(event, listener)

    # -- Plugins --

    def use(self, plugin: Any, options: Mapping[str, Any] | None = None) -> bool:
        """Install a plugin. Returns ``False`` when the name is already taken."""
        return self._plugins.install(self, plugin, options)

    async def remove_plugin(self, name: str) -> bool:
        return await self._plugins.remove(self, name)

    def get_plugin(self, name: str) -> Any | None:
        return self._plugins.get(name)

    def get_plugins(self) -> list[Any]:
        return self._plugins.all()
