"""Tests for wren.errors — exception hierarchy and messages."""

import dataclasses

import pytest

from wren.errors import (
    ComponentResolutionError,
    ConfigurationError,
    NavigationError,
    RedirectLimitExceeded,
    RouteNotFound,
    RouterError,
    WrenError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ConfigurationError,
            ComponentResolutionError,
            NavigationError,
            RouteNotFound,
            RedirectLimitExceeded,
            RouterError,
        ],
    )
    def test_all_are_wren_errors(self, cls: type) -> None:
        assert issubclass(cls, WrenError)

    def test_navigation_errors(self) -> None:
        assert issubclass(RouteNotFound, NavigationError)
        assert issubclass(RedirectLimitExceeded, NavigationError)


class TestNavigationErrors:
    def test_route_not_found(self) -> None:
        error = RouteNotFound("/nope", "/")
        assert str(error) == "Route not found: /nope"
        assert error.to == "/nope"
        assert error.from_ == "/"

    def test_redirect_limit(self) -> None:
        error = RedirectLimitExceeded("/a", 10)
        assert "Redirect limit of 10 exceeded" in str(error)
        assert error.to == "/a"

    def test_frozen(self) -> None:
        error = NavigationError(detail="x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            error.detail = "y"  # type: ignore[misc]

    def test_can_be_raised(self) -> None:
        with pytest.raises(NavigationError, match="Route not found"):
            raise RouteNotFound("/x")


class TestRouterError:
    def test_fields(self) -> None:
        original = ValueError("v")
        error = RouterError("msg", original=original, context="Render failed")
        assert str(error) == "msg"
        assert error.original is original
        assert error.details == {}
