"""Tests for wren.config — RouterConfig defaults and immutability."""

import dataclasses

import pytest

from wren.config import MODES, RouterConfig


class TestRouterConfig:
    def test_defaults(self) -> None:
        config = RouterConfig()
        assert config.mode == "hash"
        assert config.query_param == "view"
        assert config.mount == "#app"
        assert config.view_selector == "root"
        assert config.global_layout is None
        assert config.auto_start is True
        assert config.max_redirects == 10

    def test_overrides(self) -> None:
        config = RouterConfig(mode="history", mount="#root")
        assert config.mode == "history"
        assert config.mount == "#root"

    def test_frozen(self) -> None:
        config = RouterConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.mode = "query"  # type: ignore[misc]

    def test_modes(self) -> None:
        assert frozenset({"hash", "history", "query"}) == MODES
