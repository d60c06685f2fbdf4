"""Tests for wren.routing.matcher — pattern parsing and catalog matching."""

import pytest

from wren.errors import ConfigurationError
from wren.routing.matcher import (
    PATH_MATCH,
    match_path,
    match_wildcard,
    normalize_path,
    parse_path,
    split_path,
)
from wren.routing.registry import compile_route
from wren.routing.route import RouteDefinition


def _route(path: str) -> RouteDefinition:
    return compile_route(RouteDefinition(path=path, component=None))


class TestNormalizePath:
    def test_root(self) -> None:
        assert normalize_path("/") == "/"
        assert normalize_path("") == "/"

    def test_trailing_slash(self) -> None:
        assert normalize_path("/users/") == "/users"

    def test_repeated_slashes(self) -> None:
        assert normalize_path("//users///42") == "/users/42"

    def test_missing_leading_slash(self) -> None:
        assert normalize_path("users") == "/users"

    def test_split(self) -> None:
        assert split_path("/a/b/") == ["a", "b"]
        assert split_path("/") == []


class TestParsePath:
    def test_root(self) -> None:
        assert parse_path("/") == ()

    def test_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]
        assert all(s.kind == "static" for s in segments)

    def test_param(self) -> None:
        segments = parse_path("/users/:id")
        assert segments[1].is_param is True
        assert segments[1].name == "id"

    def test_trailing_wildcard(self) -> None:
        segments = parse_path("/files/*")
        assert segments[-1].kind == "wildcard"
        assert segments[-1].name == PATH_MATCH

    def test_catch_all(self) -> None:
        segments = parse_path("*")
        assert len(segments) == 1
        assert segments[0].kind == "wildcard"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_path("")

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_path(None)  # type: ignore[arg-type]

    def test_nameless_param_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid parameter segment"):
            parse_path("/users/:")

    def test_wildcard_must_be_last(self) -> None:
        with pytest.raises(ConfigurationError, match="last segment"):
            parse_path("/files/*/edit")


class TestMatchPath:
    def test_static_match(self) -> None:
        routes = [_route("/"), _route("/about")]
        match = match_path("/about", routes)
        assert match is not None
        assert match.route.path == "/about"
        assert match.params == {}

    def test_root_does_not_match_other_paths(self) -> None:
        assert match_path("/about", [_route("/")]) is None

    def test_trailing_slash_ignored(self) -> None:
        match = match_path("/about/", [_route("/about")])
        assert match is not None

    def test_case_sensitive(self) -> None:
        assert match_path("/About", [_route("/about")]) is None

    def test_param_extraction(self) -> None:
        match = match_path("/users/42/posts/7", [_route("/users/:id/posts/:post")])
        assert match is not None
        assert match.params == {"id": "42", "post": "7"}

    def test_param_decoding(self) -> None:
        match = match_path("/users/john%20doe", [_route("/users/:id")])
        assert match is not None
        assert match.params == {"id": "john doe"}

    def test_segment_count_must_agree(self) -> None:
        assert match_path("/users/42/extra", [_route("/users/:id")]) is None
        assert match_path("/users", [_route("/users/:id")]) is None

    def test_first_match_wins(self) -> None:
        routes = [_route("/users/new"), _route("/users/:id")]
        match = match_path("/users/new", routes)
        assert match is not None
        assert match.route.path == "/users/new"

    def test_trailing_wildcard_binds_rest(self) -> None:
        match = match_path("/files/a/b%20c.txt", [_route("/files/*")])
        assert match is not None
        assert match.params == {PATH_MATCH: "a/b c.txt"}

    def test_trailing_wildcard_matches_empty_rest(self) -> None:
        match = match_path("/files", [_route("/files/*")])
        assert match is not None
        assert match.params == {PATH_MATCH: ""}


class TestMatchWildcard:
    def test_fallback(self) -> None:
        match = match_wildcard("/unknown", [_route("/a"), _route("*")])
        assert match is not None
        assert match.route.path == "*"
        assert match.params == {PATH_MATCH: "unknown"}

    def test_nested_path(self) -> None:
        match = match_wildcard("/a/b/", [_route("*")])
        assert match is not None
        assert match.params[PATH_MATCH] == "a/b"

    def test_no_wildcard_registered(self) -> None:
        assert match_wildcard("/unknown", [_route("/a")]) is None
