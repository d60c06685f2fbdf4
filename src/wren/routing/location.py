"""URL helpers — query strings, placeholder filling, and full-URL splitting.

Query maps are flat ``dict[str, str]``: when a key repeats, the last
value wins, matching how browsers expose ``URLSearchParams`` as a plain
object.
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode


def parse_query(query_string: str | None) -> dict[str, str]:
    """Parse ``a=1&b=2`` (with or without a leading ``?``) into a dict."""
    if not query_string:
        return {}
    return dict(parse_qsl(query_string.lstrip("?"), keep_blank_values=True))


def build_query(query: Mapping[str, Any]) -> str:
    """Encode a query map, without the leading ``?``."""
    return urlencode({key: str(value) for key, value in query.items()})


def build_path(path: str, params: Mapping[str, Any]) -> str:
    """Fill ``:name`` placeholders in *path* with URL-encoded *params* values.

    ``build_path("/users/:id", {"id": "john doe"})`` -> ``"/users/john%20doe"``.
    Placeholders without a matching param are left as-is.
    """
    result = path
    for key, value in params.items():
        encoded = quote(str(value), safe="")
        result = re.sub(rf":{re.escape(key)}\b", lambda _m, v=encoded: v, result)
    return result


def split_url(full_url: str) -> tuple[str, str]:
    """Split ``/path?query`` into ``("/path", "query")``.

    An empty input is the root path; a missing leading slash is added.
    """
    path, _, query_string = (full_url or "/").partition("?")
    if not path.startswith("/"):
        path = f"/{path}"
    return path, query_string


def join_url(path: str, query: Mapping[str, Any]) -> str:
    """Inverse of ``split_url`` for a path and a query map."""
    query_string = build_query(query)
    return f"{path}?{query_string}" if query_string else path
