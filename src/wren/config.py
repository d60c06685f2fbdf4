"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from typing import Any, Literal

type RouterMode = Literal["hash", "history", "query"]

MODES: frozenset[str] = frozenset({"hash", "history", "query"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(mode="history", mount="#root", global_layout=Shell)
    """

    # URL strategy
    mode: RouterMode = "hash"
    query_param: str = "view"  # Holds the path in "query" mode (?view=/users/1)

    # Rendering targets
    mount: str = "#app"
    view_selector: str = "root"  # Tried as #root, .root, [data-root], root

    # Default layout for routes that declare none
    global_layout: Any = None

    # Lifecycle
    auto_start: bool = True
    max_redirects: int = 10
