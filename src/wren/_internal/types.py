"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Navigation guard: (to, from_) -> bool | str | target | None, sync or async
Guard: TypeAlias = Callable[..., Any]

# Lifecycle hook: (to, from_) -> None, result ignored
Hook: TypeAlias = Callable[..., Any]

# Event listener: receives the emitted arguments
Listener: TypeAlias = Callable[..., Any]

# Removes a previously registered guard, hook or listener
Unsubscribe: TypeAlias = Callable[[], None]
