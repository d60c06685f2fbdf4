"""Invoke helpers — call sync or async guards, hooks and listeners uniformly.

Guards, route hooks, event listeners, component ``setup`` functions and
plugin ``install``/``destroy`` can all be ``def`` or ``async def``. Any
code that calls one of them goes through this helper so the sync/async
check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(guard, to, from_)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync guard, returns immediately
        def require_login(to, from_):
            return "/login" if to.meta.get("auth") else None

        # async guard, awaited before the pipeline moves on
        async def require_login(to, from_):
            user = await session.current_user()
            return user is not None
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
