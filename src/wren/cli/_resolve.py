"""Router import resolution — ``"module:attribute"`` strings to Router instances."""

import importlib
import sys

from wren.router import Router


def resolve_router(import_string: str) -> Router:
    """Resolve an import string to a wren ``Router``.

    When the attribute is omitted it defaults to ``"router"``
    (``"myapp"`` resolves to ``myapp.router``). A callable that is not a
    ``Router`` is treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the result is not a ``Router``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Router):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wren.Router instance"
        raise TypeError(msg)

    return obj


def load_router(import_string: str) -> Router:
    """``resolve_router`` for commands: errors print to stderr and exit 1."""
    try:
        return resolve_router(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def describe_component(ref: object) -> str:
    """Short display form of a component reference."""
    if ref is None:
        return "-"
    if isinstance(ref, str):
        return ref
    name = getattr(ref, "name", None)
    if isinstance(name, str) and name:
        return name
    loader = getattr(ref, "loader", None)
    if isinstance(loader, str):
        return f"lazy({loader})"
    if isinstance(ref, dict):
        return ref.get("name") or "<mapping>"
    return getattr(ref, "__name__", type(ref).__name__)
