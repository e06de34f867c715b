from __future__ import annotations

import functools
import importlib
from typing import Any, Callable, TypeVar

import eval_type_backport

T = TypeVar("T")


def get_globals(obj: type[Any] | Callable[..., Any]) -> dict[str, Any]:
    """Return the globals for the given object."""
    if isinstance(obj, type):
        return importlib.import_module(obj.__module__).__dict__

    # Unwrap nested functools.partial to get the underlying function
    while isinstance(obj, functools.partial):
        obj = obj.func

    return getattr(obj, "__globals__", {})


def evaluate_annotation(value: Any, globalns: dict[str, Any] | None = None) -> Any:
    """Evaluate a string annotation using eval_type_backport. Annotations that cannot be evaluated yield None."""
    if not isinstance(value, str):
        return value

    try:
        return eval_type_backport.eval_type_backport(
            eval_type_backport.ForwardRef(value, is_argument=False), globalns=globalns, try_default=False
        )
    except Exception:  # noqa: BLE001
        return None


def ensure_is_type(value: type[T] | str | None, globalns: dict[str, Any] | None = None) -> type[T] | None:
    """Ensure the given value represents a class.

    String annotations are evaluated first. Anything that does not evaluate to a class, such as unions,
    generics or names that cannot be resolved, yields None.
    """
    value = evaluate_annotation(value, globalns)

    return value if isinstance(value, type) else None


def is_subtype(candidate: type[Any] | None, klass: type[Any]) -> bool:
    """Determine if candidate is klass or a subclass of it."""
    return candidate is not None and isinstance(candidate, type) and issubclass(candidate, klass)


def qualified_name(klass: type[Any]) -> str:
    return f"{klass.__module__}.{klass.__qualname__}"
