"""Reflected class members.

Members are read from the class `__dict__` of every class in the method resolution order of the examined class,
in declaration order, so that predicates can tell declared members from inherited ones. A name is reported once,
for its nearest declaration. Dunder names are synthetic and never reported.
"""

from __future__ import annotations

import importlib
import inspect
import typing
from dataclasses import dataclass
from types import FunctionType
from typing import TYPE_CHECKING, Any, Callable, Iterator

from legacywire.constants import LOGGER
from legacywire.util import ensure_is_type, evaluate_annotation, get_globals, qualified_name

if TYPE_CHECKING:
    from legacywire.types import MemberKind


@dataclass(frozen=True)
class Member:
    """A field or method belonging to a class, as seen while examining `examined_type`.

    `value_type` is the type of a field or the return type of a method. It is None when it cannot be determined.
    """

    name: str
    kind: MemberKind
    examined_type: type
    declaring_type: type
    is_static: bool
    value_type: type | None = None
    parameter_count: int = 0

    def __str__(self) -> str:
        return f"{'static ' if self.is_static else ''}{self.kind} {qualified_name(self.declaring_type)}.{self.name}"


def resolve_type(class_name: str) -> type[Any] | None:
    """Resolve a dotted class name such as `pkg.module.Outer.Inner` to the class.

    Classes that cannot be imported or found are not an error: the result is None. This includes modules failing
    with any exception while being imported.
    """
    parts = class_name.split(".")

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name is not None and module_name.startswith(e.name):
                continue
            LOGGER.debug("Cannot load %s: %s", class_name, e)
            return None
        except Exception as e:  # noqa: BLE001
            LOGGER.debug("Cannot load %s: %s", class_name, e)
            return None

        obj: Any = module
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)

        return obj if inspect.isclass(obj) else None

    return None


def read_fields(klass: type[Any]) -> list[Member]:
    """Read the fields visible on klass.

    Class attributes holding plain values are static fields. Names annotated without a class level value are
    instance fields, unless annotated as ClassVar.
    """
    members: list[Member] = []
    seen: set[str] = set()

    for owner in _hierarchy(klass):
        for name, raw in vars(owner).items():
            if _is_synthetic(name) or name in seen:
                continue
            seen.add(name)

            if _is_plain_value(raw):
                members.append(Member(name, "field", klass, owner, is_static=True, value_type=type(raw)))

        globalns = get_globals(owner)
        for name, annotation in _own_annotations(owner).items():
            if _is_synthetic(name) or name in seen:
                continue
            seen.add(name)

            is_class_var, declared = _unwrap_class_var(evaluate_annotation(annotation, globalns))
            members.append(
                Member(name, "field", klass, owner, is_static=is_class_var, value_type=ensure_is_type(declared))
            )

    return members


def read_methods(klass: type[Any]) -> list[Member]:
    """Read the methods visible on klass.

    Static methods and class methods are static members, plain functions are instance methods.
    """
    members: list[Member] = []
    seen: set[str] = set()

    for owner in _hierarchy(klass):
        for name, raw in vars(owner).items():
            if _is_synthetic(name) or name in seen:
                continue
            seen.add(name)

            if isinstance(raw, staticmethod):
                fn, is_static, bound_args = raw.__func__, True, 0
            elif isinstance(raw, classmethod):
                fn, is_static, bound_args = raw.__func__, True, 1
            elif isinstance(raw, FunctionType):
                fn, is_static, bound_args = raw, False, 1
            else:
                continue

            members.append(
                Member(
                    name,
                    "method",
                    klass,
                    owner,
                    is_static=is_static,
                    value_type=_return_type(fn),
                    parameter_count=_required_parameter_count(fn, bound_args),
                )
            )

    return members


def _hierarchy(klass: type[Any]) -> Iterator[type[Any]]:
    return (owner for owner in inspect.getmro(klass) if owner is not object)


def _is_synthetic(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_plain_value(raw: Any) -> bool:
    # Nested classes, functions and descriptors such as properties are not fields.
    return not inspect.isclass(raw) and not hasattr(type(raw), "__get__")


def _own_annotations(owner: type[Any]) -> dict[str, Any]:
    try:
        return inspect.get_annotations(owner)
    except Exception:  # noqa: BLE001
        return {}


def _unwrap_class_var(annotation: Any) -> tuple[bool, Any]:
    if annotation is typing.ClassVar:
        return True, None

    if typing.get_origin(annotation) is typing.ClassVar:
        args = typing.get_args(annotation)
        return True, args[0] if args else None

    return False, annotation


def _return_type(fn: Callable[..., Any]) -> type[Any] | None:
    try:
        annotation = fn.__annotations__.get("return")
    except Exception:  # noqa: BLE001
        return None

    return ensure_is_type(annotation, get_globals(fn))


def _required_parameter_count(fn: Callable[..., Any], bound_args: int) -> int:
    try:
        parameters = list(inspect.signature(fn).parameters.values())[bound_args:]
    except (TypeError, ValueError):
        return 0

    return sum(
        1
        for p in parameters
        if p.default is inspect.Parameter.empty and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    )
