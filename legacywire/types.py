from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from typing_extensions import Literal

from legacywire.members import resolve_type

if TYPE_CHECKING:
    from legacywire.binding import ExternalFactoryMethod, FieldSingleton, MethodFactory

Scope = Literal["singleton", "prototype"]
MemberKind = Literal["field", "method"]
FilterKind = Literal["field", "method", "factory"]

BindingStrategy = Union["FieldSingleton", "MethodFactory", "ExternalFactoryMethod"]


@dataclass
class Registration:
    """A not yet finalized container registration for one class.

    Created by the scanner with the container defaults, mutated once by the winning access filter and then
    handed to the definition registry.
    """

    class_name: str
    klass: type[Any] | None = None
    scope: Scope = "singleton"
    lazy: bool = False
    strategy: BindingStrategy | None = None
    name: str | None = None

    def resolve_class(self) -> type[Any] | None:
        """Return the registered class, resolving it from the class name if it was not loaded yet."""
        if self.klass is None:
            self.klass = resolve_type(self.class_name)

        return self.klass


NameGenerator = Callable[[Registration, Any], str]
"""Produce the registration name of a definition, given the definition registry it will be added to."""
