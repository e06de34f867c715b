from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from legacywire.binding import ExternalFactoryMethod, FieldSingleton, MethodFactory
from legacywire.errors import ConfigurationError
from legacywire.members import Member, read_fields, read_methods, resolve_type
from legacywire.predicates import (
    MemberPredicate,
    anything,
    declared_on_examined_type,
    every,
    static,
    takes_no_arguments,
    visible,
)
from legacywire.util import is_subtype

if TYPE_CHECKING:
    from legacywire.types import BindingStrategy, FilterKind, Registration, Scope


def _provides(klass: type[Any]) -> MemberPredicate:
    def _provides_klass(member: Member) -> bool:
        return is_subtype(member.value_type, klass)

    return _provides_klass


@dataclass(frozen=True)
class AccessFilter:
    """A rule pairing a member predicate with the way matching classes get bound.

    * `field`: a static field of the examined class holding an instance of it becomes a lazy singleton.
    * `method`: a static method of the examined class returning an instance of it becomes the factory method.
    * `factory`: a method of the separate `factory` class returning an instance of the examined class becomes the
      factory method. The examined class itself is never inspected.

    Factory methods are called without arguments, so only methods without required parameters qualify.

    On top of `access_check` members must always be visible and declared directly on the class they are read
    from. When several members qualify, the first one in declaration order is used.
    """

    kind: FilterKind
    access_check: MemberPredicate = anything
    scope: Scope = "singleton"
    factory: type[Any] | None = None

    def __post_init__(self) -> None:
        if self.kind not in ("field", "method", "factory"):
            msg = f"Unknown access filter kind '{self.kind}'. Use one of: field, method, factory."
            raise ConfigurationError(msg)

        if self.scope not in ("singleton", "prototype"):
            msg = f"Unknown scope '{self.scope}'. Use one of: singleton, prototype."
            raise ConfigurationError(msg)

        if self.kind == "field" and self.scope != "singleton":
            msg = "Static fields can only provide singletons."
            raise ConfigurationError(msg)

        if (self.kind == "factory") != (self.factory is not None):
            msg = "A factory class must be given for, and only for, factory access filters."
            raise ConfigurationError(msg)

    def matches(self, klass: type[Any]) -> Member | None:
        """Return the member to bind klass with, or None if this filter does not apply to klass."""
        if self.kind == "field":
            members, strategy_check = read_fields(klass), every(static, _provides(klass))
        elif self.kind == "method":
            members, strategy_check = read_methods(klass), every(static, takes_no_arguments, _provides(klass))
        else:
            members = read_methods(self.factory)  # type: ignore[arg-type]
            strategy_check = every(takes_no_arguments, _provides(klass))

        check = every(visible, declared_on_examined_type, strategy_check, self.access_check)

        return next((member for member in members if check(member)), None)

    def binding_for(self, member: Member) -> BindingStrategy:
        if self.kind == "field":
            return FieldSingleton(member)

        if self.kind == "method":
            return MethodFactory(member, self.scope)

        return ExternalFactoryMethod(self.factory, member, self.scope)  # type: ignore[arg-type]

    def apply(self, member: Member, registration: Registration) -> None:
        """Rewrite registration so the container obtains its instances through member."""
        registration.scope = self.scope
        registration.lazy = True
        registration.strategy = self.binding_for(member)

    def match(self, class_name: str) -> bool:
        """Type filter used by the scanner to decide whether to create a registration at all."""
        klass = resolve_type(class_name)

        return klass is not None and self.matches(klass) is not None

    def supports(self, registration: Registration) -> bool:
        klass = registration.resolve_class()

        return klass is not None and self.matches(klass) is not None

    def customize(self, registration: Registration) -> None:
        klass = registration.resolve_class()

        if klass is not None and (member := self.matches(klass)) is not None:
            self.apply(member, registration)

    def __str__(self) -> str:
        source = f" of {self.factory.__module__}.{self.factory.__qualname__}" if self.factory else ""
        return f"{self.scope} {self.kind} filter{source}"


def field_filter(access_check: MemberPredicate = anything) -> AccessFilter:
    return AccessFilter("field", access_check)


def method_filter(access_check: MemberPredicate = anything, scope: Scope = "singleton") -> AccessFilter:
    return AccessFilter("method", access_check, scope)


def resolve_factory(factory: type[Any] | str) -> type[Any]:
    """Resolve a factory class given as a class or its dotted name.

    :raises ConfigurationError: If factory cannot be resolved to a class.
    """
    klass = resolve_type(factory) if isinstance(factory, str) else factory

    if not isinstance(klass, type):
        msg = f"Cannot use {factory!r} as legacy factory as it cannot be resolved to a class."
        raise ConfigurationError(msg)

    return klass


def factory_filter(
    factory: type[Any] | str,
    access_check: MemberPredicate = anything,
    scope: Scope = "singleton",
) -> AccessFilter:
    """Create a filter binding classes to the methods of factory returning them."""
    return AccessFilter("factory", access_check, scope, factory=resolve_factory(factory))
