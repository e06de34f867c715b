from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from legacywire.constants import LOWEST_PRECEDENCE
from legacywire.errors import ConfigurationError
from legacywire.filters import AccessFilter, factory_filter, field_filter, method_filter, resolve_factory
from legacywire.predicates import MemberPredicate, and_constant, any_getter, anything, named
from legacywire.processor import LegacyRegistryPostProcessor
from legacywire.scanner import PackageRef, generate_name

if TYPE_CHECKING:
    from legacywire.types import NameGenerator


def legacy_packages(*base_packages: PackageRef) -> LegacyRegistryPostProcessorBuilder:
    """Start building a post processor scanning base_packages.

    If no packages are passed, the package of the caller is used.

    :raises ConfigurationError: If no packages are passed and the caller does not belong to a package.
    """
    if not base_packages:
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        package = _package_of(caller.f_globals) if caller is not None else None
        del frame, caller

        if not package:
            msg = "No base packages given and the caller's package cannot be determined. Pass the packages to scan."
            raise ConfigurationError(msg)

        return LegacyRegistryPostProcessorBuilder(package)

    return LegacyRegistryPostProcessorBuilder(*base_packages)


def _package_of(caller_globals: dict[str, Any]) -> str | None:
    if package := caller_globals.get("__package__"):
        return package  # type: ignore[no-any-return]

    name = caller_globals.get("__name__")

    return None if name in (None, "__main__") else name


class LegacyRegistryPostProcessorBuilder:
    """Fluent configuration of a `LegacyRegistryPostProcessor`.

    Access filters are consulted in the order they are added here. If none is added, static methods named like
    getters and static fields named like constants are registered as singletons, in this order.
    """

    def __init__(self, *base_packages: PackageRef) -> None:
        self._base_packages = base_packages
        self._filters: list[AccessFilter] = []
        self._name_generator: NameGenerator = generate_name
        self._order = LOWEST_PRECEDENCE

    def bean_naming(self, name_generator: NameGenerator) -> Self:
        """Use a different generator for the names of the registrations."""
        self._name_generator = name_generator
        return self

    def ordered(self, order: int) -> Self:
        """Adjust the order of the post processor. Lower values run earlier."""
        self._order = order
        return self

    def singletons_from(self) -> SingletonBuilder:
        return SingletonBuilder(self)

    def prototypes_from(self) -> PrototypeBuilder:
        return PrototypeBuilder(self)

    def factory(self, factory: type[Any] | str) -> FactoryBuilder:
        """Register classes created by the methods of factory, a class or its dotted name.

        :raises ConfigurationError: If factory cannot be resolved to a class.
        """
        return FactoryBuilder(self, resolve_factory(factory))

    def from_static_fields(self, *field_names: str) -> Self:
        """Register singletons from static fields with one of field_names, or any name if none is given."""
        return self.add_filter(field_filter(named(*field_names) if field_names else anything))

    def from_static_methods(self, *method_names: str) -> Self:
        """Register singletons from static methods with one of method_names, or any name if none is given."""
        return self.add_filter(method_filter(named(*method_names) if method_names else anything))

    def add_filter(self, access_filter: AccessFilter) -> Self:
        self._filters.append(access_filter)
        return self

    def build(self) -> LegacyRegistryPostProcessor:
        """Create the post processor as configured.

        :raises ConfigurationError: If no base packages were given.
        """
        filters = self._filters or [method_filter(any_getter), field_filter(and_constant)]

        return LegacyRegistryPostProcessor(
            filters,
            *self._base_packages,
            name_generator=self._name_generator,
            order=self._order,
        )


class _SourceBuilder:
    __slots__ = ("_parent",)

    def __init__(self, parent: LegacyRegistryPostProcessorBuilder) -> None:
        self._parent = parent


class SingletonBuilder(_SourceBuilder):
    def fields(self, access_check: MemberPredicate = anything) -> LegacyRegistryPostProcessorBuilder:
        return self._parent.add_filter(field_filter(access_check))

    def methods(self, access_check: MemberPredicate = anything) -> LegacyRegistryPostProcessorBuilder:
        return self._parent.add_filter(method_filter(access_check, "singleton"))


class PrototypeBuilder(_SourceBuilder):
    def methods(self, access_check: MemberPredicate = anything) -> LegacyRegistryPostProcessorBuilder:
        return self._parent.add_filter(method_filter(access_check, "prototype"))


class FactoryBuilder(_SourceBuilder):
    __slots__ = ("_factory",)

    def __init__(self, parent: LegacyRegistryPostProcessorBuilder, factory: type[Any]) -> None:
        super().__init__(parent)
        self._factory = factory

    def singletons(self, access_check: MemberPredicate = anything) -> LegacyRegistryPostProcessorBuilder:
        return self._parent.add_filter(factory_filter(self._factory, access_check, "singleton"))

    def prototypes(self, access_check: MemberPredicate = anything) -> LegacyRegistryPostProcessorBuilder:
        return self._parent.add_filter(factory_filter(self._factory, access_check, "prototype"))
