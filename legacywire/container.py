from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Dict, Iterator, Protocol, TypeVar, Union

from legacywire.constants import LOGGER
from legacywire.errors import (
    AmbiguousInjectableRequestedError,
    DuplicateRegistrationError,
    InjectableCreationError,
    UnknownInjectableRequestedError,
)

if TYPE_CHECKING:
    from legacywire.types import Registration

T = TypeVar("T")


class RegistryPostProcessor(Protocol):
    """Anything adding registrations to a definition registry before the container is created."""

    order: int

    def post_process(self, definitions: DefinitionRegistry) -> Any: ...


class DefinitionRegistry:
    """Registrations by name, in registration order."""

    __slots__ = ("_definitions",)

    def __init__(self) -> None:
        self._definitions: dict[str, Registration] = {}

    def register(self, name: str, registration: Registration) -> None:
        if name in self._definitions:
            raise DuplicateRegistrationError(name)

        registration.name = name
        self._definitions[name] = registration

    def contains(self, name: str) -> bool:
        return name in self._definitions

    def get_definition(self, name: str) -> Registration:
        if name not in self._definitions:
            raise UnknownInjectableRequestedError(name)

        return self._definitions[name]

    @property
    def names(self) -> list[str]:
        return list(self._definitions)

    def names_for_type(self, klass: type[Any]) -> list[str]:
        return [name for name, reg in self._definitions.items() if reg.resolve_class() is klass]

    def contains_class(self, klass: type[Any]) -> bool:
        return any(reg.resolve_class() is klass for reg in self._definitions.values())

    def __iter__(self) -> Iterator[Registration]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


class LockRegistry(Dict[str, "threading.RLock"]):
    __slots__ = ("_lock",)

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()

    def __missing__(self, key: str) -> threading.RLock:
        with self._lock:
            if key not in self:
                self[key] = threading.RLock()
            return self[key]


class LegacyContainer:
    """Provide instances for finalized registrations.

    Singletons are created on first request and cached; concurrent first requests create a single instance.
    Prototypes are created on every request.
    """

    __slots__ = ("_definitions", "_locks", "_singletons")

    def __init__(self, definitions: DefinitionRegistry) -> None:
        self._definitions = definitions
        self._singletons: dict[str, Any] = {}
        self._locks = LockRegistry()

    @property
    def definitions(self) -> DefinitionRegistry:
        return self._definitions

    def get(self, key: Union[type[T], str]) -> T:
        """Get an instance of the requested class or registration name.

        :raises UnknownInjectableRequestedError: If nothing is registered for key.
        :raises AmbiguousInjectableRequestedError: If key is a class registered under more than one name.
        :raises InjectableCreationError: If the binding fails to provide the instance.
        """
        name = self._name_for(key)
        registration = self._definitions.get_definition(name)

        if registration.scope == "prototype":
            return self._create(name, registration)  # type: ignore[no-any-return]

        if name in self._singletons:
            return self._singletons[name]  # type: ignore[no-any-return]

        with self._locks[name]:
            if name not in self._singletons:
                self._singletons[name] = self._create(name, registration)

            return self._singletons[name]  # type: ignore[no-any-return]

    def warmup(self) -> list[InjectableCreationError]:
        """Create all singletons which are not lazy.

        A failing registration does not stop the others from being created, its error is returned instead.
        """
        errors: list[InjectableCreationError] = []

        for registration in self._definitions:
            if registration.lazy or registration.scope != "singleton" or registration.name is None:
                continue

            try:
                self.get(registration.name)
            except InjectableCreationError as e:
                LOGGER.error("%s", e)
                errors.append(e)

        return errors

    def _name_for(self, key: type[Any] | str) -> str:
        if isinstance(key, str):
            if not self._definitions.contains(key):
                raise UnknownInjectableRequestedError(key)
            return key

        names = self._definitions.names_for_type(key)

        if not names:
            raise UnknownInjectableRequestedError(key)

        if len(names) > 1:
            raise AmbiguousInjectableRequestedError(key, names)

        return names[0]

    def _create(self, name: str, registration: Registration) -> Any:
        klass = registration.resolve_class()

        if klass is None:
            raise InjectableCreationError(
                name, registration.class_name, None, ImportError(f"{registration.class_name} cannot be loaded")
            )

        strategy = registration.strategy

        try:
            return klass() if strategy is None else strategy.create(self)
        except Exception as e:
            raise InjectableCreationError(name, klass, strategy.member if strategy else None, e) from e


def create_container(
    *post_processors: RegistryPostProcessor, definitions: DefinitionRegistry | None = None
) -> LegacyContainer:
    """Run post_processors, lowest order first, and create a container over the resulting registrations.

    :param definitions: Registrations to start from. A new, empty registry is used when not given.
    """
    definitions = definitions if definitions is not None else DefinitionRegistry()

    for processor in sorted(post_processors, key=lambda p: p.order):
        processor.post_process(definitions)

    return LegacyContainer(definitions)
