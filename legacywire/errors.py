from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from legacywire.members import Member


class LegacyWireError(Exception):
    """Base type for all exceptions raised by legacywire."""


class ConfigurationError(LegacyWireError):
    """Raised when a post processor is configured in a way that cannot work, before any scanning starts."""


class UnknownConfigKeyError(ConfigurationError):
    """Raised when requesting a configuration key which does not exist."""

    def __init__(self, key: str, parent_path: str | None = None) -> None:
        self.key = key
        self.parent_path = parent_path

        location = f" under '{parent_path}'" if parent_path else ""
        super().__init__(f"Unknown configuration key requested: '{key}'{location}")


class DuplicateRegistrationError(LegacyWireError):
    """Raised when attempting to register a definition under a name that is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register '{name}' as a registration with that name already exists.")


class UnknownInjectableRequestedError(LegacyWireError):
    """Raised when requesting a name or type the container has no registration for."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Cannot provide unknown injectable {key}. Make sure its package is scanned.")


class AmbiguousInjectableRequestedError(LegacyWireError):
    """Raised when requesting a type which has more than one registration."""

    def __init__(self, klass: type[Any], names: list[str]) -> None:
        self.klass = klass
        self.names = names
        super().__init__(
            f"Cannot provide {klass.__module__}.{klass.__qualname__} as it is registered more than once: "
            f"{', '.join(names)}. Request it by name instead."
        )


class InjectableCreationError(LegacyWireError):
    """Raised when the container fails to create an injectable through its binding.

    The error identifies the registration, the class being provided and the member that was used.
    """

    def __init__(self, name: str, klass: type[Any] | str, member: Member | None, cause: Exception) -> None:
        self.name = name
        self.klass = klass
        self.member = member
        self.cause = cause

        klass_name = klass if isinstance(klass, str) else f"{klass.__module__}.{klass.__qualname__}"
        via = f" using {member}" if member is not None else ""
        super().__init__(
            f"Cannot create '{name}' of type {klass_name}{via}; cause: {cause.__class__.__name__}: {cause}"
        )
