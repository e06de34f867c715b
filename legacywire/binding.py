from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from legacywire.container import LegacyContainer
    from legacywire.members import Member
    from legacywire.types import Scope


@dataclass(frozen=True)
class FieldSingleton:
    """Provide the value of a static field. Always a singleton."""

    member: Member
    scope: Scope = "singleton"

    def create(self, _container: LegacyContainer) -> Any:
        return getattr(self.member.declaring_type, self.member.name)

    def __str__(self) -> str:
        return f"value of {self.member}"


@dataclass(frozen=True)
class MethodFactory:
    """Provide the result of calling a static method of the provided class itself."""

    member: Member
    scope: Scope

    def create(self, _container: LegacyContainer) -> Any:
        return getattr(self.member.declaring_type, self.member.name)()

    def __str__(self) -> str:
        return f"{self.scope} from {self.member}"


@dataclass(frozen=True)
class ExternalFactoryMethod:
    """Provide the result of calling a method of a separate factory class.

    Static methods are called on the factory class. Instance methods are called on the factory instance the
    container provides for the factory type.
    """

    factory: type
    member: Member
    scope: Scope

    def create(self, container: LegacyContainer) -> Any:
        target = self.factory if self.member.is_static else container.get(self.factory)

        return getattr(target, self.member.name)()

    def __str__(self) -> str:
        return f"{self.scope} from {self.member}"
