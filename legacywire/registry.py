from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, NamedTuple

from legacywire.constants import LOGGER
from legacywire.members import Member, resolve_type

if TYPE_CHECKING:
    from legacywire.filters import AccessFilter
    from legacywire.types import Registration


class Classification(NamedTuple):
    access_filter: AccessFilter
    member: Member


class ClassificationRegistry:
    """Ordered access filters deciding how, if at all, a class is bound.

    Filters are consulted in the order they were given and the first one matching a class wins, so a class is
    never claimed by two filters. The filters are fixed at creation which makes classification deterministic
    and safe to run concurrently for different classes.
    """

    __slots__ = ("_filters",)

    def __init__(self, filters: Iterable[AccessFilter]) -> None:
        self._filters: tuple[AccessFilter, ...] = tuple(filters)

    @property
    def filters(self) -> tuple[AccessFilter, ...]:
        return self._filters

    def classify(self, klass: type[Any] | str) -> Classification | None:
        """Return the first filter matching klass together with the member it matched.

        :param klass: The class or its dotted name. Names which cannot be resolved are never classified.
        """
        resolved = resolve_type(klass) if isinstance(klass, str) else klass

        if resolved is None:
            return None

        for access_filter in self._filters:
            if (member := access_filter.matches(resolved)) is not None:
                LOGGER.debug("Classified %s using %s: %s", resolved.__qualname__, access_filter, member)
                return Classification(access_filter, member)

        return None

    def includes(self, class_name: str) -> bool:
        """Inclusion predicate for the scanner: whether class_name should be registered at all."""
        return self.classify(class_name) is not None

    def customize(self, registration: Registration) -> None:
        """Apply the winning filter to registration. Registrations of unclassified classes are left untouched."""
        klass = registration.resolve_class()

        if klass is not None and (classification := self.classify(klass)) is not None:
            classification.access_filter.apply(classification.member, registration)
