from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from legacywire.constants import LOGGER, LOWEST_PRECEDENCE
from legacywire.errors import ConfigurationError
from legacywire.registry import ClassificationRegistry
from legacywire.scanner import PackageRef, PackageScanner, generate_name

if TYPE_CHECKING:
    from legacywire.container import DefinitionRegistry
    from legacywire.filters import AccessFilter
    from legacywire.types import NameGenerator


class LegacyRegistryPostProcessor:
    """Register the legacy classes of a set of packages with a definition registry.

    Only classes matched by one of the access filters are registered, bound as decided by the first matching
    filter. Build instances with `legacywire.legacy_packages`.

    :raises ConfigurationError: If no base packages are given.
    """

    __slots__ = ("_name_generator", "base_packages", "classifier", "order")

    def __init__(
        self,
        filters: Iterable[AccessFilter],
        *base_packages: PackageRef,
        name_generator: NameGenerator = generate_name,
        order: int = LOWEST_PRECEDENCE,
    ) -> None:
        if not base_packages:
            msg = "At least one base package must be given to scan for legacy classes."
            raise ConfigurationError(msg)

        self.classifier = ClassificationRegistry(filters)
        self._name_generator = name_generator
        self.order = order
        self.base_packages = base_packages

    def post_process(self, definitions: DefinitionRegistry) -> int:
        """Scan the base packages and return the number of registrations added to definitions."""
        scanner = PackageScanner(
            definitions,
            include=self.classifier.includes,
            customize=self.classifier.customize,
            name_generator=self._name_generator,
        )
        registered = scanner.scan(self.base_packages)
        LOGGER.info(
            "Registered %d legacy injectable(s) from %s",
            registered,
            ", ".join(p if isinstance(p, str) else p.__name__ for p in self.base_packages),
        )

        return registered
