from __future__ import annotations

import importlib
import inspect
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from legacywire.constants import LOGGER
from legacywire.types import NameGenerator, Registration
from legacywire.util import qualified_name

if TYPE_CHECKING:
    from legacywire.container import DefinitionRegistry

PackageRef = Union[str, ModuleType]

GENERATED_NAME_SEPARATOR = "#"


def generate_name(registration: Registration, definitions: DefinitionRegistry) -> str:
    """Name a registration after its class, with the first free counter suffix: `pkg.mod.Cls#0`, `pkg.mod.Cls#1`."""
    counter = 0
    while definitions.contains(f"{registration.class_name}{GENERATED_NAME_SEPARATOR}{counter}"):
        counter += 1

    return f"{registration.class_name}{GENERATED_NAME_SEPARATOR}{counter}"


def _is_candidate(klass: type[Any]) -> bool:
    # Protocols are interfaces and never registered.
    return not getattr(klass, "_is_protocol", False)


def find_candidates(package: PackageRef) -> list[type[Any]]:
    """Recursively find the candidate classes defined in package and its sub-modules.

    Classes are returned in module traversal order, then by name. Modules which fail to import are skipped.
    """
    classes: list[type[Any]] = []

    def _module_get_classes(m: ModuleType) -> list[type[Any]]:
        return [
            obj
            for _, obj in inspect.getmembers(m, inspect.isclass)
            if obj.__module__ == m.__name__ and _is_candidate(obj)
        ]

    def _import(module_name: str) -> ModuleType | None:
        try:
            return importlib.import_module(module_name)
        except Exception as e:  # noqa: BLE001
            LOGGER.warning("Skipping module %s as it cannot be imported: %s", module_name, e)
            return None

    def _find_in_path(path: Path, parent_module_name: str) -> None:
        for file in sorted(path.iterdir()):
            if file.name == "__pycache__":
                continue

            if file.is_dir():
                if file.name.isidentifier():
                    _find_in_path(file, f"{parent_module_name}.{file.name}")
            elif file.suffix == ".py":
                full_module_name = (
                    parent_module_name if file.name == "__init__.py" else f"{parent_module_name}.{file.stem}"
                )
                if (sub_module := _import(full_module_name)) is not None:
                    classes.extend(_module_get_classes(sub_module))

    module = _import(package) if isinstance(package, str) else package

    if module is None:
        return classes

    if (f := getattr(module, "__file__", None)) and f.endswith("__init__.py"):
        _find_in_path(Path(f).parent, module.__name__)
    elif f:
        classes.extend(_module_get_classes(module))
    else:
        # Namespace package
        for path in getattr(module, "__path__", []):
            _find_in_path(Path(path), module.__name__)

    return classes


class PackageScanner:
    """Create registrations for the classes found in packages.

    Each candidate class accepted by `include` gets a default registration (singleton, not lazy), which is then
    passed to `customize`, named by `name_generator` and added to the definition registry.
    """

    __slots__ = ("_customize", "_definitions", "_include", "_name_generator")

    def __init__(
        self,
        definitions: DefinitionRegistry,
        *,
        include: Callable[[str], bool],
        customize: Callable[[Registration], None],
        name_generator: NameGenerator = generate_name,
    ) -> None:
        self._definitions = definitions
        self._include = include
        self._customize = customize
        self._name_generator = name_generator

    def scan(self, packages: Iterable[PackageRef]) -> int:
        """Scan packages and return the number of registrations added."""
        registered = 0

        for package in packages:
            for klass in find_candidates(package):
                class_name = qualified_name(klass)

                if not self._include(class_name):
                    continue

                if self._definitions.contains_class(klass):
                    LOGGER.debug("Skipping %s as it is already registered", class_name)
                    continue

                registration = Registration(class_name=class_name, klass=klass)
                self._customize(registration)
                self._definitions.register(self._name_generator(registration, self._definitions), registration)
                registered += 1

        return registered
