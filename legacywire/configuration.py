from __future__ import annotations

import importlib
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Union

from legacywire.builder import LegacyRegistryPostProcessorBuilder
from legacywire.constants import LOWEST_PRECEDENCE
from legacywire.errors import ConfigurationError, UnknownConfigKeyError
from legacywire.filters import AccessFilter, resolve_factory
from legacywire.predicates import (
    MemberPredicate,
    anything,
    every,
    is_constant_like,
    is_getter_like,
    named,
    named_matching,
)

if TYPE_CHECKING:
    from legacywire.processor import LegacyRegistryPostProcessor


@dataclass(frozen=True)
class TemplatedString:
    """Wrapper for strings which contain values that must be interpolated by the configuration store.

    Use the special ${config_key} syntax to reference a configuration value in a string.
    """

    __slots__ = ("value",)

    value: str


ConfigurationReference = Union[str, TemplatedString]

CONVENTIONS: dict[str, MemberPredicate] = {"getter": is_getter_like, "constant": is_constant_like}
RULE_KEYS = frozenset({"kind", "scope", "names", "pattern", "convention", "factory"})


class ConfigStore:
    """Read-only configuration values.

    Nested mappings are reached with `dot` separated keys. A key which itself contains dots takes precedence over
    the nested path it looks like.
    """

    __slots__ = ("__bag", "__cache")

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.__bag: dict[str, Any] = {} if values is None else values
        self.__cache: dict[str, str] = {}

    def get(self, value: ConfigurationReference) -> Any:
        """Get the value of a configuration key, or interpolate a templated string."""
        if isinstance(value, TemplatedString):
            return self.__interpolate(value.value)

        return self.__lookup(value)

    def get_or(self, name: str, default: Any) -> Any:
        try:
            return self.__lookup(name)
        except UnknownConfigKeyError:
            return default

    def __lookup(self, name: str) -> Any:
        if name in self.__bag:
            return self.__bag[name]

        parts = name.split(".")
        if "" in parts:
            msg = f"Configuration key '{name}' is invalid: every part of a `dot` separated key must be non-empty."
            raise ConfigurationError(msg)

        value: Any = self.__bag
        for index, part in enumerate(parts):
            if not isinstance(value, Mapping) or part not in value:
                raise UnknownConfigKeyError(part, parent_path=".".join(parts[:index]))
            value = value[part]

        return value

    def __interpolate(self, template: str) -> str:
        if template not in self.__cache:
            self.__cache[template] = re.sub(
                r"\${(.*?)}", lambda match: str(self.__lookup(match.group(1))), template, flags=re.DOTALL
            )

        return self.__cache[template]


def processor_from_config(
    values: Mapping[str, Any] | ConfigStore, prefix: str | None = None
) -> LegacyRegistryPostProcessor:
    """Build a post processor from configuration.

    Recognized keys, relative to prefix: `packages` (a list or comma separated string), `order`, `naming` (dotted
    path of a name generator) and `rules`. Each rule is a mapping with a `kind` (field, method or factory), an
    optional `scope`, optional `names`, `pattern` and `convention` (getter or constant) restricting member names,
    and for factory rules the dotted name of the `factory` class. String values may reference other keys
    using ${key}.

    :raises ConfigurationError: If a key is missing or a value is invalid.
    """
    store = values if isinstance(values, ConfigStore) else ConfigStore(dict(values))

    def key(name: str) -> str:
        return f"{prefix}.{name}" if prefix else name

    packages = _string_list(store, store.get(key("packages")))
    if not packages:
        msg = f"Configuration key '{key('packages')}' must name at least one package."
        raise ConfigurationError(msg)

    builder = LegacyRegistryPostProcessorBuilder(*packages)

    order = store.get_or(key("order"), LOWEST_PRECEDENCE)
    try:
        builder.ordered(int(order))
    except (TypeError, ValueError) as e:
        msg = f"Configuration key '{key('order')}' must be an integer, got {order!r}."
        raise ConfigurationError(msg) from e

    if (naming := store.get_or(key("naming"), None)) is not None:
        builder.bean_naming(_import_object(_interpolate(store, naming)))

    for index, rule in enumerate(store.get_or(key("rules"), [])):
        builder.add_filter(_rule_filter(store, rule, f"{key('rules')}[{index}]"))

    return builder.build()


def _rule_filter(store: ConfigStore, rule: Any, path: str) -> AccessFilter:
    if not isinstance(rule, Mapping):
        msg = f"Rule '{path}' must be a mapping, got {rule!r}."
        raise ConfigurationError(msg)

    if unknown := set(rule) - RULE_KEYS:
        msg = f"Rule '{path}' has unknown keys: {', '.join(sorted(unknown))}."
        raise ConfigurationError(msg)

    if "kind" not in rule:
        raise UnknownConfigKeyError("kind", parent_path=path)

    checks: list[MemberPredicate] = []

    if "names" in rule:
        checks.append(named(*_string_list(store, rule["names"])))

    if "pattern" in rule:
        checks.append(named_matching(_interpolate(store, rule["pattern"])))

    if "convention" in rule:
        if rule["convention"] not in CONVENTIONS:
            msg = f"Rule '{path}' has unknown convention '{rule['convention']}'. Use one of: getter, constant."
            raise ConfigurationError(msg)
        checks.append(CONVENTIONS[rule["convention"]])

    factory = resolve_factory(_interpolate(store, rule["factory"])) if "factory" in rule else None

    return AccessFilter(
        rule["kind"],
        every(*checks) if checks else anything,
        rule.get("scope", "singleton"),
        factory=factory,
    )


def _interpolate(store: ConfigStore, value: Any) -> Any:
    return store.get(TemplatedString(value)) if isinstance(value, str) else value


def _string_list(store: ConfigStore, value: Any) -> list[str]:
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",") if part.strip()]

    return [_interpolate(store, item) for item in value]


def _import_object(path: str) -> Any:
    module_name, _, attr = path.rpartition(".")

    try:
        return getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError, ValueError) as e:
        msg = f"Cannot import '{path}'."
        raise ConfigurationError(msg) from e
