from legacywire.binding import ExternalFactoryMethod, FieldSingleton, MethodFactory
from legacywire.builder import LegacyRegistryPostProcessorBuilder, legacy_packages
from legacywire.configuration import ConfigStore, processor_from_config
from legacywire.container import DefinitionRegistry, LegacyContainer, create_container
from legacywire.filters import AccessFilter, factory_filter, field_filter, method_filter
from legacywire.members import Member
from legacywire.predicates import (
    and_constant,
    any_getter,
    anything,
    declared_on_examined_type,
    every,
    is_constant_like,
    is_getter_like,
    named,
    named_matching,
    static,
    takes_no_arguments,
    visible,
)
from legacywire.processor import LegacyRegistryPostProcessor
from legacywire.registry import Classification, ClassificationRegistry
from legacywire.types import Registration

__all__ = [
    "AccessFilter",
    "Classification",
    "ClassificationRegistry",
    "ConfigStore",
    "DefinitionRegistry",
    "ExternalFactoryMethod",
    "FieldSingleton",
    "LegacyContainer",
    "LegacyRegistryPostProcessor",
    "LegacyRegistryPostProcessorBuilder",
    "Member",
    "MethodFactory",
    "Registration",
    "and_constant",
    "any_getter",
    "anything",
    "create_container",
    "declared_on_examined_type",
    "every",
    "factory_filter",
    "field_filter",
    "is_constant_like",
    "is_getter_like",
    "legacy_packages",
    "method_filter",
    "named",
    "named_matching",
    "processor_from_config",
    "static",
    "takes_no_arguments",
    "visible",
]
