import pytest
from legacywire.binding import ExternalFactoryMethod, FieldSingleton, MethodFactory
from legacywire.errors import ConfigurationError
from legacywire.filters import AccessFilter, factory_filter, field_filter, method_filter
from legacywire.members import Member
from legacywire.predicates import named, named_matching
from legacywire.types import Registration

from test.unit.services.legacy.bad_annotations import BadAnnotation
from test.unit.services.legacy.factory import Gadget, GadgetLocator, LegacyFactory, Widget
from test.unit.services.legacy.failing import Exploding
from test.unit.services.legacy.plain import NonSingletonBean
from test.unit.services.legacy.prototypes import Configured
from test.unit.services.legacy.singletons import (
    FieldAndMethod,
    LegacyRegistry,
    LegacySingletonByField,
    LegacySingletonByMethod,
    LegacySubRegistry,
    PrivateSingleton,
    TwoInstances,
)

FACTORY_MODULE = "test.unit.services.legacy.factory"


def _recording(seen: list[str]):
    def _record(member: Member) -> bool:
        seen.append(member.name)
        return True

    return _record


def test_field_filter_matches_static_field_holding_instance() -> None:
    member = field_filter(named("INSTANCE")).matches(LegacySingletonByField)

    assert member is not None
    assert member.name == "INSTANCE"
    assert member.declaring_type is LegacySingletonByField


def test_field_filter_accepts_subtype_values() -> None:
    member = field_filter().matches(LegacyRegistry)

    assert member is not None
    assert member.value_type is LegacySubRegistry


def test_field_filter_rejects_inherited_fields() -> None:
    assert field_filter().matches(LegacySubRegistry) is None


def test_field_filter_rejects_private_fields() -> None:
    assert field_filter().matches(PrivateSingleton) is None


def test_field_filter_uses_first_field_in_declaration_order() -> None:
    member = field_filter().matches(TwoInstances)

    assert member is not None
    assert member.name == "PRIMARY"


def test_field_filter_ignores_fields_of_other_types() -> None:
    assert field_filter().matches(LegacySingletonByMethod) is None


def test_access_check_only_sees_visible_declared_members() -> None:
    seen: list[str] = []

    assert field_filter(_recording(seen)).matches(PrivateSingleton) is None
    assert field_filter(_recording(seen)).matches(LegacySubRegistry) is None
    assert seen == []


def test_method_filter_matches_static_method_returning_instance() -> None:
    member = method_filter(named("getInstance")).matches(LegacySingletonByMethod)

    assert member is not None
    assert member.name == "getInstance"
    assert member.is_static


def test_method_filter_rejects_instance_methods() -> None:
    assert method_filter().matches(NonSingletonBean) is None


def test_method_filter_does_not_call_the_method() -> None:
    member = method_filter().matches(Exploding)

    assert member is not None
    assert member.name == "getInstance"


def test_method_filter_ignores_unresolvable_return_types() -> None:
    assert method_filter().matches(BadAnnotation) is None
    assert field_filter().matches(BadAnnotation) is None


def test_method_filter_skips_methods_with_required_parameters() -> None:
    member = method_filter(named_matching("create.*"), "prototype").matches(Configured)

    assert member is not None
    assert member.name == "create_default"
    assert member.parameter_count == 0


def test_field_and_method_filters_pick_their_own_member() -> None:
    field = field_filter().matches(FieldAndMethod)
    method = method_filter().matches(FieldAndMethod)

    assert field is not None
    assert field.name == "INSTANCE"
    assert method is not None
    assert method.name == "get_instance"


def test_factory_filter_matches_factory_methods_returning_examined_class() -> None:
    member = factory_filter(LegacyFactory).matches(Widget)

    assert member is not None
    assert member.name == "getWidget"
    assert member.declaring_type is LegacyFactory


def test_factory_filter_applies_access_check_to_factory_methods() -> None:
    member = factory_filter(LegacyFactory, named_matching("create.*")).matches(Widget)

    assert member is not None
    assert member.name == "createWidget"


def test_factory_filter_skips_methods_with_required_parameters() -> None:
    member = factory_filter(Configured).matches(Configured)

    assert member is not None
    assert member.name == "create_default"


def test_factory_filter_ignores_static_members_of_examined_class() -> None:
    own_field = field_filter().matches(Widget)
    member = factory_filter(LegacyFactory).matches(Widget)

    assert own_field is not None
    assert own_field.name == "DEFAULT"
    assert member is not None
    assert member.name == "getWidget"
    assert member.declaring_type is LegacyFactory


def test_factory_filter_does_not_match_other_classes() -> None:
    assert factory_filter(LegacyFactory).matches(Gadget) is None
    assert factory_filter(LegacyFactory).matches(LegacyFactory) is None


def test_factory_filter_accepts_instance_methods() -> None:
    member = factory_filter(GadgetLocator).matches(Gadget)

    assert member is not None
    assert member.name == "get_gadget"
    assert not member.is_static


def test_factory_filter_resolves_dotted_names() -> None:
    assert factory_filter(f"{FACTORY_MODULE}.LegacyFactory").factory is LegacyFactory


@pytest.mark.parametrize("factory", [f"{FACTORY_MODULE}.Missing", "legacywire_missing.Factory", "Missing"])
def test_factory_filter_rejects_unresolvable_factory(factory: str) -> None:
    with pytest.raises(ConfigurationError, match="cannot be resolved to a class"):
        factory_filter(factory)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "constructor"},
        {"kind": "method", "scope": "request"},
        {"kind": "field", "scope": "prototype"},
        {"kind": "factory"},
        {"kind": "method", "factory": LegacyFactory},
    ],
)
def test_invalid_access_filters_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ConfigurationError):
        AccessFilter(**kwargs)


def test_apply_field_filter() -> None:
    access_filter = field_filter()
    member = access_filter.matches(LegacySingletonByField)
    registration = Registration(f"{LegacySingletonByField.__module__}.LegacySingletonByField")

    assert member is not None
    access_filter.apply(member, registration)

    assert registration.scope == "singleton"
    assert registration.lazy
    assert registration.strategy == FieldSingleton(member)


def test_apply_prototype_method_filter() -> None:
    access_filter = method_filter(scope="prototype")
    member = access_filter.matches(LegacySingletonByMethod)
    registration = Registration("unused", klass=LegacySingletonByMethod)

    assert member is not None
    access_filter.apply(member, registration)

    assert registration.scope == "prototype"
    assert registration.lazy
    assert registration.strategy == MethodFactory(member, "prototype")


def test_apply_factory_filter() -> None:
    access_filter = factory_filter(LegacyFactory)
    member = access_filter.matches(Widget)
    registration = Registration(f"{FACTORY_MODULE}.Widget")

    assert member is not None
    access_filter.apply(member, registration)

    assert registration.scope == "singleton"
    assert registration.lazy
    assert registration.strategy == ExternalFactoryMethod(LegacyFactory, member, "singleton")


def test_match_by_class_name() -> None:
    access_filter = field_filter(named("INSTANCE"))

    assert access_filter.match(f"{FACTORY_MODULE}.GadgetLocator")
    assert not access_filter.match(f"{FACTORY_MODULE}.Gadget")
    assert not access_filter.match(f"{FACTORY_MODULE}.Missing")


def test_supports_and_customize() -> None:
    access_filter = field_filter()
    supported = Registration(f"{FACTORY_MODULE}.GadgetLocator")
    unsupported = Registration(f"{FACTORY_MODULE}.Gadget")
    unresolvable = Registration(f"{FACTORY_MODULE}.Missing")

    assert access_filter.supports(supported)
    assert not access_filter.supports(unsupported)
    assert not access_filter.supports(unresolvable)

    access_filter.customize(supported)
    access_filter.customize(unsupported)
    access_filter.customize(unresolvable)

    assert isinstance(supported.strategy, FieldSingleton)
    assert supported.lazy
    assert unsupported.strategy is None
    assert not unsupported.lazy
    assert unresolvable.strategy is None


def test_str() -> None:
    assert str(field_filter()) == "singleton field filter"
    assert str(method_filter(scope="prototype")) == "prototype method filter"
    assert str(factory_filter(LegacyFactory)) == f"singleton factory filter of {FACTORY_MODULE}.LegacyFactory"
