import pytest
from legacywire.configuration import ConfigStore, TemplatedString, processor_from_config
from legacywire.container import DefinitionRegistry, create_container
from legacywire.errors import ConfigurationError, UnknownConfigKeyError

from test.unit.services.legacy.factory import LegacyFactory, Widget
from test.unit.services.legacy.prototypes import LegacyPrototype
from test.unit.services.legacy.singletons import FieldAndMethod, TwoInstances

PACKAGE = "test.unit.services.legacy"


def short_name(registration, _definitions) -> str:
    return registration.class_name.rsplit(".", 1)[-1]


def test_config_store_initialization_with_values():
    store = ConfigStore({"param1": "value1", "param2": "value2"})
    assert store.get("param1") == "value1"
    assert store.get("param2") == "value2"


def test_get_non_existing_key():
    store = ConfigStore()
    with pytest.raises(UnknownConfigKeyError):
        store.get("non_existing_param")


def test_get_nested_key():
    store = ConfigStore({"legacy": {"scan": {"packages": ["a"]}}})
    assert store.get("legacy.scan.packages") == ["a"]


def test_get_nested_missing_key_reports_parent():
    store = ConfigStore({"legacy": {"scan": {}}})
    with pytest.raises(UnknownConfigKeyError) as e:
        store.get("legacy.scan.packages")

    assert e.value.key == "packages"
    assert e.value.parent_path == "legacy.scan"


def test_dotted_key_takes_precedence():
    store = ConfigStore({"legacy.order": 1, "legacy": {"order": 2}})
    assert store.get("legacy.order") == 1


@pytest.mark.parametrize("key", ["legacy.", ".legacy", "legacy..order"])
def test_invalid_key_format(key: str):
    store = ConfigStore({"legacy": {"order": 2}})
    with pytest.raises(ConfigurationError, match="invalid"):
        store.get(key)


def test_nested_lookup_only_walks_mappings():
    store = ConfigStore({"legacy": {"order": 2}})
    with pytest.raises(UnknownConfigKeyError) as e:
        store.get("legacy.order.real")

    assert e.value.key == "real"
    assert e.value.parent_path == "legacy.order"


def test_get_or():
    store = ConfigStore({"legacy": {"order": 2}})
    assert store.get_or("legacy.order", 0) == 2
    assert store.get_or("legacy.naming", None) is None


def test_get_templated_string():
    store = ConfigStore({"param1": "value1", "nested": {"param2": "value2"}})
    assert store.get(TemplatedString("${param1} and ${nested.param2}")) == "value1 and value2"


def test_get_templated_string_with_non_existing_key():
    store = ConfigStore({"param1": "value1"})
    with pytest.raises(UnknownConfigKeyError):
        store.get(TemplatedString("${param1} and ${param2}"))


def test_cache_interpolated_values():
    store = ConfigStore({"param1": "value1"})
    templated_string = TemplatedString("${param1}")
    assert store.get(templated_string) == "value1"
    assert store._ConfigStore__cache[templated_string.value] == "value1"  # type: ignore[attr-defined]


def test_processor_from_config_defaults():
    processor = processor_from_config({"packages": PACKAGE})

    assert processor.base_packages == (PACKAGE,)
    assert [f.kind for f in processor.classifier.filters] == ["method", "field"]


def test_processor_from_config_with_prefix_and_rules():
    config = {
        "base": PACKAGE,
        "legacy": {
            "packages": ["${base}.singletons", "${base}.prototypes", "${base}.factory"],
            "order": "3",
            "naming": "test.unit.test_configuration.short_name",
            "rules": [
                {"kind": "field", "names": "INSTANCE, PRIMARY"},
                {"kind": "method", "scope": "prototype", "pattern": "create.*"},
                {"kind": "factory", "factory": "${base}.factory.LegacyFactory", "convention": "getter"},
            ],
        },
    }

    processor = processor_from_config(config, prefix="legacy")

    assert processor.order == 3
    assert [(f.kind, f.scope, f.factory) for f in processor.classifier.filters] == [
        ("field", "singleton", None),
        ("method", "prototype", None),
        ("factory", "singleton", LegacyFactory),
    ]

    container = create_container(processor)

    assert container.get("TwoInstances") is TwoInstances.PRIMARY
    assert container.get("FieldAndMethod") is FieldAndMethod.INSTANCE
    assert container.get(Widget).origin == "shared"
    assert container.get(LegacyPrototype) is not container.get(LegacyPrototype)


def test_processor_from_config_store():
    store = ConfigStore({"packages": [f"{PACKAGE}.nested"], "rules": [{"kind": "field", "convention": "constant"}]})
    definitions = DefinitionRegistry()

    assert processor_from_config(store).post_process(definitions) == 1
    assert definitions.names == [f"{PACKAGE}.nested.deep.DeepSingleton#0"]


@pytest.mark.parametrize(
    ("config", "message"),
    [
        ({}, "packages"),
        ({"packages": []}, "at least one package"),
        ({"packages": " , "}, "at least one package"),
        ({"packages": PACKAGE, "order": "first"}, "must be an integer"),
        ({"packages": PACKAGE, "naming": "legacywire_missing.generate"}, "Cannot import"),
        ({"packages": PACKAGE, "rules": ["field"]}, "must be a mapping"),
        ({"packages": PACKAGE, "rules": [{"scope": "singleton"}]}, "kind"),
        ({"packages": PACKAGE, "rules": [{"kind": "field", "lazy": True}]}, "unknown keys: lazy"),
        ({"packages": PACKAGE, "rules": [{"kind": "field", "convention": "setter"}]}, "unknown convention"),
        ({"packages": PACKAGE, "rules": [{"kind": "field", "scope": "prototype"}]}, "only provide singletons"),
        ({"packages": PACKAGE, "rules": [{"kind": "factory"}]}, "factory class must be given"),
        ({"packages": PACKAGE, "rules": [{"kind": "factory", "factory": "legacywire_missing.F"}]}, "resolved"),
    ],
)
def test_processor_from_config_errors(config: dict, message: str):
    with pytest.raises(ConfigurationError, match=message):
        processor_from_config(config)
