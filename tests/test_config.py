import pytest

from deploy_iam.config import (
    DEFAULT_SERVICE_NAME,
    Config,
    ConfigurationError,
    strip_stack_suffix,
)


def test_defaults_from_empty_environment():
    config = Config.from_environment({})

    assert config.event_source is None
    assert config.service_name == DEFAULT_SERVICE_NAME
    assert config.export_prefix == DEFAULT_SERVICE_NAME
    assert config.enable_vpc_permissions is False
    assert config.parameter_hash == ""
    assert config.stack_name is None
    assert config.custom_policy_paths == []


def test_values_from_environment():
    config = Config.from_environment({
        "EVENT_SOURCE": "com.example.orders",
        "SERVICE_NAME": "orders",
        "EXPORT_PREFIX": "shared-",
        "ENABLE_VPC_PERMISSIONS": "1",
        "PARAMETER_HASH": "abc123",
        "STACK_NAME": "orders-stack",
        "CUSTOM_POLICY": "a.json, b.json,,",
    })

    assert config.event_source == "com.example.orders"
    assert config.hyphenated_event_source == "com-example-orders"
    assert config.service_name == "orders"
    assert config.export_prefix == "shared-"
    assert config.enable_vpc_permissions is True
    assert config.parameter_hash == "abc123"
    assert config.stack_name == "orders-stack"
    assert config.custom_policy_paths == ["a.json", "b.json"]


@pytest.mark.parametrize("value", ["0", "true", "yes", ""])
def test_vpc_permissions_only_enabled_by_one(value):
    assert Config.from_environment({"ENABLE_VPC_PERMISSIONS": value}).enable_vpc_permissions is False


def test_export_prefix_defaults_to_service_name():
    assert Config(service_name="orders").export_prefix == "orders"


@pytest.mark.parametrize("prefix", ["orders", "orders-"])
def test_export_prefix_gets_trailing_hyphen(prefix):
    assert Config(export_prefix=prefix).normalized_export_prefix == "orders-"


def test_missing_event_source():
    with pytest.raises(ConfigurationError, match="EVENT_SOURCE"):
        Config().require_event_source()


def test_missing_stack_name():
    with pytest.raises(ConfigurationError, match="STACK_NAME"):
        Config().require_stack_name()


def test_strip_stack_suffix():
    assert strip_stack_suffix("orders-deploy-iam") == "orders"
    assert strip_stack_suffix("orders") == "orders"
    assert strip_stack_suffix("a-deploy-iam-deploy-iam") == "a-deploy-iam"
