"""Unit tests for the driver registry."""

import pytest

from hostdriver.config import RackspaceConfig
from hostdriver.drivers.rackspace import RackspaceDriver
from hostdriver.errors import ConfigurationError
from hostdriver.registry import DriverRegistry, RegisteredDriver, build_registry


def test_build_registry_has_rackspace():
    registry = build_registry()
    assert registry.names() == ["rackspace"]
    assert "rackspace" in registry
    assert "virtualbox" not in registry


def test_new_instantiates_driver(tmp_path):
    driver = build_registry().new("rackspace", str(tmp_path))
    assert isinstance(driver, RackspaceDriver)
    assert driver.record.store_path == str(tmp_path)


def test_resolve_config_dispatches_by_name():
    config = build_registry().resolve_config(
        "rackspace", overrides={"username": "alice"}, environ={"RACKSPACE_REGION": "IAD"}
    )
    assert isinstance(config, RackspaceConfig)
    assert (config.username, config.region) == ("alice", "IAD")


def test_unknown_driver():
    with pytest.raises(ConfigurationError, match="Unknown driver 'virtualbox'. Available drivers: rackspace"):
        build_registry().get("virtualbox")


def test_empty_registry_message():
    with pytest.raises(ConfigurationError, match="Available drivers: none"):
        DriverRegistry().new("rackspace", "/tmp/x")


def test_duplicate_registration():
    registry = build_registry()
    with pytest.raises(ValueError, match="already registered"):
        registry.register("rackspace", RegisteredDriver(new=RackspaceDriver, resolve_config=lambda **kw: None))
