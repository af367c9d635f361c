"""Provision and manage the lifecycle of a single remote Docker host."""

from hostdriver.drivers.rackspace import RackspaceDriver
from hostdriver.errors import (
    AuthenticationError,
    ConfigurationError,
    HostDriverError,
    InvalidStateError,
    OperationCancelled,
    ProviderAPIError,
    ProvisionTimeout,
    RemoteExecutionError,
    UnsupportedOperationError,
)
from hostdriver.registry import DriverRegistry, build_registry
from hostdriver.state import State

__all__ = [
    "RackspaceDriver",
    "DriverRegistry",
    "build_registry",
    "State",
    "HostDriverError",
    "ConfigurationError",
    "AuthenticationError",
    "ProviderAPIError",
    "ProvisionTimeout",
    "OperationCancelled",
    "RemoteExecutionError",
    "InvalidStateError",
    "UnsupportedOperationError",
]
