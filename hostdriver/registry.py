"""Explicit driver factory map.

The CLI entry point builds one registry with build_registry() and passes it
to the command handlers. Drivers never register themselves on import.
"""

from dataclasses import dataclass
from typing import Callable

from hostdriver.config import resolve_rackspace_config
from hostdriver.drivers.base import Driver
from hostdriver.drivers.rackspace import RackspaceDriver
from hostdriver.errors import ConfigurationError


@dataclass(frozen=True)
class RegisteredDriver:
    """Factory plus config resolver for one driver name."""

    new: Callable[..., Driver]
    resolve_config: Callable[..., object]


class DriverRegistry:
    """Mapping of driver name → RegisteredDriver."""

    def __init__(self, drivers=None):
        self._drivers: dict[str, RegisteredDriver] = dict(drivers or {})

    def register(self, name, registered: RegisteredDriver):
        if name in self._drivers:
            raise ValueError(f"Driver '{name}' is already registered")
        self._drivers[name] = registered

    def names(self) -> list[str]:
        return sorted(self._drivers)

    def get(self, name) -> RegisteredDriver:
        try:
            return self._drivers[name]
        except KeyError:
            available = ", ".join(self.names()) or "none"
            raise ConfigurationError(f"Unknown driver '{name}'. Available drivers: {available}") from None

    def __contains__(self, name):
        return name in self._drivers

    def new(self, name, store_path, **kwargs) -> Driver:
        """Instantiate driver *name* for the host stored at *store_path*."""
        return self.get(name).new(store_path, **kwargs)

    def resolve_config(self, name, file_options=None, overrides=None, environ=None):
        return self.get(name).resolve_config(file_options=file_options, overrides=overrides, environ=environ)


def build_registry() -> DriverRegistry:
    """Registry with every driver shipped in this package."""
    registry = DriverRegistry()
    registry.register("rackspace", RegisteredDriver(new=RackspaceDriver, resolve_config=resolve_rackspace_config))
    return registry
