"""On-disk host store: one directory per host with config.json and its SSH keys."""

import json
import logging
import os
import shutil
from pathlib import Path

from hostdriver.errors import ConfigurationError, InvalidStateError

logger = logging.getLogger(__name__)

DEFAULT_STORE_ROOT = "~/.hostdriver/hosts"
CONFIG_FILENAME = "config.json"


class HostStore:
    """Persists driver state so later commands can find a host by name."""

    def __init__(self, root=None):
        root = root or os.environ.get("HOSTDRIVER_STORE") or DEFAULT_STORE_ROOT
        self.root = Path(root).expanduser()

    def path(self, name) -> Path:
        if not name or "/" in name or name.startswith("."):
            raise ConfigurationError(f"Invalid host name: '{name}'")
        return self.root / name

    def exists(self, name) -> bool:
        return (self.path(name) / CONFIG_FILENAME).exists()

    def create_dir(self, name) -> Path:
        """Create the host directory. Fails if the host already exists."""
        if self.exists(name):
            raise InvalidStateError(f"Host '{name}' already exists")
        host_dir = self.path(name)
        host_dir.mkdir(parents=True, exist_ok=True)
        return host_dir

    def save(self, name, driver):
        config_path = self.path(name) / CONFIG_FILENAME
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data = {"driver": driver.name, "record": driver.to_dict()}
        config_path.write_text(json.dumps(data, indent=2) + "\n")
        logger.debug(f"Saved host '{name}' to {config_path}")

    def load(self, name, registry, **driver_kwargs):
        """Recreate the driver for host *name* from its config.json."""
        config_path = self.path(name) / CONFIG_FILENAME
        if not config_path.exists():
            raise InvalidStateError(f"Host '{name}' does not exist")
        data = json.loads(config_path.read_text())
        driver = registry.new(data["driver"], str(self.path(name)), **driver_kwargs)
        driver.load_dict(data.get("record", {}))
        return driver

    def remove(self, name):
        host_dir = self.path(name)
        if host_dir.exists():
            shutil.rmtree(host_dir)

    def list(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if (p / CONFIG_FILENAME).exists())
