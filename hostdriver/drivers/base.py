"""Uniform operation surface every host driver implements."""

from abc import ABC, abstractmethod

from hostdriver.state import State


class Driver(ABC):
    """Abstract base for a driver managing exactly one host.

    Drivers are not safe for concurrent use; callers serialize operations on
    a given instance.
    """

    name: str = ""
    api_key_env: str = ""

    @abstractmethod
    def set_config(self, config) -> None:
        """Validate and apply the driver's options."""
        ...

    @abstractmethod
    def create(self) -> None:
        ...

    @abstractmethod
    def get_ip(self) -> str:
        ...

    @abstractmethod
    def get_url(self) -> str:
        ...

    @abstractmethod
    def get_state(self) -> State:
        ...

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def restart(self) -> None:
        ...

    @abstractmethod
    def remove(self) -> None:
        ...

    def kill(self) -> None:
        """Forcefully terminate the host. Defaults to remove()."""
        self.remove()

    @abstractmethod
    def ssh_command(self, *args) -> list[str]:
        """ssh argv for running *args* on the host."""
        ...

    @abstractmethod
    def to_dict(self) -> dict:
        """Serializable driver state for the host store."""
        ...

    @abstractmethod
    def load_dict(self, data: dict) -> None:
        """Restore driver state written by to_dict()."""
        ...
