"""Shared data types for the provisioning layer."""

from dataclasses import asdict, dataclass, fields

DEFAULT_SSH_USER = "core"
DEFAULT_SSH_PORT = 22


@dataclass
class ServerSpec:
    """Everything the compute API needs to launch one server."""

    name: str
    image_id: str
    flavor_id: str
    key_pair_name: str
    disk_config: str = "MANUAL"


@dataclass
class ServerDetails:
    """Subset of a server resource as returned by the compute API."""

    id: str
    status: str
    access_ipv4: str = ""
    name: str = ""


@dataclass
class InstanceRecord:
    """Local record of one provisioned host.

    Populated incrementally by Driver.create(): base_name, then
    key_pair_name, then server_id and ip_address. Remove does not clear the
    identifiers; it sets ``removed`` instead.
    """

    username: str = ""
    api_key: str = ""
    region: str = ""
    image_id: str = ""
    flavor_id: str = ""
    ssh_user: str = DEFAULT_SSH_USER
    ssh_port: int = DEFAULT_SSH_PORT
    store_path: str = ""
    base_name: str = ""
    key_pair_name: str = ""
    server_id: str = ""
    ip_address: str = ""
    removed: bool = False

    @property
    def server_name(self) -> str:
        return f"hostdriver-host-{self.base_name}"

    @property
    def address(self) -> str:
        """SSH address string (user@host)."""
        return f"{self.ssh_user}@{self.ip_address}" if self.ssh_user else self.ip_address

    def to_dict(self) -> dict:
        """Serialize for the host store. The API key is never persisted."""
        data = asdict(self)
        data.pop("api_key")
        return data

    @classmethod
    def from_dict(cls, d: dict) -> "InstanceRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})
