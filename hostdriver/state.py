"""Provider-agnostic lifecycle state and the mapping from raw server statuses."""

from enum import Enum


class State(Enum):
    """Normalized lifecycle state of a host.

    NONE means the server was never created (or never queried). UNKNOWN means
    the provider reported a status this module does not recognise.
    """

    NONE = "none"
    STARTING = "starting"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    ERROR = "error"
    UNKNOWN = "unknown"

    def __str__(self):
        return self.name.capitalize()


# Compute API server statuses → normalized state.
PROVIDER_STATUS_MAP = {
    "BUILD": State.STARTING,
    "REBUILD": State.STARTING,
    "REBOOT": State.STARTING,
    "HARD_REBOOT": State.STARTING,
    "RESIZE": State.STARTING,
    "VERIFY_RESIZE": State.STARTING,
    "MIGRATING": State.STARTING,
    "ACTIVE": State.RUNNING,
    "SUSPENDED": State.PAUSED,
    "PAUSED": State.PAUSED,
    "DELETED": State.STOPPED,
    "SOFT_DELETED": State.STOPPED,
    "SHUTOFF": State.STOPPED,
    "ERROR": State.ERROR,
}


def from_provider_status(status: str | None) -> State:
    """Map a raw provider status string to a State.

    Unrecognised or empty statuses map to State.UNKNOWN; they are not errors.
    """
    if not status:
        return State.UNKNOWN
    return PROVIDER_STATUS_MAP.get(status.strip().upper(), State.UNKNOWN)
