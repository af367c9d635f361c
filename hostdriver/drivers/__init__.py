"""Host drivers."""

from hostdriver.drivers.base import Driver
from hostdriver.drivers.rackspace import RackspaceDriver

__all__ = ["Driver", "RackspaceDriver"]
