"""Instance lifecycle: create, poll, reboot and tear down one server.

Every operation takes an authenticated compute client so the caller decides
when to (re-)authenticate. Nothing here rolls back on failure; a server left
behind by a failed create is removed through destroy().
"""

import logging
import time

from hostdriver.errors import ProviderAPIError
from hostdriver.provisioning.credentials import delete_credential
from hostdriver.provisioning.types import ServerSpec
from hostdriver.provisioning.wait import DEFAULT_POLL_INTERVAL, wait_for_status
from hostdriver.state import State, from_provider_status

logger = logging.getLogger(__name__)

READY_STATUS = "ACTIVE"
FAIL_STATUSES = frozenset({"ERROR"})
CREATE_TIMEOUT = 300
REBOOT_TIMEOUT = 600


class InstanceLifecycle:
    """Drives a server through its provider-side lifecycle.

    Args:
        poll_interval: seconds between status checks.
        clock / sleep: time source and sleeper used by the poll loop.
        cancel: optional ``threading.Event`` that aborts any running poll.
    """

    def __init__(self, poll_interval=DEFAULT_POLL_INTERVAL, clock=time.monotonic, sleep=time.sleep, cancel=None):
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep
        self.cancel = cancel

    def _wait_ready(self, client, server_id, timeout):
        return wait_for_status(
            lambda: client.get_server(server_id).status,
            READY_STATUS,
            timeout,
            interval=self.poll_interval,
            cancel=self.cancel,
            clock=self.clock,
            sleep=self.sleep,
            fail_statuses=FAIL_STATUSES,
        )

    def create(self, client, spec: ServerSpec, on_submitted=None):
        """Launch a server and wait until it is ACTIVE.

        Args:
            on_submitted: called with the server id as soon as the provider
                assigns one, before polling starts.

        Returns:
            (server_id, ipv4) tuple.

        Raises:
            ProvisionTimeout if ACTIVE is not reached within CREATE_TIMEOUT,
            ProviderAPIError for API failures or an ERROR status.
        """
        logger.debug("Launching the server.")
        server_id = client.create_server(spec)
        if on_submitted is not None:
            on_submitted(server_id)

        logger.debug(f"Waiting for server {spec.name} to launch.")
        self._wait_ready(client, server_id, CREATE_TIMEOUT)

        logger.debug(f"Getting details for server {spec.name}.")
        details = client.get_server(server_id)
        if not details.access_ipv4:
            raise ProviderAPIError(f"Server {server_id} is {READY_STATUS} but has no IPv4 address")

        logger.debug(f"Server {spec.name} is ready at IP address {details.access_ipv4}.")
        return details.id or server_id, details.access_ipv4

    def get_status(self, client, server_id) -> State:
        """Single status query, no polling."""
        return from_provider_status(client.get_server(server_id).status)

    def reboot(self, client, server_id):
        """Soft-reboot the server and wait for it to come back ACTIVE."""
        logger.debug("Restarting the server.")
        client.reboot_server(server_id, mode="SOFT")

        logger.debug("Waiting for server to reboot.")
        self._wait_ready(client, server_id, REBOOT_TIMEOUT)

    def destroy(self, client, server_id, key_pair_name):
        """Delete the server, then its key pair.

        A server or key pair that is already gone (404) counts as deleted.
        If deleting the server fails for any other reason the key pair is
        left untouched and the error propagates.
        """
        logger.debug("Deleting this server.")
        try:
            client.delete_server(server_id)
        except ProviderAPIError as e:
            if e.status_code != 404:
                raise
            logger.debug(f"Server {server_id} is already gone.")

        if key_pair_name:
            self.delete_key_pair(client, key_pair_name)

    def delete_key_pair(self, client, key_pair_name):
        """Delete a key pair registration. A 404 counts as deleted."""
        try:
            delete_credential(client, key_pair_name)
        except ProviderAPIError as e:
            if e.status_code != 404:
                raise
            logger.debug(f"Key pair {key_pair_name} is already gone.")
