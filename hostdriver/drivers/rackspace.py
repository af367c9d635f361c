"""Rackspace driver: one Cloud Servers host with the Docker API on TCP 2375."""

import logging
import os
import secrets

from hostdriver.config import RackspaceConfig
from hostdriver.drivers.base import Driver
from hostdriver.errors import InvalidStateError, UnsupportedOperationError
from hostdriver.provisioning.configure import DOCKER_PORT, configure
from hostdriver.provisioning.credentials import create_credential
from hostdriver.provisioning.lifecycle import InstanceLifecycle
from hostdriver.provisioning.rackspace_api import DEFAULT_IDENTITY_URL, authenticate
from hostdriver.provisioning.ssh_transport import SSHShell
from hostdriver.provisioning.ssh_transport import ssh_command as build_ssh_command
from hostdriver.provisioning.types import InstanceRecord, ServerSpec
from hostdriver.provisioning.wait import wait_until
from hostdriver.state import State

logger = logging.getLogger(__name__)

SSH_TIMEOUT = 120
SSH_KEY_FILENAME = "id_rsa"


def generate_random_id():
    return secrets.token_hex(32)


class RackspaceDriver(Driver):
    """Driver facade sequencing auth, credentials, lifecycle and setup.

    Every remote operation authenticates afresh; no session is kept between
    calls. Create does not roll back on failure. Call remove() to clean up.

    Args:
        store_path: per-host directory holding the SSH key pair.
        authenticator: callable(username, api_key, region, identity_url)
            returning a compute client.
        shell: remote shell collaborator with run() and probe().
        lifecycle: InstanceLifecycle used for server operations.
    """

    name = "rackspace"
    api_key_env = "RACKSPACE_API_KEY"

    def __init__(self, store_path, authenticator=authenticate, shell=None, lifecycle=None):
        self.record = InstanceRecord(store_path=store_path)
        self.identity_url = DEFAULT_IDENTITY_URL
        self._authenticator = authenticator
        self.shell = shell or SSHShell()
        self.lifecycle = lifecycle or InstanceLifecycle()

    # ── Configuration ─────────────────────────────────────────────

    def set_config(self, config: RackspaceConfig):
        config.validate()
        self.record.username = config.username
        self.record.api_key = config.api_key
        self.record.region = config.region
        self.record.image_id = config.image_id
        self.record.flavor_id = config.flavor_id
        self.record.ssh_user = config.ssh_user
        self.identity_url = config.identity_url

    def config(self) -> RackspaceConfig:
        """Current options as a RackspaceConfig (unvalidated)."""
        return RackspaceConfig(
            username=self.record.username,
            api_key=self.record.api_key,
            region=self.record.region,
            image_id=self.record.image_id,
            flavor_id=self.record.flavor_id,
            ssh_user=self.record.ssh_user,
            identity_url=self.identity_url,
        )

    @property
    def ssh_key_path(self):
        return os.path.join(self.record.store_path, SSH_KEY_FILENAME)

    # ── Internal helpers ──────────────────────────────────────────

    def _authenticate(self):
        self.config().validate()
        return self._authenticator(
            username=self.record.username,
            api_key=self.record.api_key,
            region=self.record.region,
            identity_url=self.identity_url,
        )

    def _require_server_id(self):
        if self.record.removed:
            raise InvalidStateError(f"Server {self.record.server_id} has been removed.")
        if not self.record.server_id:
            raise InvalidStateError("Server has not been created yet.")
        return self.record.server_id

    def _record_server_id(self, server_id):
        self.record.server_id = server_id
        logger.debug(f"Server id {server_id} assigned.")

    def _run_cmd(self, command):
        return self.shell.run(
            self.record.ip_address, self.record.ssh_port, self.record.ssh_user, self.ssh_key_path, command
        )

    def _wait_for_ssh(self):
        logger.debug(f"Waiting for SSH connectivity to {self.record.address}.")
        wait_until(
            lambda: self.shell.probe(
                self.record.ip_address, self.record.ssh_port, self.record.ssh_user, self.ssh_key_path
            ),
            SSH_TIMEOUT,
            interval=self.lifecycle.poll_interval,
            cancel=self.lifecycle.cancel,
            clock=self.lifecycle.clock,
            sleep=self.lifecycle.sleep,
            description=f"SSH connectivity to {self.record.address}",
        )

    # ── Driver surface ────────────────────────────────────────────

    def create(self):
        self.config().validate()
        self.record.base_name = generate_random_id()
        self.record.removed = False

        logger.info("Creating Rackspace server...")
        client = self._authenticate()

        self.record.key_pair_name = create_credential(client, self.record.base_name, self.ssh_key_path)

        spec = ServerSpec(
            name=self.record.server_name,
            image_id=self.record.image_id,
            flavor_id=self.record.flavor_id,
            key_pair_name=self.record.key_pair_name,
        )
        server_id, ip = self.lifecycle.create(client, spec, on_submitted=self._record_server_id)
        self.record.server_id = server_id
        self.record.ip_address = ip

        self._wait_for_ssh()
        configure(self._run_cmd)
        logger.info(f"Rackspace server {spec.name} is ready at {self.get_url()}")

    def get_ip(self):
        if self.record.removed or not self.record.ip_address:
            raise InvalidStateError("Server has not been created yet.")
        return self.record.ip_address

    def get_url(self):
        return f"tcp://{self.get_ip()}:{DOCKER_PORT}"

    def get_state(self) -> State:
        server_id = self._require_server_id()
        client = self._authenticate()
        return self.lifecycle.get_status(client, server_id)

    def start(self):
        raise UnsupportedOperationError("Start is unsupported at this time.")

    def stop(self):
        raise UnsupportedOperationError("Stop is unsupported at this time.")

    def restart(self):
        server_id = self._require_server_id()
        client = self._authenticate()
        self.lifecycle.reboot(client, server_id)

    def remove(self):
        """Delete the server and then its key pair.

        A key pair left behind by a create that failed before a server id
        was assigned is deleted on its own. If create failed before anything
        remote existed, the record is just marked removed.
        """
        if not self.record.removed and not self.record.server_id:
            if self.record.key_pair_name:
                client = self._authenticate()
                self.lifecycle.delete_key_pair(client, self.record.key_pair_name)
            else:
                logger.debug("No remote resources to delete.")
            self.record.removed = True
            return

        server_id = self._require_server_id()
        client = self._authenticate()
        self.lifecycle.destroy(client, server_id, self.record.key_pair_name)
        self.record.removed = True

    def ssh_command(self, *args):
        ip = self.get_ip()
        return build_ssh_command(ip, self.record.ssh_port, self.record.ssh_user, self.ssh_key_path, *args)

    def run_ssh(self, command):
        """Run an ad hoc command on the host. Returns its stdout."""
        self.get_ip()
        return self._run_cmd(command)

    # ── Persistence ───────────────────────────────────────────────

    def to_dict(self):
        data = self.record.to_dict()
        data["identity_url"] = self.identity_url
        return data

    def load_dict(self, data):
        data = dict(data)
        self.identity_url = data.pop("identity_url", None) or DEFAULT_IDENTITY_URL
        store_path = self.record.store_path
        self.record = InstanceRecord.from_dict(data)
        # The directory the driver was opened from wins over the saved one
        self.record.store_path = store_path or self.record.store_path
