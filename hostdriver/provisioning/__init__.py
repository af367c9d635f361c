"""Provisioning building blocks: provider API, credentials, lifecycle, remote setup."""

from hostdriver.provisioning.configure import DOCKER_PORT, configure
from hostdriver.provisioning.credentials import create_credential, delete_credential
from hostdriver.provisioning.lifecycle import CREATE_TIMEOUT, REBOOT_TIMEOUT, InstanceLifecycle
from hostdriver.provisioning.rackspace_api import ComputeClient, authenticate
from hostdriver.provisioning.shell import run_shell_cmd
from hostdriver.provisioning.ssh_transport import SSHShell, run_remote, ssh_base_args
from hostdriver.provisioning.types import InstanceRecord, ServerDetails, ServerSpec
from hostdriver.provisioning.wait import wait_for_status, wait_until

__all__ = [
    "InstanceRecord",
    "ServerSpec",
    "ServerDetails",
    "authenticate",
    "ComputeClient",
    "create_credential",
    "delete_credential",
    "InstanceLifecycle",
    "CREATE_TIMEOUT",
    "REBOOT_TIMEOUT",
    "configure",
    "DOCKER_PORT",
    "run_shell_cmd",
    "run_remote",
    "ssh_base_args",
    "SSHShell",
    "wait_for_status",
    "wait_until",
]
