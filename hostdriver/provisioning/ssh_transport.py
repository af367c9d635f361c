"""SSH transport: run commands on the provisioned host and probe reachability."""

import logging

from hostdriver.errors import RemoteExecutionError
from hostdriver.provisioning.shell import run_shell_cmd

logger = logging.getLogger(__name__)


def ssh_base_args(server, ssh_key, ssh_port):
    """Build base SSH arguments."""
    args = [
        "ssh",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "BatchMode=yes",
        "-o", "LogLevel=quiet",
        "-o", "ServerAliveInterval=60",
        "-o", "ServerAliveCountMax=5",
    ]
    if ssh_key:
        args += ["-i", ssh_key]
    if ssh_port and ssh_port != 22:
        args += ["-p", str(ssh_port)]
    args.append(server)
    return args


def ssh_command(host, port, user, key_path, *args):
    """Full ssh argv for running *args* on the host (interactive login if empty)."""
    server = f"{user}@{host}" if user else host
    return ssh_base_args(server, key_path, port) + list(args)


def run_remote(host, port, user, key_path, command, timeout=600):
    """Run *command* on the host over ssh.

    Returns:
        The command's stdout.

    Raises:
        RemoteExecutionError if ssh or the command exits non-zero.
    """
    rc, stdout, stderr = run_shell_cmd(ssh_command(host, port, user, key_path, command), timeout=timeout)
    if rc != 0:
        raise RemoteExecutionError(
            f"Remote command failed on {host} (exit {rc}): {stderr.strip()}",
            command=command,
            returncode=rc,
        )
    return stdout


class SSHShell:
    """Remote shell collaborator handed to drivers."""

    def __init__(self, timeout=600, connect_timeout=5):
        self.timeout = timeout
        self.connect_timeout = connect_timeout

    def run(self, host, port, user, key_path, command):
        return run_remote(host, port, user, key_path, command, timeout=self.timeout)

    def probe(self, host, port, user, key_path):
        """Return True if an ssh session can be opened right now."""
        args = ssh_command(host, port, user, key_path)
        # Fail fast while the host is still booting
        args[1:1] = ["-o", f"ConnectTimeout={self.connect_timeout}"]
        args.append("true")
        rc, _, _ = run_shell_cmd(args, timeout=self.connect_timeout + 10)
        return rc == 0
