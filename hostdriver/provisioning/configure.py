"""Post-provision setup: expose the Docker API on a TCP socket."""

import logging

from hostdriver.errors import RemoteExecutionError

logger = logging.getLogger(__name__)

DOCKER_PORT = 2375

DOCKER_TCP_SOCKET_UNIT = f"""[Unit]
Description=Docker Socket for the API

[Socket]
ListenStream={DOCKER_PORT}
BindIPv6Only=both
Service=docker.service

[Install]
WantedBy=sockets.target"""

SERVICE_COMMANDS = [
    "systemctl enable docker-tcp.socket",
    "systemctl stop docker",
    "systemctl start docker-tcp.socket",
    "systemctl start docker",
]


def setup_commands():
    """Ordered remote commands that install the socket unit and restart Docker.

    Each one is safe to run again on an already configured host.
    """
    return [
        f"sudo sh -c \"echo '{DOCKER_TCP_SOCKET_UNIT}' > /etc/systemd/system/docker-tcp.socket\"",
        f"sudo sh -c \"{' && '.join(SERVICE_COMMANDS)}\"",
    ]


def configure(run_cmd):
    """Run the setup commands through *run_cmd*, stopping at the first failure.

    Args:
        run_cmd: callable taking one command string; raises
            RemoteExecutionError when the command fails.

    Raises:
        RemoteExecutionError naming the failed step.
    """
    logger.debug("Setting up Docker.")
    commands = setup_commands()
    for step, command in enumerate(commands, start=1):
        logger.debug(f"> {command}")
        try:
            run_cmd(command)
        except RemoteExecutionError as e:
            raise RemoteExecutionError(
                f"Setup step {step}/{len(commands)} failed: {e}",
                step=step,
                command=command,
                returncode=e.returncode,
            ) from e
