"""SSH credential management: local key pair generation and provider registration."""

import logging
import os

from hostdriver.errors import KeyGenerationError
from hostdriver.provisioning.shell import run_shell_cmd

logger = logging.getLogger(__name__)

KEY_PAIR_PREFIX = "hostdriver-key-"
KEY_BITS = 2048


def key_pair_name(base_name):
    """Provider-side key pair name derived from the host's base name."""
    return f"{KEY_PAIR_PREFIX}{base_name}"


def public_key_path(key_path):
    return f"{key_path}.pub"


def generate_ssh_key(key_path):
    """Generate an RSA key pair at *key_path* (+ .pub) unless one already exists.

    Raises:
        KeyGenerationError if ssh-keygen is missing or fails.
    """
    if os.path.exists(key_path) and os.path.exists(public_key_path(key_path)):
        logger.debug(f"Reusing existing SSH key at {key_path}")
        return

    os.makedirs(os.path.dirname(key_path) or ".", exist_ok=True)
    cmd = ["ssh-keygen", "-t", "rsa", "-b", str(KEY_BITS), "-N", "", "-q", "-C", "hostdriver", "-f", key_path]
    # ssh-keygen asks before overwriting a private key left without its .pub
    answer = "y\n" if os.path.exists(key_path) else None
    rc, _, stderr = run_shell_cmd(cmd, timeout=60, input_text=answer)
    if rc != 0:
        raise KeyGenerationError(f"Failed to generate SSH key at {key_path}: {stderr.strip()}")
    os.chmod(key_path, 0o600)


def read_public_key(key_path):
    try:
        with open(public_key_path(key_path)) as f:
            return f.read().strip()
    except OSError as e:
        raise KeyGenerationError(f"Cannot read public key {public_key_path(key_path)}: {e}") from e


def create_credential(client, base_name, key_path):
    """Ensure a local key pair exists and register its public half.

    Returns:
        The key pair name the provider registered.

    Raises:
        KeyGenerationError, ProviderAPIError.
    """
    logger.debug("Creating a new SSH key.")
    generate_ssh_key(key_path)
    public_key = read_public_key(key_path)

    name = key_pair_name(base_name)
    registered = client.create_keypair(name, public_key)
    logger.debug(f"SSH key pair '{registered}' registered.")
    return registered


def delete_credential(client, name):
    """Remove a key pair registration from the provider."""
    logger.debug(f"Deleting the ssh keypair '{name}'.")
    client.delete_keypair(name)
