"""Driver configuration: provider-keyed, validated before any network call.

A config file is YAML keyed by driver name::

    rackspace:
      username: alice
      region: DFW
      image_id: 0b2fd7a5-...
      flavor_id: general1-1

Values are resolved with increasing precedence from the file, environment
variables and explicit overrides (CLI flags).
"""

import os
from dataclasses import dataclass, fields

import yaml

from hostdriver.errors import ConfigurationError
from hostdriver.provisioning.rackspace_api import DEFAULT_IDENTITY_URL
from hostdriver.provisioning.types import DEFAULT_SSH_USER

# field name → CLI flag suffix used in error messages
RACKSPACE_REQUIRED = {
    "username": "username",
    "api_key": "api-key",
    "region": "region",
    "image_id": "image",
    "flavor_id": "flavor",
}

RACKSPACE_ENV_VARS = {
    "username": "RACKSPACE_USERNAME",
    "api_key": "RACKSPACE_API_KEY",
    "region": "RACKSPACE_REGION",
    "image_id": "RACKSPACE_IMAGE",
    "flavor_id": "RACKSPACE_FLAVOR",
}


def missing_option_error(driver_name, flag_name):
    return ConfigurationError(f"{driver_name} driver requires the --{driver_name}-{flag_name} option")


@dataclass
class RackspaceConfig:
    """Options accepted by the rackspace driver."""

    username: str = ""
    api_key: str = ""
    region: str = ""
    image_id: str = ""
    flavor_id: str = ""
    ssh_user: str = DEFAULT_SSH_USER
    identity_url: str = DEFAULT_IDENTITY_URL

    @classmethod
    def from_dict(cls, d: dict) -> "RackspaceConfig":
        """Build a config from a plain dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(f"Unknown rackspace option(s): {', '.join(unknown)}")
        values = {k: "" if v is None else str(v) for k, v in d.items()}
        return cls(**values)

    def validate(self):
        """Raise ConfigurationError for the first missing required option."""
        for field_name, flag_name in RACKSPACE_REQUIRED.items():
            if not getattr(self, field_name):
                raise missing_option_error("rackspace", flag_name)
        return self


def load_config(path):
    """Load a provider-keyed YAML config file.

    Returns:
        dict mapping driver name → option dict.
    """
    path = os.path.expanduser(path)
    if not os.path.isfile(path):
        raise ConfigurationError(f"Config file not found: {path}")
    with open(path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must be a mapping keyed by driver name")
    for name, options in config.items():
        if not isinstance(options, dict):
            raise ConfigurationError(f"Config section '{name}' must be a mapping")
    return config


def env_options(env_vars, environ=None):
    """Collect option values from environment variables that are set."""
    environ = os.environ if environ is None else environ
    return {field_name: environ[var] for field_name, var in env_vars.items() if environ.get(var)}


def resolve_rackspace_config(file_options=None, overrides=None, environ=None):
    """Merge file, environment and override values into a RackspaceConfig.

    None-valued overrides are ignored so unset CLI flags do not mask lower
    layers. The result is not validated; call validate() on it.
    """
    merged = dict(file_options or {})
    merged.update(env_options(RACKSPACE_ENV_VARS, environ))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return RackspaceConfig.from_dict(merged)
