"""Unit tests for config file loading and option resolution."""

import pytest

from hostdriver.config import (
    RackspaceConfig,
    env_options,
    load_config,
    resolve_rackspace_config,
    RACKSPACE_ENV_VARS,
)
from hostdriver.errors import ConfigurationError
from hostdriver.provisioning.rackspace_api import DEFAULT_IDENTITY_URL

FULL = {
    "username": "alice",
    "api_key": "0123456789abcdef0123",
    "region": "DFW",
    "image_id": "img-coreos",
    "flavor_id": "general1-1",
}

# ── RackspaceConfig ─────────────────────────────────────────────


def test_defaults():
    config = RackspaceConfig.from_dict(FULL)
    assert config.ssh_user == "core"
    assert config.identity_url == DEFAULT_IDENTITY_URL
    assert config.validate() is config


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigurationError, match="Unknown rackspace option\\(s\\): colour, size"):
        RackspaceConfig.from_dict({**FULL, "size": "big", "colour": "red"})


def test_from_dict_none_is_empty():
    config = RackspaceConfig.from_dict({**FULL, "region": None})
    assert config.region == ""
    with pytest.raises(ConfigurationError, match="--rackspace-region"):
        config.validate()


def test_validate_reports_first_missing_option():
    with pytest.raises(ConfigurationError, match="rackspace driver requires the --rackspace-username option"):
        RackspaceConfig().validate()


# ── load_config ─────────────────────────────────────────────────


def test_load_config(tmp_path):
    path = tmp_path / "hostdriver.yaml"
    path.write_text("rackspace:\n  username: alice\n  region: ORD\n")
    assert load_config(str(path)) == {"rackspace": {"username": "alice", "region": "ORD"}}


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == {}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_config(str(tmp_path / "nope.yaml"))


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("rackspace: [unclosed\n")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config(str(path))


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- rackspace\n")
    with pytest.raises(ConfigurationError, match="must be a mapping"):
        load_config(str(path))


def test_load_config_section_not_a_mapping(tmp_path):
    path = tmp_path / "section.yaml"
    path.write_text("rackspace: alice\n")
    with pytest.raises(ConfigurationError, match="Config section 'rackspace'"):
        load_config(str(path))


# ── resolution ──────────────────────────────────────────────────


def test_env_options_skips_unset_and_empty():
    environ = {"RACKSPACE_USERNAME": "bob", "RACKSPACE_REGION": "", "UNRELATED": "x"}
    assert env_options(RACKSPACE_ENV_VARS, environ) == {"username": "bob"}


def test_resolve_precedence():
    file_options = {**FULL, "username": "from-file", "region": "DFW"}
    environ = {"RACKSPACE_USERNAME": "from-env", "RACKSPACE_REGION": "ORD"}
    overrides = {"username": "from-cli", "region": None, "ssh_user": None}

    config = resolve_rackspace_config(file_options, overrides, environ)

    assert config.username == "from-cli"
    assert config.region == "ORD"
    assert config.ssh_user == "core"
    assert config.image_id == "img-coreos"


def test_resolve_env_only():
    environ = {var: FULL[name] for name, var in RACKSPACE_ENV_VARS.items()}
    config = resolve_rackspace_config(environ=environ)
    assert config == RackspaceConfig(**FULL)


def test_resolve_does_not_validate():
    config = resolve_rackspace_config({}, {}, {})
    assert config.username == ""
