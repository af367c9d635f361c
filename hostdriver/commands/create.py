"""'create' command: provision a new host with one of the registered drivers."""

import logging

from hostdriver.commands import cli_handler, open_store
from hostdriver.config import load_config
from hostdriver.provisioning.rackspace_api import DEFAULT_IDENTITY_URL
from hostdriver.redact import register_secret

logger = logging.getLogger(__name__)

# dest → (flag, help) for the rackspace driver
RACKSPACE_FLAGS = {
    "username": ("--username", "Rackspace account username (fallback: RACKSPACE_USERNAME)"),
    "api_key": ("--api-key", "Rackspace API key (fallback: RACKSPACE_API_KEY)"),
    "region": ("--region", "Rackspace region, e.g. DFW (fallback: RACKSPACE_REGION)"),
    "image_id": ("--image", "Rackspace image ID (fallback: RACKSPACE_IMAGE)"),
    "flavor_id": ("--flavor", "Rackspace flavor ID (fallback: RACKSPACE_FLAVOR)"),
    "ssh_user": ("--ssh-user", "SSH login user on the image (default: core)"),
    "identity_url": ("--identity-url", f"Identity API base URL (default: {DEFAULT_IDENTITY_URL})"),
}


@cli_handler
def handle_create(args):
    """CLI handler for 'create <driver> NAME'."""
    file_options = load_config(args.config).get(args.driver, {}) if args.config else {}
    overrides = {dest: getattr(args, dest, None) for dest in args.option_dests}
    config = args.registry.resolve_config(args.driver, file_options=file_options, overrides=overrides)
    register_secret(config.api_key)
    config.validate()

    store = open_store(args)
    host_dir = store.create_dir(args.name)
    driver = args.registry.new(args.driver, str(host_dir))
    driver.set_config(config)

    try:
        driver.create()
    finally:
        # Keep whatever was created so 'remove' can clean it up
        store.save(args.name, driver)

    logger.info(f"Host '{args.name}' is running at {driver.get_url()}")


def _add_driver_parser(subparsers, driver_name, flags, help_text):
    parser = subparsers.add_parser(driver_name, help=help_text)
    parser.add_argument("name", help="Local name for the new host")
    parser.add_argument("--config", default=None, help="YAML config file keyed by driver name")
    for dest, (flag, flag_help) in flags.items():
        parser.add_argument(flag, dest=dest, default=None, help=flag_help)
    parser.set_defaults(func=handle_create, driver=driver_name, option_dests=list(flags))
    return parser


def register_create_command(subparsers, registry):
    """Register 'create' with one sub-subcommand per registered driver."""
    create_parser = subparsers.add_parser("create", help="Create a host")
    driver_subparsers = create_parser.add_subparsers(dest="driver", required=True)

    if "rackspace" in registry:
        _add_driver_parser(driver_subparsers, "rackspace", RACKSPACE_FLAGS, "Create a Rackspace Cloud Servers host")
