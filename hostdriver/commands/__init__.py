"""CLI command handlers."""

import functools
import logging
import os
import sys

from hostdriver.errors import HostDriverError
from hostdriver.redact import register_secret
from hostdriver.store import HostStore

logger = logging.getLogger(__name__)


def cli_handler(func):
    """Turn HostDriverError into a logged message and exit status 1."""

    @functools.wraps(func)
    def wrapper(args):
        try:
            return func(args)
        except HostDriverError as e:
            logger.error(f"Error: {e}")
            sys.exit(1)

    return wrapper


def open_store(args):
    return HostStore(getattr(args, "store", None))


def load_driver(args, with_credentials=False):
    """Load the driver for ``args.name`` from the host store.

    With *with_credentials*, fill in the API key (never stored on disk) from
    ``--api-key`` or the driver's env var and validate the full config.
    """
    driver = open_store(args).load(args.name, args.registry)
    if with_credentials:
        config = driver.config()
        config.api_key = getattr(args, "api_key", None) or os.environ.get(driver.api_key_env, "")
        register_secret(config.api_key)
        driver.set_config(config)
    return driver
