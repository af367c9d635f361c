#!/usr/bin/env python3
"""Remote Docker host provisioning: CLI entrypoint."""

import argparse

from hostdriver.commands.create import register_create_command
from hostdriver.commands.host import register_host_commands
from hostdriver.logging_setup import setup_cli_logging
from hostdriver.registry import build_registry


def main(argv=None):
    registry = build_registry()

    parser = argparse.ArgumentParser(description="Provision and manage a remote Docker host")
    parser.add_argument("--store", default=None, help="Host store directory (default: ~/.hostdriver/hosts)")
    parser.add_argument("--debug", action="store_true", help="Show step-by-step debug output")
    parser.set_defaults(registry=registry)
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_create_command(subparsers, registry)
    register_host_commands(subparsers)

    args = parser.parse_args(argv)
    setup_cli_logging(debug=args.debug)
    args.func(args)


if __name__ == "__main__":
    main()
