"""Commands that operate on an existing host: state, ip, url, start, stop,
restart, remove, kill, ssh and ls."""

import argparse
import logging
import subprocess
import sys

from hostdriver.commands import cli_handler, load_driver, open_store

logger = logging.getLogger(__name__)


@cli_handler
def handle_state(args):
    driver = load_driver(args, with_credentials=True)
    logger.info(str(driver.get_state()))


@cli_handler
def handle_ip(args):
    driver = load_driver(args)
    logger.info(driver.get_ip())


@cli_handler
def handle_url(args):
    driver = load_driver(args)
    logger.info(driver.get_url())


@cli_handler
def handle_start(args):
    load_driver(args).start()


@cli_handler
def handle_stop(args):
    load_driver(args).stop()


@cli_handler
def handle_restart(args):
    driver = load_driver(args, with_credentials=True)
    driver.restart()
    logger.info(f"Host '{args.name}' restarted.")


@cli_handler
def handle_remove(args):
    """Delete the remote resources, then the local host directory."""
    store = open_store(args)
    driver = load_driver(args, with_credentials=True)
    if args.kill:
        driver.kill()
    else:
        driver.remove()
    store.remove(args.name)
    logger.info(f"Host '{args.name}' removed.")


@cli_handler
def handle_ssh(args):
    driver = load_driver(args)
    cmd = driver.ssh_command(*args.command)
    logger.debug(f"Running: {' '.join(cmd)}")
    rc = subprocess.run(cmd).returncode
    if rc != 0:
        sys.exit(rc)


@cli_handler
def handle_ls(args):
    store = open_store(args)
    for name in store.list():
        driver = store.load(name, args.registry)
        ip = driver.record.ip_address or "-"
        logger.info(f"{name}\t{driver.name}\t{ip}")


def _add_host_parser(subparsers, command, help_text, func, credentials=False, **defaults):
    parser = subparsers.add_parser(command, help=help_text)
    parser.add_argument("name", help="Host name")
    if credentials:
        parser.add_argument("--api-key", default=None, help="Provider API key (fallback: driver env var)")
    parser.set_defaults(func=func, **defaults)
    return parser


def register_host_commands(subparsers):
    """Register the per-host commands."""
    _add_host_parser(subparsers, "state", "Print the host's lifecycle state", handle_state, credentials=True)
    _add_host_parser(subparsers, "ip", "Print the host's IP address", handle_ip)
    _add_host_parser(subparsers, "url", "Print the host's Docker URL", handle_url)
    _add_host_parser(subparsers, "start", "Start the host", handle_start)
    _add_host_parser(subparsers, "stop", "Stop the host", handle_stop)
    _add_host_parser(subparsers, "restart", "Reboot the host", handle_restart, credentials=True)
    _add_host_parser(subparsers, "remove", "Delete the host", handle_remove, credentials=True, kill=False)
    _add_host_parser(subparsers, "kill", "Kill the host", handle_remove, credentials=True, kill=True)

    ssh_parser = _add_host_parser(subparsers, "ssh", "Open a shell or run a command on the host", handle_ssh)
    ssh_parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run (default: login shell)")

    ls_parser = subparsers.add_parser("ls", help="List hosts")
    ls_parser.set_defaults(func=handle_ls)
