"""CLI logging setup: plain %(message)s format, secrets redacted."""

import logging
import sys

from hostdriver.redact import SecretRedactingFilter


def setup_cli_logging(debug=False):
    """Configure the root logger for CLI commands.

    INFO output reads like print(); --debug adds the step-by-step
    provisioning trace with logger names.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(levelname)s [%(name)s] %(message)s" if debug else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    # Handler-level so records from child loggers are redacted too
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
