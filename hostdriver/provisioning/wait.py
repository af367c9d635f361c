"""Poll-until-ready wait primitives with a deadline and a cancellation token."""

import logging
import time

from hostdriver.errors import OperationCancelled, ProviderAPIError, ProvisionTimeout

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5


def _pause(interval, cancel, sleep):
    """Sleep between polls. Returns early and raises if *cancel* gets set."""
    if cancel is not None:
        if cancel.wait(interval):
            raise OperationCancelled("Wait cancelled")
        return
    sleep(interval)


def wait_until(
    predicate,
    timeout,
    interval=DEFAULT_POLL_INTERVAL,
    cancel=None,
    clock=time.monotonic,
    sleep=time.sleep,
    description="condition",
):
    """Call *predicate* until it returns a truthy value or *timeout* seconds pass.

    The deadline is checked before each call, so a zero timeout fails without
    calling the predicate at all.

    Args:
        cancel: optional ``threading.Event``; setting it aborts the wait with
            OperationCancelled.
        clock / sleep: time source and sleeper, replaceable in tests.

    Returns:
        The first truthy value returned by *predicate*.

    Raises:
        ProvisionTimeout, OperationCancelled.
    """
    if interval <= 0:
        raise ValueError(f"Poll interval must be positive, got {interval}")

    deadline = clock() + timeout
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(f"Wait for {description} cancelled")
        if clock() >= deadline:
            raise ProvisionTimeout(f"Timeout after {timeout}s waiting for {description}", timeout=timeout)
        result = predicate()
        if result:
            return result
        _pause(interval, cancel, sleep)


def wait_for_status(
    poll,
    target_status,
    timeout,
    interval=DEFAULT_POLL_INTERVAL,
    cancel=None,
    clock=time.monotonic,
    sleep=time.sleep,
    fail_statuses=(),
):
    """Poll a status source until it reports *target_status* or timeout.

    Args:
        poll: zero-argument callable returning the current raw status string.
        fail_statuses: statuses that end the wait immediately with
            ProviderAPIError instead of waiting out the timeout.

    Returns:
        The target status.

    Raises:
        ProvisionTimeout carrying the last observed status, OperationCancelled,
        ProviderAPIError for a fail status, or whatever *poll* raises.
    """
    if interval <= 0:
        raise ValueError(f"Poll interval must be positive, got {interval}")

    deadline = clock() + timeout
    status = None
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(f"Wait for status '{target_status}' cancelled (last: '{status}')")
        if clock() >= deadline:
            logger.error(f"Timeout after {timeout}s waiting for status '{target_status}' (last: '{status}')")
            raise ProvisionTimeout(
                f"Timeout after {timeout}s waiting for status '{target_status}' (last: '{status}')",
                timeout=timeout,
                last_status=status,
            )
        status = poll()
        if status == target_status:
            return status
        if status in fail_statuses:
            raise ProviderAPIError(f"Server reached fail status '{status}' while waiting for '{target_status}'")
        logger.debug(f"Status is '{status}', waiting for '{target_status}'...")
        _pause(interval, cancel, sleep)
