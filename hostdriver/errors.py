"""Exception hierarchy shared by the driver, its collaborators and the CLI."""


class HostDriverError(Exception):
    """Base class for every error raised by hostdriver."""


class ConfigurationError(HostDriverError):
    """A required option is missing or a config value is malformed."""


class AuthenticationError(HostDriverError):
    """The provider rejected the account credentials."""


class ProviderAPIError(HostDriverError):
    """A provider API call failed for a reason other than a timeout."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ProvisionTimeout(HostDriverError):
    """Status polling did not observe the target status within its budget."""

    def __init__(self, message, timeout=None, last_status=None):
        super().__init__(message)
        self.timeout = timeout
        self.last_status = last_status


class OperationCancelled(HostDriverError):
    """A wait was aborted through its cancellation token."""


class RemoteExecutionError(HostDriverError):
    """A command run over ssh on the instance exited non-zero."""

    def __init__(self, message, step=None, command=None, returncode=None):
        super().__init__(message)
        self.step = step
        self.command = command
        self.returncode = returncode


class KeyGenerationError(HostDriverError):
    """The local SSH key pair could not be generated or read."""


class InvalidStateError(HostDriverError):
    """An operation needs a server that has not been created or was removed."""


class UnsupportedOperationError(HostDriverError):
    """The driver does not implement the requested operation."""
