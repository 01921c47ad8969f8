"""Exception hierarchy for the VoxSigma SDK.

Anything that prevents a request from being dispatched is raised. The
outcome of a dispatched request, successful or not, is a
:class:`~voxsigma.driver.response.Response` value instead.
"""


class VoxSigmaError(Exception):
    """Base class for all SDK errors."""


class ConfigurationError(VoxSigmaError):
    """Driver or settings are incomplete (missing binary dir, base URL, credential)."""


class DispatchError(VoxSigmaError):
    """A request could not be dispatched to the engine."""


class WaitTimeoutError(VoxSigmaError, TimeoutError):
    """An async handle did not settle before the requested deadline."""


class RequestFailedError(VoxSigmaError):
    """Raised by ``Response.raise_for_error()`` for an unsuccessful response."""

    def __init__(
        self,
        message: str,
        error_code: int | None = None,
        exit_code: int | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.exit_code = exit_code
        self.http_status = http_status
