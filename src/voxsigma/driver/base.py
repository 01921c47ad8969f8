"""Driver protocol and the async handle shared by both transports."""

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Protocol

from voxsigma.driver.request import Request
from voxsigma.driver.response import Response

logger = logging.getLogger(__name__)


class Driver(Protocol):
    """Protocol for execution transports (local binaries or REST API)."""

    def execute(self, request: Request) -> Response:
        """Run a request and block until it has settled."""
        ...

    def execute_async(self, request: Request) -> "AsyncHandle":
        """Start a request and return immediately.

        Raises:
            DispatchError: If the request could not be started
        """
        ...

    def supports_pipeline(self) -> bool:
        """Whether several requests can be chained into one piped command."""
        ...


class AsyncHandle(ABC):
    """A running operation: a local process or a remote session.

    The handle settles exactly once. ``wait()`` memoizes the response and
    returns the same object on every later call without touching the
    transport again. After ``cancel()``, ``wait()`` returns a canceled
    failure (``Response.canceled`` is True).
    """

    def __init__(self, temp_files: Iterable[str] = ()):
        self._result: Response | None = None
        self._temp_files = tuple(temp_files)

    @property
    @abstractmethod
    def id(self) -> str:
        """Process id (CLI) or session token (REST)."""

    @abstractmethod
    def _poll(self) -> Response | None:
        """Check once; return the final response if settled, else None."""

    @abstractmethod
    def _wait(self, timeout: float | None) -> Response:
        """Block until settled.

        Raises:
            WaitTimeoutError: If ``timeout`` seconds elapse first
        """

    @abstractmethod
    def _cancel(self) -> Response:
        """Stop the operation and return the canceled response."""

    def is_running(self) -> bool:
        if self._result is not None:
            return False
        result = self._poll()
        if result is None:
            return True
        self._settle(result)
        return False

    def is_finished(self) -> bool:
        return not self.is_running()

    def wait(self, timeout: float | None = None) -> Response:
        """Wait for the operation to finish.

        Args:
            timeout: Maximum seconds to wait, None to block indefinitely

        Returns:
            The final response (identical on repeated calls)

        Raises:
            WaitTimeoutError: If the deadline passes before the operation settles
        """
        if self._result is None:
            self._settle(self._wait(timeout))
        return self._result

    def cancel(self) -> None:
        """Cancel the operation. No-op once the handle has settled."""
        if self._result is None:
            self._settle(self._cancel())

    def _settle(self, response: Response) -> None:
        self._result = response
        remove_temp_files(self._temp_files)


def remove_temp_files(paths: Iterable[str]) -> None:
    """Delete temporary files created for a request."""
    for path in paths:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete temporary file %s: %s", path, e)
