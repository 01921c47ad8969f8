"""Normalized outcome of a VoxSigma method invocation."""

import re
from dataclasses import dataclass

from voxsigma.errors import RequestFailedError

# Status codes the engine uses while an async session has not settled yet
IN_PROGRESS = 320
IN_QUEUE = 329
PENDING_CODES = frozenset({IN_PROGRESS, IN_QUEUE})

CANCELED_MESSAGE = "Operation canceled"

_ERROR_CODE_RE = re.compile(r'<Error\s+code="(\d+)"')
_ERROR_MESSAGE_RE = re.compile(r"<Error[^>]*>([^<]+)</Error>")
_SESSION_RE = re.compile(r"<Session>([^<]+)</Session>")


def extract_error_code(xml: str) -> int | None:
    """Numeric code of the ``<Error code="NNN">`` marker, if present."""
    match = _ERROR_CODE_RE.search(xml)
    return int(match.group(1)) if match else None


def extract_error_message(xml: str) -> str | None:
    """Text enclosed by the ``<Error>`` marker, if present."""
    match = _ERROR_MESSAGE_RE.search(xml)
    return match.group(1).strip() if match else None


def extract_session_id(xml: str) -> str | None:
    """Session token of an async submission (``<Session>token</Session>``)."""
    match = _SESSION_RE.search(xml)
    return match.group(1).strip() if match else None


@dataclass(frozen=True)
class Response:
    """Result of a method call.

    ``xml`` holds the engine payload. It is kept on failures too, since
    the engine sometimes emits partial output before failing.
    """

    success: bool
    xml: str = ""
    exit_code: int | None = None
    http_status: int | None = None
    error: str | None = None
    error_code: int | None = None
    canceled: bool = False

    def __post_init__(self):
        if self.success and (self.error is not None or self.error_code is not None):
            raise ValueError("A successful response cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("A failed response requires an error message")

    @classmethod
    def ok(
        cls,
        xml: str,
        exit_code: int | None = None,
        http_status: int | None = None,
    ) -> "Response":
        return cls(success=True, xml=xml, exit_code=exit_code, http_status=http_status)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: int | None = None,
        exit_code: int | None = None,
        http_status: int | None = None,
        xml: str = "",
    ) -> "Response":
        return cls(
            success=False,
            xml=xml,
            exit_code=exit_code,
            http_status=http_status,
            error=error,
            error_code=error_code,
        )

    @classmethod
    def canceled_response(cls, xml: str = "", exit_code: int | None = None) -> "Response":
        return cls(
            success=False,
            xml=xml,
            exit_code=exit_code,
            error=CANCELED_MESSAGE,
            canceled=True,
        )

    @classmethod
    def from_process(
        cls, stdout: str, stderr: str, exit_code: int, what: str = "Process"
    ) -> "Response":
        """Map a finished process to a response (exit code 0 is success)."""
        if exit_code == 0:
            return cls.ok(stdout, exit_code=exit_code)
        return cls.failure(
            error=stderr.strip() or f"{what} failed with exit code {exit_code}",
            error_code=exit_code,
            exit_code=exit_code,
            xml=stdout,
        )

    @classmethod
    def from_http(cls, body: str, http_status: int) -> "Response":
        """Map an HTTP reply to a response.

        HTTP 200 without an embedded ``<Error>`` marker is success.
        """
        error_code = extract_error_code(body)
        if http_status == 200 and error_code is None:
            return cls.ok(body, http_status=http_status)
        return cls.failure(
            error=extract_error_message(body) or "Request failed",
            error_code=error_code,
            http_status=http_status,
            xml=body,
        )

    @property
    def pending(self) -> bool:
        """True for the "in progress" / "in queue" status of an async session."""
        return self.error_code in PENDING_CODES

    def raise_for_error(self) -> "Response":
        """Raise :class:`RequestFailedError` if the call failed, else return self."""
        if not self.success:
            raise RequestFailedError(
                self.error or "Request failed",
                error_code=self.error_code,
                exit_code=self.exit_code,
                http_status=self.http_status,
            )
        return self
