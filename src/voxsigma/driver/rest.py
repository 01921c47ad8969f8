"""REST driver: runs VoxSigma methods through the remote HTTP API."""

import contextlib
import logging
import shlex
import tempfile
import time
from collections.abc import Iterator
from pathlib import Path
from typing import IO, Any

import httpx

from voxsigma.auth import Credential
from voxsigma.driver.base import AsyncHandle, remove_temp_files
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response, extract_session_id
from voxsigma.errors import ConfigurationError, DispatchError, WaitTimeoutError
from voxsigma.parameters import ParameterCollection, rest_file_fields, to_rest_fields
from voxsigma.registry import MethodRegistry

logger = logging.getLogger(__name__)

ENDPOINT = "/voxsigma"
SUBMIT_TIMEOUT = 60.0  # async submission only; synchronous calls never time out
STATUS_TIMEOUT = 30.0
POLL_INTERVAL = 2.0

ASYNC_FIELD = "async"

# (field, (filename, content)); form fields have no filename
Part = tuple[str, tuple[str | None, IO[bytes] | str]]


class RestDriver:
    """Execute requests against a VoxSigma REST endpoint."""

    def __init__(
        self,
        base_url: str | None,
        credential: Credential | None,
        verify: bool = True,
        tmp_dir: str | None = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        """
        Initialize the REST driver.

        Args:
            base_url: Service root, e.g. "https://rest.vocapia.com:8093"
            credential: API key or basic auth credential
            verify: Verify the server TLS certificate
            tmp_dir: Where raw audio content is staged before upload
            poll_interval: Seconds between status checks of async sessions

        Raises:
            ConfigurationError: If base_url or credential is missing
        """
        if not base_url:
            raise ConfigurationError("REST driver requires a base URL")
        if credential is None:
            raise ConfigurationError("REST driver requires a credential")

        self.base_url = base_url.rstrip("/")
        self.credential = credential
        self.verify = verify
        self.tmp_dir = tmp_dir
        self.poll_interval = poll_interval

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ENDPOINT}"

    def supports_pipeline(self) -> bool:
        return False

    def execute(self, request: Request) -> Response:
        try:
            with self._multipart(request) as parts:
                reply = self._send(
                    "POST",
                    params={"method": request.method},
                    parts=parts,
                    timeout=None,
                )
        except httpx.HTTPError as e:
            logger.warning("VoxSigma %s request failed: %s", request.method, e)
            return Response.failure(str(e) or "HTTP request failed")
        finally:
            remove_temp_files(request.temp_files)

        return Response.from_http(reply.text, reply.status_code)

    def execute_async(self, request: Request) -> "RestAsyncHandle":
        """Submit a request with ``async=1`` and return a polling handle.

        Raises:
            DispatchError: If the submission fails or no session token comes back
        """
        try:
            with self._multipart(request, async_=True) as parts:
                reply = self._send(
                    "POST",
                    params={"method": request.method},
                    parts=parts,
                    timeout=SUBMIT_TIMEOUT,
                )
        except httpx.HTTPError as e:
            detail = str(e) or "Unknown error"
            raise DispatchError(f"Failed to start async request: {detail}") from e
        finally:
            remove_temp_files(request.temp_files)

        session_id = extract_session_id(reply.text)
        if session_id is None:
            raise DispatchError(f"Failed to get session ID from async response: {reply.text}")

        logger.debug("Started async %s session %s", request.method, session_id)
        return RestAsyncHandle(session_id, self)

    def check_status(self, session_id: str) -> Response:
        """Query the status of an async session once."""
        try:
            reply = self._send(
                "GET",
                params={"method": "status", "session": session_id},
                timeout=STATUS_TIMEOUT,
            )
        except httpx.HTTPError as e:
            logger.warning("Status check for session %s failed: %s", session_id, e)
            return Response.failure(str(e) or "HTTP request failed")
        return Response.from_http(reply.text, reply.status_code)

    def to_curl(self, request: Request, async_: bool = False) -> str:
        """Render the curl command equivalent to executing a request."""
        parts = ["curl"]
        if not self.verify:
            parts.append("-k")
        parts.extend(self.credential.to_curl_args())

        forms = [f"{name}={value}" for name, value in self._fields(request, async_).items()]
        forms.extend(f"{name}=@{path}" for name, path in self._file_paths(request).items())
        if forms:
            for form in forms:
                parts.extend(["-F", shlex.quote(form)])
        else:
            parts.extend(["-X", "POST"])

        url = httpx.URL(self.endpoint, params={"method": request.method})
        parts.append(shlex.quote(str(url)))
        return " ".join(parts)

    def _definitions(self, request: Request) -> ParameterCollection:
        if request.definitions is not None:
            return request.definitions
        return MethodRegistry.definitions_for(request.method)

    def _fields(self, request: Request, async_: bool = False) -> dict[str, str]:
        fields = to_rest_fields(request.parameters, self._definitions(request))
        if async_:
            fields[ASYNC_FIELD] = "1"
        return fields

    def _file_paths(self, request: Request) -> dict[str, str]:
        paths: dict[str, str] = {}
        if request.audio_file is not None:
            paths["audiofile"] = request.audio_file
        elif request.audio_content is not None:
            paths["audiofile"] = "-"
        if request.text_file is not None:
            paths["textfile"] = request.text_file
        paths.update(rest_file_fields(request.parameters, self._definitions(request)))
        return paths

    @contextlib.contextmanager
    def _multipart(self, request: Request, async_: bool = False) -> Iterator[list[Part]]:
        """Build the multipart parts of a call, keeping files open while it runs.

        Form fields come first as parts without a filename, then file parts.
        Raw audio content is staged in a temporary file that is deleted
        when the call returns.
        """
        parts: list[Part] = [
            (name, (None, value)) for name, value in self._fields(request, async_).items()
        ]

        with contextlib.ExitStack() as stack:
            if request.audio_file is not None:
                parts.append(("audiofile", _open_part(stack, request.audio_file, "Audio")))
            elif request.audio_content is not None:
                staged = stack.enter_context(
                    tempfile.NamedTemporaryFile(dir=self.tmp_dir, prefix="voxsigma_")
                )
                staged.write(request.audio_content)
                staged.flush()
                staged.seek(0)
                parts.append(("audiofile", (Path(staged.name).name, staged)))

            if request.text_file is not None:
                parts.append(("textfile", _open_part(stack, request.text_file, "Text")))

            file_fields = rest_file_fields(request.parameters, self._definitions(request))
            for name, path in file_fields.items():
                parts.append((name, _open_part(stack, path, name)))

            yield parts

    def _send(
        self,
        http_method: str,
        params: dict[str, str],
        parts: list[Part] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        options: dict[str, Any] = {"verify": self.verify, "timeout": timeout}
        self.credential.apply_to(headers, options)

        logger.debug("%s %s %s", http_method, self.endpoint, params)
        with httpx.Client(**options) as client:
            return client.request(
                http_method,
                self.endpoint,
                params=params,
                files=parts or None,
                headers=headers,
            )


def _open_part(stack: contextlib.ExitStack, path: str, label: str) -> tuple[str, IO[bytes]]:
    if not Path(path).is_file():
        raise DispatchError(f"{label} file not found: {path}")
    return Path(path).name, stack.enter_context(open(path, "rb"))


class RestAsyncHandle(AsyncHandle):
    """Async handle polling the status of a remote session.

    Status codes 320 (in progress) and 329 (in queue) keep the handle
    running; any other outcome settles it.
    """

    def __init__(self, session_id: str, driver: RestDriver):
        super().__init__()
        self._session_id = session_id
        self._driver = driver

    @property
    def id(self) -> str:
        return self._session_id

    def _poll(self) -> Response | None:
        response = self._driver.check_status(self._session_id)
        return None if response.pending else response

    def _wait(self, timeout: float | None) -> Response:
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            response = self._driver.check_status(self._session_id)
            if not response.pending:
                return response

            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise WaitTimeoutError(
                        f"Session {self._session_id} did not finish within {timeout}s"
                    )
                time.sleep(min(self._driver.poll_interval, remaining))
            else:
                time.sleep(self._driver.poll_interval)

    def _cancel(self) -> Response:
        # The API has no cancel call; the session expires server-side
        logger.debug("Abandoning session %s", self._session_id)
        return Response.canceled_response()
