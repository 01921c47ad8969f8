"""CLI driver: runs the VoxSigma binaries of a local installation.

Each request becomes one shell command::

    <bin>/<method> [options] [-f <audio> | -] [text file] [positional args]

Pipelines join several such commands with ``|``; every stage after the
first reads its input from standard input (``-``).
"""

import contextlib
import logging
import os
import shlex
import signal
import subprocess
import tempfile
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import IO

from voxsigma.driver.base import AsyncHandle, remove_temp_files
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response
from voxsigma.errors import ConfigurationError, DispatchError, WaitTimeoutError
from voxsigma.parameters import ParameterCollection, to_cli_args
from voxsigma.registry import MethodRegistry

logger = logging.getLogger(__name__)

ENV_PREFIX = "VRXS_"
TMP_ENV = "VRXS_TMP"

POLL_INTERVAL = 0.01  # seconds between liveness checks of an async process
TERMINATE_GRACE = 5.0  # seconds to wait after SIGTERM before SIGKILL
CHUNK_SIZE = 64 * 1024

STDIN_MARKER = "-"


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


class CliDriver:
    """Execute requests with the binaries found in ``bin_path``."""

    def __init__(self, bin_path: str | Path, tmp_dir: str | Path | None = None):
        """
        Initialize the CLI driver.

        Args:
            bin_path: Directory holding the VoxSigma binaries
            tmp_dir: Value for VRXS_TMP in child processes (overrides the inherited one)

        Raises:
            ConfigurationError: If ``bin_path`` is not a directory
        """
        self.bin_path = Path(bin_path)
        if not self.bin_path.is_dir():
            raise ConfigurationError(f"VoxSigma binary directory not found: {self.bin_path}")
        self.tmp_dir = str(tmp_dir) if tmp_dir is not None else None

    def supports_pipeline(self) -> bool:
        return True

    def execute(self, request: Request) -> Response:
        try:
            self._check_binary(request.method)
            process = self._spawn(self.to_cli(request))
            stdout, stderr = process.communicate(input=request.stdin_bytes)
            return Response.from_process(_decode(stdout), _decode(stderr), process.returncode)
        finally:
            remove_temp_files(request.temp_files)

    def execute_async(self, request: Request) -> "CliAsyncHandle":
        try:
            self._check_binary(request.method)
            process = self._spawn(self.to_cli(request))
        except DispatchError:
            remove_temp_files(request.temp_files)
            raise
        return CliAsyncHandle(process, stdin=request.stdin_bytes, temp_files=request.temp_files)

    def execute_pipeline(self, requests: Sequence[Request]) -> Response:
        """Run requests as one piped shell command.

        Only the first stage reads the audio file; the others read the
        previous stage's output from standard input.

        Raises:
            DispatchError: If the pipeline is empty or a binary is missing
        """
        if not requests:
            raise DispatchError("Pipeline requires at least one request")

        temp_files = [path for request in requests for path in request.temp_files]
        try:
            for request in requests:
                self._check_binary(request.method)
            process = self._spawn(self.to_cli_pipeline(requests))
            stdout, stderr = process.communicate(input=requests[0].stdin_bytes)
            return Response.from_process(
                _decode(stdout), _decode(stderr), process.returncode, what="Pipeline"
            )
        finally:
            remove_temp_files(temp_files)

    def to_cli(self, request: Request, use_stdin: bool = False) -> str:
        """Render the exact shell command ``execute`` runs for a request."""
        args = to_cli_args(request.parameters, self._definitions(request))

        if use_stdin:
            args.append(STDIN_MARKER)
        elif request.audio_file is not None:
            args.extend(["-f", shlex.quote(request.audio_file)])
        elif request.stdin_bytes is not None:
            args.append(STDIN_MARKER)

        if request.text_file is not None:
            args.append(shlex.quote(request.text_file))
        args.extend(shlex.quote(arg) for arg in request.positional_args)

        return " ".join([shlex.quote(str(self.binary_path(request.method))), *args])

    def to_cli_pipeline(self, requests: Sequence[Request]) -> str:
        """Render the piped shell command ``execute_pipeline`` runs."""
        return " | ".join(
            self.to_cli(request, use_stdin=index > 0) for index, request in enumerate(requests)
        )

    def binary_path(self, method: str) -> Path:
        return self.bin_path / method

    def environment(self) -> dict[str, str]:
        """Environment for child processes: only VRXS_* variables plus VRXS_TMP."""
        env = {key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)}
        if self.tmp_dir is not None:
            env[TMP_ENV] = self.tmp_dir
        else:
            env.setdefault(TMP_ENV, tempfile.gettempdir())
        return env

    def _definitions(self, request: Request) -> ParameterCollection:
        if request.definitions is not None:
            return request.definitions
        return MethodRegistry.definitions_for(request.method)

    def _check_binary(self, method: str) -> None:
        binary = self.binary_path(method)
        if not binary.is_file():
            raise DispatchError(f"VoxSigma binary not found: {binary}")
        if not os.access(binary, os.X_OK):
            raise DispatchError(f"VoxSigma binary is not executable: {binary}")

    def _spawn(self, command: str) -> subprocess.Popen:
        logger.debug("Running: %s", command)
        try:
            return subprocess.Popen(
                command,
                shell=True,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.environment(),
                start_new_session=True,
            )
        except OSError as e:
            raise DispatchError(f"Failed to start process: {command}: {e}") from e


class CliAsyncHandle(AsyncHandle):
    """Async handle wrapping a running local process.

    Output pipes are drained by background threads from the start, so a
    child producing large output never blocks on a full pipe.
    """

    def __init__(
        self,
        process: subprocess.Popen,
        stdin: bytes | None = None,
        temp_files: Sequence[str] = (),
    ):
        super().__init__(temp_files)
        self._process = process
        self._stdout: list[bytes] = []
        self._stderr: list[bytes] = []
        self._closed = False
        self._exited_at: float | None = None
        self._threads = [
            _start_thread(_feed, process.stdin, stdin),
            _start_thread(_drain, process.stdout, self._stdout),
            _start_thread(_drain, process.stderr, self._stderr),
        ]

    @property
    def id(self) -> str:
        return str(self._process.pid)

    def _poll(self) -> Response | None:
        if self._process.poll() is None:
            return None
        if self._exited_at is None:
            self._exited_at = time.monotonic()
        # A grandchild may still hold the pipes open after the child exits
        draining = any(thread.is_alive() for thread in self._threads)
        if draining and time.monotonic() - self._exited_at < TERMINATE_GRACE:
            return None
        return self._collect(join_timeout=0)

    def _wait(self, timeout: float | None) -> Response:
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._process.poll() is None:
            if deadline is not None and time.monotonic() >= deadline:
                raise WaitTimeoutError(f"Process {self.id} did not finish within {timeout}s")
            time.sleep(POLL_INTERVAL)
        return self._collect()

    def _cancel(self) -> Response:
        logger.debug("Terminating process group %s", self.id)
        with contextlib.suppress(ProcessLookupError):
            os.killpg(self._process.pid, signal.SIGTERM)
        try:
            self._process.wait(timeout=TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            with contextlib.suppress(ProcessLookupError):
                os.killpg(self._process.pid, signal.SIGKILL)
            self._process.wait()

        self._close()
        return Response.canceled_response(
            xml=_decode(b"".join(self._stdout)), exit_code=self._process.returncode
        )

    def _collect(self, join_timeout: float = TERMINATE_GRACE) -> Response:
        self._close(join_timeout)
        return Response.from_process(
            _decode(b"".join(self._stdout)),
            _decode(b"".join(self._stderr)),
            self._process.returncode,
        )

    def _close(self, join_timeout: float = TERMINATE_GRACE) -> None:
        """Join the pipe threads within one shared deadline, then close the pipes."""
        if self._closed:
            return
        self._closed = True
        deadline = time.monotonic() + join_timeout
        for thread in self._threads:
            thread.join(timeout=max(0.0, deadline - time.monotonic()))
        for stream in (self._process.stdin, self._process.stdout, self._process.stderr):
            if stream is not None:
                with contextlib.suppress(BrokenPipeError):
                    stream.close()


def _start_thread(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def _feed(stream: IO[bytes] | None, data: bytes | None) -> None:
    if stream is None:
        return
    try:
        if data:
            stream.write(data)
        stream.close()
    except (BrokenPipeError, ValueError) as e:
        # The child exited (or was canceled) before reading all of its input
        logger.debug("Standard input closed early: %s", e)


def _drain(stream: IO[bytes] | None, chunks: list[bytes]) -> None:
    if stream is None:
        return
    try:
        for chunk in iter(lambda: stream.read1(CHUNK_SIZE), b""):
            chunks.append(chunk)
    except (OSError, ValueError) as e:
        logger.debug("Output pipe closed early: %s", e)
