"""Base class and shared parameter definitions for the method builders.

A builder collects parameters for one VoxSigma method and turns them into
an immutable :class:`~voxsigma.driver.request.Request` with
:meth:`Method.to_request`. Builders are mutable and meant to be used by a
single owner; hand the resulting Request (or Response) to other threads
instead.
"""

from collections.abc import Iterable
from functools import cache
from typing import ClassVar, Self

from voxsigma.driver.base import AsyncHandle, Driver, remove_temp_files
from voxsigma.driver.cli import CliDriver
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response
from voxsigma.driver.rest import RestDriver
from voxsigma.errors import DispatchError
from voxsigma.lists import LanguageList, ListFile
from voxsigma.parameters import Parameter, ParameterCollection, ParameterType, ParameterValue

FLAG = ParameterType.FLAG
FILE = ParameterType.FILE

COMMON_PARAMETERS = (
    Parameter("verbose", "-v", "verbose", FLAG),
    Parameter("priority", "-p:", "priority"),
    Parameter("output_file", "-o:", ""),
    Parameter("tmp_dir", "-t:", ""),
)

# Definitions reused by several methods
MODEL = Parameter("model", "-l", "model", forced_by="force_language")
FORCE_LANGUAGE = Parameter("force_language", "", "forcelang", FLAG)
MAX_SPEAKERS = Parameter("max_speakers", "-k", "kopt")
CHANNEL = Parameter("channel", "-n", "nopt")
LID_DURATION = Parameter("lid_duration", "-dl", "dlopt")
LID_THRESHOLD = Parameter("lid_threshold", "-ql", "qlopt")
LID_VERSION = Parameter("lid_version", "-r", "ropt")
DUAL_CHANNEL = Parameter("dual_channel", "-q", "qopt", FLAG, flag_value="d")
NO_PARTITIONING = Parameter("no_partitioning", "-q", "qopt", FLAG, flag_value="p")
QUALITY = Parameter("quality", "-q", "qopt")
THREADS = Parameter("threads", "-h", "")
LANGUAGE_LIST_FILE = Parameter("language_list_file", "-m", "llfile", FILE)


class Method:
    """Fluent builder for one VoxSigma method."""

    method_name: ClassVar[str] = ""

    def __init__(self, driver: Driver | None = None):
        self._parameters: dict[str, ParameterValue] = {}
        self._lists: dict[str, ListFile] = {}
        self._audio_file: str | None = None
        self._audio_content: bytes | None = None
        self._text_file: str | None = None
        self._positional_args: list[str] = []
        self._driver = driver

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        """Parameters supported by this method, in emission order."""
        return list(COMMON_PARAMETERS)

    @classmethod
    @cache
    def parameters(cls) -> ParameterCollection:
        """The method's parameter collection, built once per class."""
        return ParameterCollection(cls.define_parameters())

    def set(self, name: str, value: ParameterValue | None) -> Self:
        """Set a parameter by semantic name (None removes it)."""
        self._lists.pop(name, None)
        if value is None:
            self._parameters.pop(name, None)
        else:
            self._parameters[name] = value
        return self

    def _set_list(self, name: str, entries: ListFile) -> Self:
        self._parameters.pop(name, None)
        self._lists[name] = entries
        return self

    def file(self, path: str) -> Self:
        self._audio_file = path
        return self

    def audio_content(self, content: bytes) -> Self:
        self._audio_content = content
        return self

    def verbose(self, enabled: bool = True) -> Self:
        return self.set("verbose", enabled)

    def output_file(self, path: str) -> Self:
        """Output file path (CLI only)."""
        return self.set("output_file", path)

    def tmp_dir(self, path: str) -> Self:
        """Temporary directory (CLI only); also receives generated list files."""
        return self.set("tmp_dir", path)

    def priority(self, priority: int) -> Self:
        return self.set("priority", priority)

    def with_driver(self, driver: Driver) -> Self:
        self._driver = driver
        return self

    @property
    def parameter_values(self) -> dict[str, ParameterValue]:
        return dict(self._parameters)

    @property
    def audio_file(self) -> str | None:
        return self._audio_file

    def to_request(self) -> Request:
        """Snapshot the builder into a Request.

        List objects are written to temporary files, recorded in
        ``Request.temp_files`` so the driver can delete them afterwards.
        """
        parameters = dict(self._parameters)
        temp_files: list[str] = []
        tmp_dir = self._parameters.get("tmp_dir")
        for name, entries in self._lists.items():
            path = entries.write_to_temp_file(str(tmp_dir) if tmp_dir is not None else None)
            parameters[name] = path
            temp_files.append(path)

        return Request(
            method=self.method_name,
            parameters=parameters,
            definitions=self.parameters(),
            audio_file=self._audio_file,
            audio_content=self._audio_content,
            text_file=self._text_file,
            positional_args=tuple(self._positional_args),
            temp_files=tuple(temp_files),
        )

    def run(self, driver: Driver | None = None) -> Response:
        """Execute synchronously.

        Raises:
            DispatchError: If no driver is bound or the request cannot be dispatched
        """
        return self._resolve_driver(driver, "run").execute(self.to_request())

    def run_async(self, driver: Driver | None = None) -> AsyncHandle:
        return self._resolve_driver(driver, "run_async").execute_async(self.to_request())

    def to_cli(self) -> str:
        """Equivalent shell command (CLI driver only)."""
        if not isinstance(self._driver, CliDriver):
            raise DispatchError("to_cli() is only available with the CLI driver")
        request = self.to_request()
        try:
            return self._driver.to_cli(request)
        finally:
            remove_temp_files(request.temp_files)

    def to_curl(self, async_: bool = False) -> str:
        """Equivalent curl command (REST driver only)."""
        if not isinstance(self._driver, RestDriver):
            raise DispatchError("to_curl() is only available with the REST driver")
        request = self.to_request()
        try:
            return self._driver.to_curl(request, async_=async_)
        finally:
            remove_temp_files(request.temp_files)

    def _resolve_driver(self, driver: Driver | None, action: str) -> Driver:
        driver = driver or self._driver
        if driver is None:
            raise DispatchError(
                f"No driver provided. Use with_driver() or pass a driver to {action}()."
            )
        return driver


def languages(entries: LanguageList | Iterable[str]) -> LanguageList:
    """Coerce an iterable of language codes to a LanguageList."""
    return entries if isinstance(entries, LanguageList) else LanguageList(entries)
