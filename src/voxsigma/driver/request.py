"""Driver-agnostic description of a VoxSigma method invocation."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from voxsigma.parameters import ParameterCollection, ParameterValue


@dataclass(frozen=True)
class Request:
    """Everything needed to run one method, whichever driver executes it.

    Requests are values: the ``with_*`` helpers return a new Request.
    """

    method: str
    parameters: Mapping[str, ParameterValue] = field(default_factory=dict)
    definitions: ParameterCollection | None = None
    audio_file: str | None = None
    audio_content: bytes | None = None  # ignored when audio_file is set
    text_file: str | None = None  # alignment transcript
    stdin: str | bytes | None = None
    positional_args: tuple[str, ...] = ()
    temp_files: tuple[str, ...] = ()  # deleted by the driver once the call settles

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))
        object.__setattr__(self, "positional_args", tuple(self.positional_args))
        object.__setattr__(self, "temp_files", tuple(self.temp_files))

    def with_parameters(self, parameters: Mapping[str, Any]) -> "Request":
        return replace(self, parameters={**self.parameters, **parameters})

    def with_audio_file(self, audio_file: str) -> "Request":
        return replace(self, audio_file=audio_file, audio_content=None)

    def with_audio_content(self, audio_content: bytes) -> "Request":
        return replace(self, audio_file=None, audio_content=audio_content)

    def with_text_file(self, text_file: str) -> "Request":
        return replace(self, text_file=text_file)

    def with_stdin(self, stdin: str | bytes) -> "Request":
        return replace(self, stdin=stdin)

    def with_positional_args(self, *args: str) -> "Request":
        return replace(self, positional_args=args)

    @property
    def stdin_bytes(self) -> bytes | None:
        """Content to feed to a local process on standard input, if any."""
        if self.stdin is not None:
            return self.stdin.encode("utf-8") if isinstance(self.stdin, str) else self.stdin
        if self.audio_file is None:
            return self.audio_content
        return None
