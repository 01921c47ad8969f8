"""Speaker partitioning / diarization (``vrxs_part``)."""

from typing import Self

from voxsigma.methods.base import (
    CHANNEL,
    DUAL_CHANNEL,
    FILE,
    FORCE_LANGUAGE,
    MAX_SPEAKERS,
    MODEL,
    THREADS,
    Method,
)
from voxsigma.parameters import Parameter, ParameterValue
from voxsigma.registry import register_method

# Both write -k / kopt, so only one of them may be set
_EXCLUSIVE = {"max_speakers": "speaker_range", "speaker_range": "max_speakers"}


@register_method("vrxs_part")
class Part(Method):
    """Split a recording into speaker turns."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            *super().define_parameters(),
            MODEL,
            FORCE_LANGUAGE,
            MAX_SPEAKERS,
            Parameter("speaker_range", "-k", "kopt"),
            CHANNEL,
            DUAL_CHANNEL,
            THREADS,
            Parameter("speaker_list_file", "-sl", "slfile", FILE),
            Parameter("speaker_model_set", "-j", "", FILE),
        ]

    def set(self, name: str, value: ParameterValue | None) -> Self:
        """Set a parameter; ``max_speakers`` and ``speaker_range`` replace each other."""
        other = _EXCLUSIVE.get(name)
        if other is not None and value is not None:
            super().set(other, None)
        return super().set(name, value)

    def model(self, model: str) -> Self:
        return self.set("model", model)

    def max_speakers(self, k: int) -> Self:
        return self.set("max_speakers", k)

    def speaker_range(self, minimum: int, maximum: int) -> Self:
        """Expected number of speakers, rendered as "min:max"."""
        return self.set("speaker_range", f"{minimum}:{maximum}")

    def channel(self, n: int) -> Self:
        return self.set("channel", n)

    def dual_channel(self, enabled: bool = True) -> Self:
        return self.set("dual_channel", enabled)

    def threads(self, count: int) -> Self:
        return self.set("threads", count)

    def speaker_list_file(self, path: str) -> Self:
        return self.set("speaker_list_file", path)

    def speaker_model_set(self, path: str) -> Self:
        """Speaker model set (CLI only)."""
        return self.set("speaker_model_set", path)
