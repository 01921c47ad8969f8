"""Language identification (``vrxs_lid``)."""

from collections.abc import Iterable
from typing import Self

from voxsigma.lists import LanguageList
from voxsigma.methods.base import (
    LANGUAGE_LIST_FILE,
    LID_DURATION,
    LID_THRESHOLD,
    LID_VERSION,
    MODEL,
    THREADS,
    Method,
    languages,
)
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("vrxs_lid")
class Lid(Method):
    """Identify the spoken language(s) of a recording."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            *super().define_parameters(),
            MODEL,
            LID_DURATION,
            LID_THRESHOLD,
            LID_VERSION,
            THREADS,
            LANGUAGE_LIST_FILE,
        ]

    def model(self, model: str) -> Self:
        return self.set("model", model)

    def duration(self, seconds: float) -> Self:
        """Seconds of audio used for identification."""
        return self.set("lid_duration", seconds)

    def threshold(self, threshold: float) -> Self:
        return self.set("lid_threshold", threshold)

    def version(self, version: str) -> Self:
        return self.set("lid_version", version)

    def threads(self, count: int) -> Self:
        return self.set("threads", count)

    def language_list_file(self, path: str) -> Self:
        return self.set("language_list_file", path)

    def language_list(self, entries: LanguageList | Iterable[str]) -> Self:
        return self._set_list("language_list_file", languages(entries))
