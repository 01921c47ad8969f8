"""Speech-to-text transcription (``vrxs_trans``)."""

from collections.abc import Iterable
from typing import Self

from voxsigma.lists import LanguageList
from voxsigma.methods.base import (
    DUAL_CHANNEL,
    FILE,
    FLAG,
    FORCE_LANGUAGE,
    LANGUAGE_LIST_FILE,
    LID_DURATION,
    LID_THRESHOLD,
    LID_VERSION,
    MAX_SPEAKERS,
    MODEL,
    NO_PARTITIONING,
    QUALITY,
    THREADS,
    Method,
    languages,
)
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("vrxs_trans")
class Trans(Method):
    """Transcribe an audio file, with diarization and optional language detection."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            *super().define_parameters(),
            MODEL,
            FORCE_LANGUAGE,
            MAX_SPEAKERS,
            LID_DURATION,
            LID_THRESHOLD,
            LID_VERSION,
            DUAL_CHANNEL,
            NO_PARTITIONING,
            QUALITY,
            THREADS,
            Parameter("timeout", "-e", ""),
            Parameter("with_dtmf", "-x", "", FLAG),
            Parameter("vocabulary_file", "-a", "vocfile", FILE),
            LANGUAGE_LIST_FILE,
            Parameter("user_model", "-u:", "usermodel"),
        ]

    def model(self, model: str) -> Self:
        """Language/model code, e.g. "fre", "eng-usa"."""
        return self.set("model", model)

    def force_language(self, force: bool = True) -> Self:
        """Use the model language as-is, without automatic language detection."""
        return self.set("force_language", force)

    def max_speakers(self, k: int) -> Self:
        return self.set("max_speakers", k)

    def lid_duration(self, seconds: float) -> Self:
        return self.set("lid_duration", seconds)

    def lid_threshold(self, threshold: float) -> Self:
        return self.set("lid_threshold", threshold)

    def lid_version(self, version: str) -> Self:
        return self.set("lid_version", version)

    def dual_channel(self, enabled: bool = True) -> Self:
        """Process each channel independently as a separate speaker."""
        return self.set("dual_channel", enabled)

    def no_partitioning(self, enabled: bool = True) -> Self:
        """Treat the whole recording as a single speaker."""
        return self.set("no_partitioning", enabled)

    def quality(self, level: int) -> Self:
        """Quality level (0=default, 1=fast, 2=best)."""
        return self.set("quality", level)

    def threads(self, count: int) -> Self:
        """Number of threads (CLI only)."""
        return self.set("threads", count)

    def timeout(self, seconds: int) -> Self:
        """Engine-side processing timeout (CLI only)."""
        return self.set("timeout", seconds)

    def with_dtmf(self, enabled: bool = True) -> Self:
        """Also detect DTMF tones (CLI only)."""
        return self.set("with_dtmf", enabled)

    def vocabulary_file(self, path: str) -> Self:
        return self.set("vocabulary_file", path)

    def language_list_file(self, path: str) -> Self:
        return self.set("language_list_file", path)

    def language_list(self, entries: LanguageList | Iterable[str]) -> Self:
        return self._set_list("language_list_file", languages(entries))

    def user_model(self, name: str) -> Self:
        """Adapted language model."""
        return self.set("user_model", name)
