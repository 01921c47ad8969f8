"""Text-to-audio alignment (``vrbs_align``)."""

from typing import Self

from voxsigma.methods.base import FLAG, MODEL, QUALITY, Method
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("vrbs_align")
class Align(Method):
    """Align a transcript with its audio."""

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            *super().define_parameters(),
            MODEL,
            Parameter("speaker_segmentation", "-qs", "qsopt", FLAG),
            QUALITY,
        ]

    def model(self, model: str) -> Self:
        return self.set("model", model)

    def text_file(self, path: str) -> Self:
        self._text_file = path
        return self

    def speaker_segmentation(self, enabled: bool = True) -> Self:
        return self.set("speaker_segmentation", enabled)

    def quality(self, level: int) -> Self:
        return self.set("quality", level)
