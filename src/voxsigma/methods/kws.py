"""Keyword spotting (``vrxs_kws``)."""

from typing import Self

from voxsigma.lists import FileList, KeywordList
from voxsigma.methods.base import FILE, Method
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("vrxs_kws")
class Kws(Method):
    """Search keywords in one or more transcribed files.

    Keyword and input lists can be given as existing files or as
    :class:`KeywordList` / :class:`FileList` objects, which are written to
    temporary files when the request is built.
    """

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            *super().define_parameters(),
            Parameter("keyword_list_file", "-kl", "", FILE),
            Parameter("input_list_file", "-kf", "", FILE),
            Parameter("context", "-kc", ""),
        ]

    def keyword_list_file(self, path: str) -> Self:
        return self.set("keyword_list_file", path)

    def keyword_list(self, keywords: KeywordList) -> Self:
        return self._set_list("keyword_list_file", keywords)

    def input_list_file(self, path: str) -> Self:
        return self.set("input_list_file", path)

    def input_files(self, files: FileList) -> Self:
        return self._set_list("input_list_file", files)

    def context(self, seconds: int) -> Self:
        """Seconds of context reported around each hit."""
        return self.set("context", seconds)
