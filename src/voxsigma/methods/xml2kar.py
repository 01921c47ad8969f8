"""Conversion of engine XML output to KAR format (``xml2kar``, CLI only)."""

from typing import Self

from voxsigma.driver.base import Driver
from voxsigma.driver.request import Request
from voxsigma.methods.base import FLAG, Method
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("xml2kar")
class Xml2Kar(Method):
    """Convert an XML result file; input and output paths are positional arguments."""

    def __init__(self, driver: Driver | None = None):
        super().__init__(driver)
        self._xml_file: str | None = None
        self._kar_file: str | None = None

    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [
            Parameter("verbose", "-v", "", FLAG),
            Parameter("working_dir", "-w:", ""),
        ]

    def xml_file(self, path: str) -> Self:
        self._xml_file = path
        return self

    def kar_file(self, path: str) -> Self:
        self._kar_file = path
        return self

    def working_dir(self, path: str) -> Self:
        return self.set("working_dir", path)

    def to_request(self) -> Request:
        self._positional_args = [p for p in (self._xml_file, self._kar_file) if p is not None]
        return super().to_request()
