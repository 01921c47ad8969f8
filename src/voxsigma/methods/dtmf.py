"""DTMF tone detection (``vrxs_dtmf``)."""

from typing import Self

from voxsigma.methods.base import CHANNEL, Method
from voxsigma.parameters import Parameter
from voxsigma.registry import register_method


@register_method("vrxs_dtmf")
class Dtmf(Method):
    @classmethod
    def define_parameters(cls) -> list[Parameter]:
        return [*super().define_parameters(), CHANNEL]

    def channel(self, n: int) -> Self:
        return self.set("channel", n)
