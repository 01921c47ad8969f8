"""Fluent builders for the VoxSigma methods.

Importing this package registers every method with
:class:`~voxsigma.registry.MethodRegistry`.
"""

from voxsigma.methods.align import Align
from voxsigma.methods.base import Method
from voxsigma.methods.dtmf import Dtmf
from voxsigma.methods.kws import Kws
from voxsigma.methods.lid import Lid
from voxsigma.methods.part import Part
from voxsigma.methods.service import Hello, Status
from voxsigma.methods.trans import Trans
from voxsigma.methods.xml2kar import Xml2Kar

__all__ = [
    "Align",
    "Dtmf",
    "Hello",
    "Kws",
    "Lid",
    "Method",
    "Part",
    "Status",
    "Trans",
    "Xml2Kar",
]
