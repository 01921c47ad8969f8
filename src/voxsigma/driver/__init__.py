"""Execution drivers: local binaries (CLI) and the remote REST API."""

from voxsigma.driver.base import AsyncHandle, Driver
from voxsigma.driver.cli import CliAsyncHandle, CliDriver
from voxsigma.driver.request import Request
from voxsigma.driver.response import Response
from voxsigma.driver.rest import RestAsyncHandle, RestDriver

__all__ = [
    "AsyncHandle",
    "CliAsyncHandle",
    "CliDriver",
    "Driver",
    "Request",
    "Response",
    "RestAsyncHandle",
    "RestDriver",
]
