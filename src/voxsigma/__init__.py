"""VoxSigma - Python client for the VoxSigma speech-processing engine.

The same fluent API drives a local installation (CLI driver) or a remote
REST endpoint (REST driver).

Key modules:

- :mod:`voxsigma.client` - ``VoxSigma`` entry point
- :mod:`voxsigma.methods` - Builders for transcription, diarization, language identification...
- :mod:`voxsigma.driver` - CLI and REST drivers, requests, responses and async handles
- :mod:`voxsigma.parameters` - Parameter definitions and their CLI/REST translation
- :mod:`voxsigma.pipeline` - Piped execution of several methods (CLI only)
- :mod:`voxsigma.config` - YAML and environment configuration
"""

__version__ = "0.1.0"

from voxsigma.auth import ApiKeyCredential, BasicCredential, Credential
from voxsigma.client import VoxSigma
from voxsigma.driver import AsyncHandle, CliDriver, Request, Response, RestDriver
from voxsigma.errors import (
    ConfigurationError,
    DispatchError,
    RequestFailedError,
    VoxSigmaError,
    WaitTimeoutError,
)
from voxsigma.lists import FileList, Keyword, KeywordList, LanguageList
from voxsigma.pipeline import Pipeline

__all__ = [
    "ApiKeyCredential",
    "AsyncHandle",
    "BasicCredential",
    "CliDriver",
    "ConfigurationError",
    "Credential",
    "DispatchError",
    "FileList",
    "Keyword",
    "KeywordList",
    "LanguageList",
    "Pipeline",
    "Request",
    "RequestFailedError",
    "Response",
    "RestDriver",
    "VoxSigma",
    "VoxSigmaError",
    "WaitTimeoutError",
    "__version__",
]
