"""Credentials for the VoxSigma REST API."""

import shlex
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx


class Credential(Protocol):
    """Applies authentication to an outgoing request."""

    def apply_to(self, headers: dict[str, str], options: dict[str, Any]) -> None:
        """Add authentication to request headers and/or httpx client options."""
        ...

    def to_curl_args(self) -> list[str]:
        """Equivalent curl arguments, shell-quoted."""
        ...


@dataclass(frozen=True)
class ApiKeyCredential:
    """API key sent in the ``api-key`` header."""

    api_key: str = field(repr=False)

    def apply_to(self, headers: dict[str, str], options: dict[str, Any]) -> None:
        headers["api-key"] = self.api_key

    def to_curl_args(self) -> list[str]:
        return ["-H", shlex.quote(f"api-key: {self.api_key}")]


@dataclass(frozen=True)
class BasicCredential:
    """HTTP Basic authentication with a user name and password."""

    username: str
    password: str = field(repr=False)

    def apply_to(self, headers: dict[str, str], options: dict[str, Any]) -> None:
        options["auth"] = httpx.BasicAuth(self.username, self.password)

    def to_curl_args(self) -> list[str]:
        return ["-u", shlex.quote(f"{self.username}:{self.password}")]
