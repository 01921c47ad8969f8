"""Pydantic models for voxsigma.yaml configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from voxsigma.auth import ApiKeyCredential, BasicCredential, Credential


class CliConfig(BaseModel):
    """Local installation used by the CLI driver."""

    root: str = Field(default="/usr/local/vrxs", description="VoxSigma installation root")
    bin: str | None = Field(default=None, description="Binary directory (defaults to <root>/bin)")
    tmp: str = Field(default="/tmp", description="Temporary directory passed as VRXS_TMP")

    def bin_path(self) -> Path:
        """Directory holding the VoxSigma binaries."""
        return Path(self.bin) if self.bin else Path(self.root) / "bin"


class RestConfig(BaseModel):
    """Remote endpoint used by the REST driver."""

    base_url: str | None = Field(default=None, description="Service root URL")
    api_key: str | None = Field(default=None, description="API key (takes precedence)")
    username: str | None = Field(default=None, description="Basic auth user name")
    password: str | None = Field(default=None, description="Basic auth password")
    verify_ssl: bool = Field(default=True, description="Verify the server TLS certificate")
    poll_interval: float = Field(
        default=2.0, description="Seconds between async status checks", gt=0
    )

    def credential(self) -> Credential | None:
        """Credential built from the configured secrets, if any."""
        if self.api_key:
            return ApiKeyCredential(self.api_key)
        if self.username and self.password is not None:
            return BasicCredential(self.username, self.password)
        return None


class VoxSigmaConfig(BaseModel):
    """Root configuration model."""

    driver: Literal["cli", "rest"] = Field(default="cli", description="Execution driver")
    cli: CliConfig = Field(default_factory=CliConfig)
    rest: RestConfig = Field(default_factory=RestConfig)
