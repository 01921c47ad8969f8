"""Pytest configuration and shared fixtures."""

import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from voxsigma.auth import ApiKeyCredential
from voxsigma.driver.cli import CliDriver
from voxsigma.driver.rest import RestDriver

BASE_URL = "https://vox.example.com"

# Child processes only inherit VRXS_* variables, so scripts set their own PATH
# before calling anything that is not a shell builtin.
SCRIPT_HEADER = "#!/bin/sh\nPATH=/usr/local/bin:/usr/bin:/bin\n"


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for a VoxSigma installation's bin/."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_binary(bin_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing an executable shell script into the bin directory."""

    def factory(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(SCRIPT_HEADER + body + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture
def cli_driver(bin_dir: Path, tmp_path: Path) -> CliDriver:
    return CliDriver(bin_dir, tmp_dir=tmp_path)


@pytest.fixture
def rest_driver() -> RestDriver:
    return RestDriver(BASE_URL, ApiKeyCredential("secret"), poll_interval=0.01)


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    """A small file used as audio input."""
    path = tmp_path / "audio.wav"
    path.write_bytes(b"RIFF....WAVEfmt ")
    return path
