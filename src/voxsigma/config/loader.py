"""Configuration loading, validation and driver construction."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from voxsigma.config.schema import CliConfig, RestConfig, VoxSigmaConfig
from voxsigma.driver.base import Driver
from voxsigma.driver.cli import CliDriver
from voxsigma.driver.rest import RestDriver
from voxsigma.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".voxsigma" / "voxsigma.yaml"


def load_config(path: str | Path | None = None) -> VoxSigmaConfig:
    """Load and validate configuration from a YAML file.

    A missing or empty file yields the default configuration.

    Raises:
        ConfigurationError: If the file cannot be read or does not validate
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return VoxSigmaConfig()

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load config from {path}: {e}") from e

    if data is None:
        return VoxSigmaConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    try:
        return VoxSigmaConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def save_config(config: VoxSigmaConfig, path: str | Path | None = None) -> Path:
    """Write a configuration as YAML, omitting unset settings.

    Files holding an API key or password are made readable by the owner only.

    Returns:
        The path written
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(exclude_none=True)
    path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    if config.rest.api_key or config.rest.password:
        path.chmod(0o600)

    logger.debug("Wrote config to %s", path)
    return path


def config_from_env() -> VoxSigmaConfig:
    """Build a configuration from environment variables.

    Reads VRXS_ROOT, VRXS_BIN, VRXS_TMP for the CLI driver and VOXSIGMA_URL,
    VOXSIGMA_API_KEY, VOXSIGMA_USER, VOXSIGMA_PASSWORD for the REST driver.
    The REST driver is selected when VOXSIGMA_URL is set.
    """
    base_url = os.environ.get("VOXSIGMA_URL") or None
    cli = CliConfig(
        root=os.environ.get("VRXS_ROOT") or "/usr/local/vrxs",
        bin=os.environ.get("VRXS_BIN") or None,
        tmp=os.environ.get("VRXS_TMP") or "/tmp",
    )
    rest = RestConfig(
        base_url=base_url,
        api_key=os.environ.get("VOXSIGMA_API_KEY") or None,
        username=os.environ.get("VOXSIGMA_USER") or None,
        password=os.environ.get("VOXSIGMA_PASSWORD"),
    )
    return VoxSigmaConfig(driver="rest" if base_url else "cli", cli=cli, rest=rest)


def create_driver(config: VoxSigmaConfig) -> Driver:
    """Instantiate the driver selected by a configuration.

    Raises:
        ConfigurationError: If required settings are missing
    """
    if config.driver == "rest":
        return RestDriver(
            config.rest.base_url,
            config.rest.credential(),
            verify=config.rest.verify_ssl,
            tmp_dir=config.cli.tmp,
            poll_interval=config.rest.poll_interval,
        )
    return CliDriver(config.cli.bin_path(), tmp_dir=config.cli.tmp)
