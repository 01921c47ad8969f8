"""Configuration management."""

from voxsigma.config.loader import (
    DEFAULT_CONFIG_PATH,
    config_from_env,
    create_driver,
    load_config,
    save_config,
)
from voxsigma.config.schema import CliConfig, RestConfig, VoxSigmaConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CliConfig",
    "RestConfig",
    "VoxSigmaConfig",
    "config_from_env",
    "create_driver",
    "load_config",
    "save_config",
]
