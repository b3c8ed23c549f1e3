"""Configuration for prcgen."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    PrcGenConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PrcGenConfig",
    "load_config",
    "resolve_output_dir",
]
