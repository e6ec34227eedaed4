"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging (Loguru)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    LoggingConfig,
    SoundCloudConfig,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_log_file,
    create_default_config,
)

# Logging
from .output import setup_loguru, setup_logging

__all__ = [
    "Config",
    "LoggingConfig",
    "SoundCloudConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_log_file",
    "create_default_config",
    "setup_loguru",
    "setup_logging",
]
