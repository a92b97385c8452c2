"""
Configuration management for Courier.

Handles loading and validation of configuration files.
"""

from courier.config.settings import (
    CourierConfig,
    ExecutorConfig,
    LoggingConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "CourierConfig",
    "ExecutorConfig",
    "LoggingConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
