"""
Configuration management for Courier.

A YAML file with two optional sections configures the default executor and
logging::

    executor:
      timeout_seconds: ${COURIER_TIMEOUT:300}
      upload_chunk_size: 65536
      follow_redirects: false
      verify_tls: true
    logging:
      level: INFO
      file: ~/.courier/courier.log
      json_format: true

String values may reference environment variables as ``${VAR}`` or
``${VAR:default}``.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from courier.exceptions import InvalidConfigurationError
from courier.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")
_TRUE_STRINGS = ("true", "yes", "1", "on")
_FALSE_STRINGS = ("false", "no", "0", "off")


@dataclass
class ExecutorConfig:
    """Settings for the default :class:`HttpRequestExecutor`."""

    timeout_seconds: float = 300.0
    upload_chunk_size: int = 64 * 1024
    follow_redirects: bool = False
    verify_tls: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = ""
    json_format: bool = True

    def apply(self) -> None:
        """Install these settings through :func:`setup_logging`."""
        setup_logging(
            level=self.level,
            log_file=Path(self.file) if self.file else None,
            json_format=self.json_format,
        )


@dataclass
class CourierConfig:
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    return os.path.expanduser("~/.courier/config.yaml")


def get_default_config() -> CourierConfig:
    return CourierConfig()


def _expand_env_vars(value: Any) -> Any:
    """
    Substitute ``${VAR}`` / ``${VAR:default}`` in every string of ``value``.

    Dicts and lists are walked recursively; an unset variable without a
    default expands to an empty string.
    """
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(
            lambda match: os.environ.get(match.group(1), match.group(2) or ""), value
        )
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidConfigurationError(f"{name} must be a boolean, got {value!r}")


def _as_number(value: Any, name: str, kind: type) -> Any:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            f"{name} must be {'an integer' if kind is int else 'a number'}, got {value!r}"
        ) from None


def _section(config_data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = config_data.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Mapping[str, Any]) -> CourierConfig:
    """Overlay the values present in ``config_data`` on the defaults."""
    defaults = get_default_config()

    executor_data = _section(config_data, "executor")
    executor = ExecutorConfig(
        timeout_seconds=_as_number(
            executor_data.get("timeout_seconds", defaults.executor.timeout_seconds),
            "executor.timeout_seconds", float,
        ),
        upload_chunk_size=_as_number(
            executor_data.get("upload_chunk_size", defaults.executor.upload_chunk_size),
            "executor.upload_chunk_size", int,
        ),
        follow_redirects=_as_bool(
            executor_data.get("follow_redirects", defaults.executor.follow_redirects),
            "executor.follow_redirects",
        ),
        verify_tls=_as_bool(
            executor_data.get("verify_tls", defaults.executor.verify_tls),
            "executor.verify_tls",
        ),
    )

    logging_data = _section(config_data, "logging")
    log_file = str(logging_data.get("file") or defaults.logging.file)
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", defaults.logging.level)).upper(),
        file=os.path.expanduser(log_file) if log_file else "",
        json_format=_as_bool(
            logging_data.get("json_format", defaults.logging.json_format),
            "logging.json_format",
        ),
    )

    return CourierConfig(executor=executor, logging=logging_config)


def _validate_config(config: CourierConfig) -> None:
    """
    Check value ranges that the type coercion above cannot express.

    Raises:
        InvalidConfigurationError: On the first out-of-range value.
    """
    if config.executor.timeout_seconds <= 0:
        raise InvalidConfigurationError(
            f"executor.timeout_seconds must be positive, got {config.executor.timeout_seconds}"
        )
    if config.executor.upload_chunk_size <= 0:
        raise InvalidConfigurationError(
            f"executor.upload_chunk_size must be positive, got {config.executor.upload_chunk_size}"
        )
    if config.logging.level not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}, "
            f"got {config.logging.level!r}"
        )


def _read_yaml(config_path: str) -> Any:
    try:
        with open(config_path, "r") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e


def load_config(config_path: Optional[str] = None) -> CourierConfig:
    """
    Load and validate a configuration file.

    A missing or empty file yields the defaults.

    Args:
        config_path: File to read; defaults to ``~/.courier/config.yaml``.

    Raises:
        InvalidConfigurationError: The file is unreadable, is not YAML, is
            not a mapping, or holds an invalid value.
    """
    config_path = os.path.expanduser(str(config_path or get_default_config_path()))

    if not os.path.exists(config_path):
        logger.info("config_not_found", path=config_path)
        return get_default_config()

    config_data = _read_yaml(config_path)
    if config_data is None:
        logger.info("config_empty", path=config_path)
        return get_default_config()
    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': top level must be a mapping"
        )

    try:
        config = _build_config_from_dict(_expand_env_vars(config_data))
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error("config_invalid", path=config_path, error=str(e))
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.debug("config_loaded", path=config_path)
    return config
