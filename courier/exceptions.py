"""
Exception hierarchy for Courier.

All custom exceptions inherit from CourierError base class.
"""

from typing import Optional


class CourierError(Exception):
    """Base exception for all Courier errors."""
    pass


# Configuration Errors
class ConfigurationError(CourierError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


class ConverterNotRegisteredError(ConfigurationError):
    """Raised when a request selects a converter the client never registered."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(
            f"{kind} converter '{key}' is not registered on this client"
        )


class BuilderConsumedError(ConfigurationError):
    """Raised when a builder is used again after build() was called."""
    pass


# Execution Errors
class ExecutionError(CourierError):
    """Base exception for failures inside a request executor."""
    pass


class TransportError(ExecutionError):
    """Raised when the network call did not produce a response."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message)


class ExecutorTimeoutError(TransportError):
    """Raised when the network call exceeds the executor's wall-clock timeout."""

    def __init__(self, timeout: float, url: Optional[str] = None) -> None:
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout:g}s", url=url)


class InvalidRequestBodyError(ExecutionError):
    """Raised when the executor cannot send a converted body of this type."""
    pass
