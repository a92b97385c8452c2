"""
Structured logging for Courier.

structlog renders every event, either as JSON lines or through the console
renderer, on top of stdlib logging handlers. Each pipeline call runs inside
a correlation scope, so all events of one ``execute`` share a
``correlation_id`` field.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import structlog
from structlog.types import EventDict, Processor


LOGGER_PREFIX = "courier"

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor: copy the active correlation id into the event."""
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Bind ``correlation_id`` (or a fresh UUID4) to the current context.

    Returns:
        The id now in effect.
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


@contextmanager
def correlation_scope() -> Iterator[str]:
    """
    Run a block under a correlation id.

    A caller that already bound an id keeps it; otherwise a new one is
    generated for the block and removed again when the block exits.
    """
    existing = correlation_id_var.get()
    if existing:
        yield existing
        return
    token = correlation_id_var.set(str(uuid.uuid4()))
    try:
        yield correlation_id_var.get()
    finally:
        correlation_id_var.reset(token)


def _root_handler(log_file: Optional[Path]) -> logging.Handler:
    if log_file is None:
        return logging.StreamHandler(sys.stderr)
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_file)


def _processors(json_format: bool) -> List[Processor]:
    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Route Courier's structlog events through the root stdlib logger.

    Replaces any handlers already installed on the root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Unknown names
            fall back to INFO.
        log_file: Write to this file (parent directories are created)
            instead of stderr.
        json_format: JSON lines when True, coloured console output when False.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = _root_handler(log_file)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    structlog.configure(
        processors=_processors(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Return a logger named under the ``courier`` hierarchy.

    ``get_logger(__name__)`` inside the package keeps the module path as
    is; any other name is prefixed, so ``get_logger("demo")`` logs as
    ``courier.demo``.
    """
    if name != LOGGER_PREFIX and not name.startswith(f"{LOGGER_PREFIX}."):
        name = f"{LOGGER_PREFIX}.{name}"
    return structlog.get_logger(name)


def log_request_execution(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    status_code: Optional[int],
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Emit a DEBUG ``request_execution`` event for a completed pipeline call.

    Args:
        logger: Logger instance
        method: HTTP method name
        url: Request URL
        status_code: Status code of the raw response
        duration_ms: Wall time of the whole pipeline in milliseconds
        **kwargs: Extra fields merged into the event
    """
    fields: Dict[str, Any] = {
        "event_type": "request_execution",
        "method": method,
        "url": url,
        "status_code": status_code,
        "duration_ms": duration_ms,
        **kwargs,
    }
    logger.debug("request_execution", **fields)


def log_request_failure(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    error: BaseException,
    **kwargs: Any,
) -> None:
    """Emit a WARNING ``request_failure`` event for a call that raised."""
    fields: Dict[str, Any] = {
        "event_type": "request_failure",
        "method": method,
        "url": url,
        "error_type": type(error).__name__,
        "error": str(error),
        **kwargs,
    }
    logger.warning("request_failure", **fields)
