"""
Pytest configuration and shared fixtures for Courier tests.
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Tuple

import pytest

from courier.adapters.mock import MockRequestExecutor, MockResponse
from courier.models import Method, RawRequest, RawResponse, Request


BOOKS_URL = "https://api.example.com/books"
USER_URL = "https://api.example.com/users/1"


class RecordingMiddleware:
    """Middleware that appends its name to a shared journal and forwards."""

    def __init__(self, name: str, journal: List[str]) -> None:
        self.name = name
        self.journal = journal
        self.calls = 0

    async def process(self, value, next):
        self.calls += 1
        self.journal.append(self.name)
        return await next(value)


class ShortCircuitMiddleware:
    """Middleware that returns a fixed value without calling next."""

    def __init__(self, result: Any, journal: List[str], name: str = "short") -> None:
        self.result = result
        self.journal = journal
        self.name = name

    async def process(self, value, next):
        self.journal.append(self.name)
        return self.result


class FakeLogger:
    """Stands in for a structlog logger and records every event."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []

    def _record(self, level: str, event: str, **kwargs: Any) -> None:
        self.events.append((level, event, kwargs))

    def debug(self, event: str, **kwargs: Any) -> None:
        self._record("debug", event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._record("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._record("warning", event, **kwargs)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def journal() -> List[str]:
    return []


@pytest.fixture
def mock_executor() -> MockRequestExecutor:
    """Executor answering GET /users/1 with a JSON user and POST /books with 201."""
    return MockRequestExecutor({
        ("GET", USER_URL): MockResponse(
            200,
            b'{"id":1,"name":"Joe"}',
            headers={"Content-Type": "application/json"},
        ),
        ("POST", BOOKS_URL): MockResponse(201, b'{"created":true}'),
    })


@pytest.fixture
def get_user_request() -> Request:
    return Request(Method.GET, USER_URL, headers={"Accept": "application/json"})


@pytest.fixture
def raw_request(get_user_request: Request) -> RawRequest:
    return RawRequest(get_user_request, None)


@pytest.fixture
def raw_response(get_user_request: Request) -> RawResponse:
    return RawResponse(
        request=get_user_request,
        status_code=200,
        body=b'{"id":1,"name":"Joe"}',
        headers={"Content-Type": "application/json; charset=utf-8"},
        content_length=21,
        reason_phrase="OK",
    )


@pytest.fixture
def fake_logger() -> FakeLogger:
    return FakeLogger()


@pytest.fixture
def recorder(journal: List[str]):
    """Factory fixture: ``recorder("name")`` returns a RecordingMiddleware."""
    def _make(name: str) -> RecordingMiddleware:
        return RecordingMiddleware(name, journal)
    return _make


@pytest.fixture
def short_circuit(journal: List[str]):
    """Factory fixture: ``short_circuit(value)`` returns a ShortCircuitMiddleware."""
    def _make(result: Any, name: str = "short") -> ShortCircuitMiddleware:
        return ShortCircuitMiddleware(result, journal, name)
    return _make
