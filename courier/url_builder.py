"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

URL builder.

Keeps a base URL, appends a request path and fills ``{name}`` placeholders
and query parameters::

    base = UrlBuilder("https://example.com")

    url = (
        base.url("users/{userId}/documents/{documentId}")
        .add_path("userId", 123)
        .add_path("documentId", 456)
        .add_query("type", "education")
        .add_query("name", "calculus")
        .build()
    )
    # https://example.com/users/123/documents/456?type=education&name=calculus

``url()`` returns a new builder, so one base builder can be shared.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple
from urllib.parse import quote, quote_plus


class UrlBuilder:
    """Immutable-by-convention URL builder; every method returns a new instance."""

    def __init__(self, base: str) -> None:
        self._base = base
        self._path = ""
        self._path_params: List[Tuple[str, str]] = []
        self._query: List[Tuple[str, str]] = []

    def _copy(self) -> UrlBuilder:
        clone = UrlBuilder(self._base)
        clone._path = self._path
        clone._path_params = list(self._path_params)
        clone._query = list(self._query)
        return clone

    def url(self, path: str) -> UrlBuilder:
        clone = self._copy()
        clone._path = path
        return clone

    def add_path(self, name: str, value: object) -> UrlBuilder:
        """Replace the ``{name}`` placeholder with ``value`` (percent-encoded)."""
        clone = self._copy()
        clone._path_params.append((name, quote(str(value), safe="")))
        return clone

    def add_query(self, name: str, value: object) -> UrlBuilder:
        clone = self._copy()
        clone._query.append((quote_plus(name), quote_plus(str(value))))
        return clone

    def add_query_array(self, name: str, values: Iterable[object]) -> UrlBuilder:
        """Add ``name`` once per value: ``?tag=a&tag=b``."""
        clone = self._copy()
        for value in values:
            clone._query.append((quote_plus(name), quote_plus(str(value))))
        return clone

    def build(self) -> str:
        if self._base.endswith("/") and self._path.startswith("/"):
            url = self._base + self._path[1:]
        elif self._base and self._path and not self._base.endswith("/") and not self._path.startswith("/"):
            url = f"{self._base}/{self._path}"
        else:
            url = self._base + self._path

        for name, value in self._path_params:
            url = url.replace(f"{{{name}}}", value)

        for name, value in self._query:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{name}={value}"
        return url

    def __str__(self) -> str:
        return self.build()
