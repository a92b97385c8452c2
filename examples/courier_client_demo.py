"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Demo script for the Courier client.

Runs offline against MockRequestExecutor, so no network access is needed.
Swap in HttpRequestExecutor() to talk to a real service.
"""

import asyncio

from courier import (
    BearerTokenMiddleware,
    CourierClient,
    JsonRequestConverter,
    JsonResponseConverter,
    LogPart,
    Method,
    MockRequestExecutor,
    MockResponse,
    Request,
    RequestLogger,
    ResponseLogger,
    StringResponseConverter,
    UrlBuilder,
)
from courier.logging_config import setup_logging


BASE_URL = "https://api.example.com"


async def fetch_token() -> str:
    # A real provider would refresh an OAuth token here.
    return "demo-token"


def build_executor() -> MockRequestExecutor:
    return MockRequestExecutor({
        ("GET", f"{BASE_URL}/users/1"): MockResponse(200, b'{"id":1,"name":"Joe"}'),
        ("POST", f"{BASE_URL}/books"): MockResponse(201, b'{"id":2,"bookName":"1984"}'),
        ("GET", f"{BASE_URL}/health"): MockResponse(200, b"OK"),
    })


async def main():
    """Demonstrate one client serving JSON and plain-text endpoints."""
    setup_logging(level="INFO", json_format=False)
    urls = UrlBuilder(BASE_URL)

    client = (
        CourierClient.builder(build_executor())
        .add_request_converter(JsonRequestConverter())
        .add_response_converter(JsonResponseConverter())
        .add_response_converter(StringResponseConverter())
        .add_request_middleware(BearerTokenMiddleware(fetch_token))
        .add_request_middleware(RequestLogger({LogPart.URL, LogPart.BODY}))
        .add_response_middleware(ResponseLogger({LogPart.CODE}))
        .build()
    )

    async with client:
        print("=== Courier Client Demo ===\n")

        # 1. Identity conversion: raw bytes in, raw bytes out
        print("1. Fetching user without converters...")
        response = await client.execute(
            Request(Method.GET, urls.url("users/{id}").add_path("id", 1).build())
        )
        print(f"   Status: {response.status_code}")
        print(f"   Body: {response.body!r}\n")

        # 2. JSON in both directions
        print("2. Creating a book as JSON...")
        response = await client.execute(Request(
            Method.POST,
            urls.url("books").build(),
            body={"id": 2, "bookName": "1984"},
            request_converter="json",
            response_converter="json",
        ))
        print(f"   Status: {response.status_code}")
        print(f"   Created: {response.body}\n")

        # 3. Plain text from the same client
        print("3. Checking health as text...")
        response = await client.execute(Request(
            Method.GET, urls.url("health").build(), response_converter="string"
        ))
        print(f"   Health: {response.body}\n")


if __name__ == "__main__":
    asyncio.run(main())
