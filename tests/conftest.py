"""
Pytest configuration and fixtures for exa_client tests.
"""

import json
from typing import Callable, List

import httpx
import pytest

from exa_client import Exa, ExaClientBuilder

TEST_API_KEY = "test_key"
TEST_BASE_URL = "https://api.test.exa"


class StubTransport(httpx.MockTransport):
    """MockTransport that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def json_response(status: int, payload, headers=None) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload, headers=headers, request=request)

    return handler


@pytest.fixture
def make_client():
    """Builds a sync Exa client whose requests go to a StubTransport."""
    clients: List[httpx.Client] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]):
        transport = StubTransport(handler)
        http_client = httpx.Client(transport=transport)
        clients.append(http_client)
        exa: Exa = (
            ExaClientBuilder()
            .with_api_key(TEST_API_KEY)
            .with_base_url(TEST_BASE_URL)
            .with_http_client(http_client)
            .build()
        )
        return exa, transport

    yield factory

    for http_client in clients:
        http_client.close()
