"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from commerce_sdk import Bus, Commerce


@pytest.fixture(autouse=True)
def reset_bus():
    """Start every test with an empty notification bus."""
    Bus.reset()
    yield
    Bus.reset()


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _json_response(body: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(body).encode())

    return handler


@pytest.fixture
def json_response():
    """Handler factory always answering with a fixed JSON body."""
    return _json_response


@pytest.fixture
def make_client() -> Callable[..., tuple[Commerce, RecordingTransport]]:
    """Factory for a client wired to a RecordingTransport."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        public_key: str = "pk_test_123",
        debug: bool = False,
        **config: Any,
    ) -> tuple[Commerce, RecordingTransport]:
        transport = RecordingTransport(handler)
        overrides = {"transport": transport, **config.pop("transport_overrides", {})}
        config.setdefault("event_callback", None)
        client = Commerce(public_key, debug, {"transport_overrides": overrides, **config})
        return client, transport

    return factory
