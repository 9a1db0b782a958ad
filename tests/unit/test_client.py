"""Unit tests for the Commerce client request pipeline."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import MagicMock
from urllib.parse import parse_qsl

import httpx
import pytest

from commerce_sdk import Bus, Commerce, CommerceError, ConfigurationError, Notification
from commerce_sdk.client import AGENT
from commerce_sdk.config import DEFAULT_TIMEOUT_MS
from commerce_sdk.events import default_event_callback


class DripStream(httpx.AsyncByteStream):
    """Response body delivered one byte at a time."""

    def __init__(self, body: bytes, delay: float):
        self.body = body
        self.delay = delay

    async def __aiter__(self):
        for i in range(len(self.body)):
            await asyncio.sleep(self.delay)
            yield self.body[i : i + 1]


def drip_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, stream=DripStream(b'{"id": 1}', delay=0.05))


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Tests for client construction and key validation."""

    @pytest.mark.parametrize("key", ["sk_test_123", "SK_live_abc", "Sk_x"])
    def test_secret_key_rejected(self, key: str) -> None:
        with pytest.raises(ConfigurationError, match="Secret key"):
            Commerce(key)

    def test_empty_key_warns_but_constructs(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            client = Commerce("")

        assert client.options.public_key == ""
        assert any("Invalid public key" in r.message for r in caplog.records)

    def test_non_string_key_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            client = Commerce(None)  # type: ignore[arg-type]

        assert client.options.public_key == ""
        assert any("Invalid public key" in r.message for r in caplog.records)

    def test_unknown_config_option(self) -> None:
        with pytest.raises(ConfigurationError, match="axios"):
            Commerce("pk_test", config={"axios": {}})

    def test_defaults(self) -> None:
        client = Commerce("pk_test")

        assert client.options.base_url == "https://api.chec.io/v1/"
        assert client.options.timeout == DEFAULT_TIMEOUT_MS / 1000
        assert client.options.active_debug_sink is None

    def test_base_url_normalization(self) -> None:
        client = Commerce("pk_test", config={"url": "https://example.test/api", "version": "v2"})

        assert client.options.base_url == "https://example.test/api/v2/"

    def test_config_is_immutable(self) -> None:
        client = Commerce("pk_test", config={"transport_overrides": {"verify": False}})

        with pytest.raises(AttributeError):
            client.options.url = "https://other.test/"  # type: ignore[misc]
        with pytest.raises(TypeError):
            client.options.transport_overrides["verify"] = True  # type: ignore[index]

    def test_debug_installs_console_sink(self) -> None:
        client = Commerce("pk_test", debug=True)

        assert client.options.active_debug_sink is not None

    def test_resources_attached(self) -> None:
        client = Commerce("pk_test")

        for name in ("cart", "checkout", "products", "services", "categories", "merchants"):
            assert getattr(client, name).commerce is client
        assert client.storage.commerce is client


# =============================================================================
# Request building
# =============================================================================


class TestRequest:
    """Tests for Commerce.request."""

    @pytest.mark.asyncio
    async def test_headers_and_url(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({"id": 1}))

        await client.request("products")

        request = transport.last
        assert request.method == "GET"
        assert str(request.url) == "https://api.chec.io/v1/products"
        assert request.headers["X-Authorization"] == "pk_test_123"
        assert request.headers["X-Chec-Agent"] == AGENT

    @pytest.mark.asyncio
    async def test_get_sends_query_params(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}))

        await client.request("products", "get", {"limit": 5, "category_slug": "shoes"})

        request = transport.last
        assert dict(request.url.params) == {"limit": "5", "category_slug": "shoes"}
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_post_sends_encoded_body(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}))

        await client.request("carts/cart_1", "post", {"id": "prod_1", "variant": {"vgrp_1": "optn_2"}})

        request = transport.last
        assert request.method == "POST"
        assert not request.url.params
        assert dict(parse_qsl(request.content.decode())) == {
            "id": "prod_1",
            "variant[vgrp_1]": "optn_2",
        }

    @pytest.mark.asyncio
    async def test_binary_values_sent_as_multipart(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}))

        await client.request("uploads", "post", {"name": "photo", "file": b"\x89PNG"})

        request = transport.last
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="name"' in request.content
        assert b'name="file"' in request.content

    @pytest.mark.asyncio
    async def test_method_case_insensitive(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}))

        await client.request("products", "GET", {"limit": 1})

        assert dict(transport.last.url.params) == {"limit": "1"}

    @pytest.mark.asyncio
    async def test_timeout_applied(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}), timeout_ms=1500)

        await client.request("products")

        assert transport.last.extensions["timeout"]["read"] == 1.5

    @pytest.mark.asyncio
    async def test_default_timeout(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}))

        await client.request("products")

        assert transport.last.extensions["timeout"]["read"] == 60.0

    @pytest.mark.asyncio
    async def test_override_headers_merged(self, make_client, json_response) -> None:
        client, transport = make_client(
            json_response({}),
            transport_overrides={"headers": {"X-Extra": "1", "X-Chec-Agent": "custom/1"}},
        )

        await client.request("products")

        headers = transport.last.headers
        assert headers["X-Authorization"] == "pk_test_123"
        assert headers["X-Extra"] == "1"
        assert headers["X-Chec-Agent"] == "custom/1"

    @pytest.mark.asyncio
    async def test_override_method(self, make_client, json_response) -> None:
        client, transport = make_client(json_response({}), transport_overrides={"method": "put"})

        await client.request("carts/cart_1", "post", {"a": 1})

        assert transport.last.method == "PUT"


# =============================================================================
# Response handling
# =============================================================================


class TestResponses:
    """Tests for normalization and error translation through request()."""

    @pytest.mark.asyncio
    async def test_event_stripped_and_emitted(self, make_client, json_response) -> None:
        callback = MagicMock()
        client, _ = make_client(
            json_response({"_event": "cart.updated", "id": 5}), event_callback=callback
        )

        result = await client.request("carts/cart_1", "post", {"id": "prod_1"})

        assert result == {"id": 5}
        callback.assert_called_once_with("cart.updated")

    @pytest.mark.asyncio
    async def test_list_body_passthrough(self, make_client, json_response) -> None:
        callback = MagicMock()
        client, _ = make_client(json_response([1, 2, 3]), event_callback=callback)

        assert await client.request("products") == [1, 2, 3]
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_console_forwarded_in_debug(self, make_client, json_response) -> None:
        sink = MagicMock()
        client, _ = make_client(
            json_response({"_console": ["log", "hello"], "id": 1}), debug=True, debug_sink=sink
        )

        result = await client.request("products")

        assert result == {"id": 1}
        sink.assert_called_once_with("log", "hello")

    @pytest.mark.asyncio
    async def test_console_ignored_without_debug(self, make_client, json_response) -> None:
        sink = MagicMock()
        client, _ = make_client(json_response({"_console": ["log", "x"]}), debug_sink=sink)

        assert await client.request("products") == {}
        sink.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_translated(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                422,
                json={"field": "required"},
                extensions={"reason_phrase": b"Unprocessable"},
            )

        client, _ = make_client(handler)

        with pytest.raises(CommerceError) as exc_info:
            await client.request("checkouts/chkt_1", "post", {})

        error = exc_info.value
        assert error.status_code == 422
        assert error.status_text == "Unprocessable"
        assert error.data == {"field": "required"}
        assert "422" in error.message and "Unprocessable" in error.message
        assert isinstance(error.original_error, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_error_reported_to_debug_sink(self, make_client, json_response) -> None:
        sink = MagicMock()
        client, _ = make_client(
            json_response({"message": "nope"}, status_code=404), debug=True, debug_sink=sink
        )

        with pytest.raises(CommerceError):
            await client.request("products/missing")

        sink.assert_called_once()
        assert sink.call_args.args[:2] == ("error", "[404] Type: Not Found")

    @pytest.mark.asyncio
    async def test_timeout_translated(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_client(handler)

        with pytest.raises(CommerceError) as exc_info:
            await client.request("products")

        assert exc_info.value.status_code == 0
        assert exc_info.value.status_text == "Request Timeout"

    @pytest.mark.asyncio
    async def test_network_failure_translated(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        client, _ = make_client(handler)

        with pytest.raises(CommerceError) as exc_info:
            await client.request("products")

        assert exc_info.value.status_code == 0
        assert exc_info.value.status_text == "Network Error"


class TestFullResponse:
    """Tests for return_full_response=True."""

    @pytest.mark.asyncio
    async def test_returns_raw_response(self, make_client, json_response) -> None:
        callback = MagicMock()
        client, _ = make_client(json_response({"_event": "cart.updated", "id": 5}), event_callback=callback)

        response = await client.request("carts", return_full_response=True)

        assert isinstance(response, httpx.Response)
        assert response.json() == {"_event": "cart.updated", "id": 5}
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_raw_failure_surfaces(self, make_client, json_response) -> None:
        client, _ = make_client(json_response({"error": "x"}, status_code=500))

        with pytest.raises(httpx.HTTPStatusError):
            await client.request("products", return_full_response=True)


class TestDeadline:
    """Tests for the whole-request timeout."""

    @pytest.mark.asyncio
    async def test_slow_body_rejected(self, make_client) -> None:
        """A body that keeps trickling in still hits the overall deadline."""
        client, _ = make_client(drip_response, timeout_ms=200)

        with pytest.raises(CommerceError) as exc_info:
            await client.request("products")

        assert exc_info.value.status_code == 0
        assert exc_info.value.status_text == "Request Timeout"
        assert isinstance(exc_info.value.original_error, TimeoutError)
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    @pytest.mark.asyncio
    async def test_slow_body_within_deadline(self, make_client) -> None:
        client, _ = make_client(drip_response, timeout_ms=5000)

        assert await client.request("products") == {"id": 1}

    @pytest.mark.asyncio
    async def test_full_response_timeout_untranslated(self, make_client) -> None:
        client, _ = make_client(drip_response, timeout_ms=200)

        with pytest.raises(TimeoutError):
            await client.request("products", return_full_response=True)


class TestDefaultEventCallback:
    """Tests for events reaching the Bus through the default callback."""

    @pytest.mark.asyncio
    async def test_event_published_on_bus(self, make_client, json_response) -> None:
        received: list[Notification] = []

        async def on_event(n: Notification) -> None:
            received.append(n)

        await Bus.subscribe("Commercejs.cart.updated", on_event)
        client, _ = make_client(
            json_response({"_event": "cart.updated", "id": 5}),
            event_callback=default_event_callback,
        )

        result = await client.request("carts/cart_1", "post", {"id": "prod_1"})
        for _ in range(5):
            await asyncio.sleep(0)

        assert result == {"id": 5}
        assert [n.type for n in received] == ["Commercejs.cart.updated"]
