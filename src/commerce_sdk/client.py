"""Commerce client - the request pipeline every resource goes through.

Usage:
    commerce = Commerce("pk_test_...")
    products = await commerce.products.list({"limit": 5})
    result = await commerce.request("carts", "post", {"id": "prod_123"})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config import ClientConfig
from .console import debugger_on_notice
from .encoding import FormPayload, encode, query_params
from .envelope import normalize_response
from .errors import ConfigurationError, decode_body, translate_error
from .features import Cart, Categories, Checkout, Merchants, Products, Services
from .storage import Storage

logger = logging.getLogger(__name__)

AGENT = "commerce.js/v2"
SECRET_KEY_PREFIX = "sk_"

# Override keys that apply to the request rather than to httpx.AsyncClient
REQUEST_OVERRIDES = ("method", "url", "params", "headers")


class Commerce:
    """Client for the Chec commerce API.

    Args:
        public_key: Public API key (never a secret key)
        debug: Forward API diagnostics to the debug sink
        config: Partial ClientConfig overrides (url, version, timeout_ms,
            event_callback, transport_overrides, debug_sink)

    Raises:
        ConfigurationError: If a secret key is given or `config` is invalid
    """

    def __init__(
        self,
        public_key: str,
        debug: bool = False,
        config: Mapping[str, Any] | None = None,
    ):
        if not isinstance(public_key, str) or not public_key:
            logger.warning("Invalid public key given to Commerce client")

        if isinstance(public_key, str) and public_key.lower().startswith(SECRET_KEY_PREFIX):
            raise ConfigurationError(
                "Secret key provided. You must use a public key with the Commerce client!"
            )

        key = public_key if isinstance(public_key, str) else ""
        self.options = ClientConfig.build(key, debug, config)

        self.storage = Storage(self)
        self.cart = Cart(self)
        self.checkout = Checkout(self)
        self.products = Products(self)
        self.services = Services(self)
        self.categories = Categories(self)
        self.merchants = Merchants(self)

        if debug:
            debugger_on_notice()

    def _build_request(
        self, endpoint: str, method: str, data: Any
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Split a call into httpx.AsyncClient options and request arguments."""
        options = self.options
        headers = {
            "X-Authorization": options.public_key,
            "X-Chec-Agent": AGENT,
        }

        is_get = method.lower() == "get"
        params = query_params(data) if is_get else None
        body = None if is_get else encode(data)

        overrides = dict(options.transport_overrides)
        request_overrides = {key: overrides.pop(key) for key in REQUEST_OVERRIDES if key in overrides}

        client_kwargs: dict[str, Any] = {
            "base_url": options.base_url,
            "timeout": options.timeout,
            **overrides,
        }
        request_kwargs: dict[str, Any] = {
            "method": request_overrides.get("method", method).upper(),
            "url": request_overrides.get("url", endpoint),
            "params": request_overrides.get("params", params),
            "headers": {**headers, **(request_overrides.get("headers") or {})},
        }

        if isinstance(body, FormPayload):
            form_data, files = body.to_httpx()
            request_kwargs["data"] = form_data
            if files:
                request_kwargs["files"] = files
        elif body is not None:
            request_kwargs["content"] = body

        return client_kwargs, request_kwargs

    async def _send(self, endpoint: str, method: str, data: Any) -> httpx.Response:
        client_kwargs, request_kwargs = self._build_request(endpoint, method, data)
        logger.debug(f"{request_kwargs['method']} {client_kwargs['base_url']}{request_kwargs['url']}")

        # httpx limits each phase separately; the deadline bounds the whole request
        async with asyncio.timeout(self.options.timeout):
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.request(**request_kwargs)

        logger.debug(f"Response {response.status_code} for {request_kwargs['url']}")
        response.raise_for_status()
        return response

    async def request(
        self,
        endpoint: str,
        method: str = "get",
        data: Any = None,
        return_full_response: bool = False,
    ) -> Any:
        """Call an API endpoint.

        Args:
            endpoint: Path relative to the versioned base URL (e.g., "products")
            method: HTTP method; GET sends `data` as query parameters, other
                methods send it as a flattened form body
            data: Request payload
            return_full_response: Return the raw httpx.Response and let
                httpx errors (and TimeoutError) propagate untranslated

        Returns:
            The response body without its reserved keys, or the raw response

        Raises:
            CommerceError: If the request fails (unless return_full_response)
        """
        if return_full_response:
            return await self._send(endpoint, method, data)

        try:
            response = await self._send(endpoint, method, data)
        except (httpx.HTTPError, TimeoutError) as e:
            raise translate_error(e, self.options.active_debug_sink) from e

        return normalize_response(
            decode_body(response),
            event_callback=self.options.event_callback,
            debug_sink=self.options.active_debug_sink,
        )
