"""Checkout resource."""

from __future__ import annotations

from typing import Any

from .base import Feature


class Checkout(Feature):
    async def generate_token(self, identifier: str, params: dict[str, Any] | None = None) -> Any:
        """Create a checkout token for a cart, product or permalink.

        Args:
            identifier: Cart ID, product ID or permalink
            params: Query options, e.g. {"type": "cart"}
        """
        return await self.commerce.request(f"checkouts/{identifier}", "get", params)

    async def capture(self, token: str, data: dict[str, Any]) -> Any:
        """Capture an order for a checkout token."""
        return await self.commerce.request(f"checkouts/{token}", "post", data)

    async def receipt(self, token: str) -> Any:
        return await self.commerce.request(f"checkouts/{token}/receipt")

    async def check_discount(self, token: str, data: dict[str, Any]) -> Any:
        return await self.commerce.request(f"checkouts/{token}/check/discount", "get", data)

    async def check_shipping_option(self, token: str, data: dict[str, Any]) -> Any:
        return await self.commerce.request(f"checkouts/{token}/check/shipping", "get", data)

    async def set_tax_zone(self, token: str, data: dict[str, Any]) -> Any:
        return await self.commerce.request(f"checkouts/{token}/helper/set_tax_zone", "get", data)

    async def get_live(self, token: str) -> Any:
        """Get the live object (current totals) of a checkout."""
        return await self.commerce.request(f"checkouts/{token}/live")

    async def get_token(self, token: str) -> Any:
        return await self.commerce.request(f"checkouts/tokens/{token}")
