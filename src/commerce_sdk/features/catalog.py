"""Catalog resources: products, categories and merchant details."""

from __future__ import annotations

from typing import Any

from .base import Feature


class Products(Feature):
    async def list(self, params: dict[str, Any] | None = None) -> Any:
        """List products, optionally filtered (limit, category_slug, ...)."""
        return await self.commerce.request("products", "get", params)

    async def retrieve(self, product_id: str, params: dict[str, Any] | None = None) -> Any:
        """Get a product by ID or, with {"type": "permalink"}, by permalink."""
        return await self.commerce.request(f"products/{product_id}", "get", params)


class Categories(Feature):
    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self.commerce.request("categories", "get", params)

    async def retrieve(self, category_id: str, params: dict[str, Any] | None = None) -> Any:
        return await self.commerce.request(f"categories/{category_id}", "get", params)


class Merchants(Feature):
    async def about(self) -> Any:
        """Get details of the merchant owning the public key."""
        return await self.commerce.request("merchants")
