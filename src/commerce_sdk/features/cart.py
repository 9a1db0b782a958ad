"""Cart resource.

The active cart ID lives in the client's storage. The first call that
needs a cart creates one.
"""

from __future__ import annotations

import logging
from typing import Any

from .base import Feature

logger = logging.getLogger(__name__)

CART_ID_KEY = "commercejs_cart_id"


class Cart(Feature):
    def id(self) -> str | None:
        """ID of the active cart, if one has been created."""
        return self.commerce.storage.get(CART_ID_KEY)

    async def refresh(self) -> Any:
        """Create a new cart and make it the active one."""
        cart = await self.commerce.request("carts")
        self.commerce.storage.set(CART_ID_KEY, cart["id"])
        logger.debug(f"Active cart is now {cart['id']}")
        return cart

    async def request(
        self,
        endpoint: str = "",
        method: str = "get",
        data: Any = None,
        return_full_response: bool = False,
    ) -> Any:
        """Call an endpoint below the active cart, creating it if needed."""
        if self.id() is None:
            await self.refresh()

        path = f"carts/{self.id()}"
        if endpoint:
            path = f"{path}/{endpoint}"
        return await self.commerce.request(path, method, data, return_full_response)

    async def add(
        self, product_id: str, quantity: int = 1, variant: dict[str, str] | None = None
    ) -> Any:
        data: dict[str, Any] = {"id": product_id, "quantity": quantity}
        if variant:
            data["variant"] = variant
        return await self.request("", "post", data)

    async def retrieve(self) -> Any:
        return await self.request()

    async def contents(self) -> list[Any]:
        """Line items of the active cart."""
        cart = await self.retrieve()
        return cart.get("line_items", [])

    async def update(self, line_id: str, data: dict[str, Any]) -> Any:
        return await self.request(f"items/{line_id}", "put", data)

    async def remove(self, line_id: str) -> Any:
        return await self.request(f"items/{line_id}", "delete")

    async def empty(self) -> Any:
        return await self.request("items", "delete")

    async def delete(self) -> Any:
        """Delete the active cart and forget its ID."""
        result = await self.request("", "delete")
        self.commerce.storage.remove(CART_ID_KEY)
        return result
