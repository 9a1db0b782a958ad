"""Locale services: countries and subdivisions."""

from __future__ import annotations

from typing import Any

from .base import Feature


class Services(Feature):
    async def locale_list_countries(self) -> Any:
        return await self.commerce.request("services/locale/countries")

    async def locale_list_subdivisions(self, country_code: str) -> Any:
        return await self.commerce.request(f"services/locale/{country_code}/subdivisions")

    async def locale_list_shipping_countries(self, token: str) -> Any:
        """Countries the checkout `token` can ship to."""
        return await self.commerce.request(f"services/locale/{token}/countries")

    async def locale_list_shipping_subdivisions(self, token: str, country_code: str) -> Any:
        return await self.commerce.request(
            f"services/locale/{token}/countries/{country_code}/subdivisions"
        )
