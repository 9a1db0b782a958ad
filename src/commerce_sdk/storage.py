"""Client-side key/value storage (cart identifiers and the like)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .client import Commerce


class Storage:
    """In-memory storage owned by one client."""

    def __init__(self, commerce: Commerce | None = None):
        self.commerce = commerce
        self._values: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)
