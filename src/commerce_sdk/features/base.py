"""Base class for resource wrappers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Commerce


class Feature:
    """A group of API calls sharing one client."""

    def __init__(self, commerce: Commerce):
        self.commerce = commerce
