"""Resource wrappers - fixed endpoints on top of Commerce.request."""

from .cart import Cart
from .catalog import Categories, Merchants, Products
from .checkout import Checkout
from .services import Services

__all__ = [
    "Cart",
    "Categories",
    "Checkout",
    "Merchants",
    "Products",
    "Services",
]
