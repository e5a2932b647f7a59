from .cart_session import CartLine, CartLineNotFound, CartSession
from .cart_store import discard_cart, load_cart, save_cart

__all__ = [
    "CartLine",
    "CartLineNotFound",
    "CartSession",
    "discard_cart",
    "load_cart",
    "save_cart",
]
