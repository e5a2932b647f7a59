# pos/services/cart_store.py

"""
OPERATOR CART STORE

One CartSession per operator, held in Django's cache under a per-user key.
Carts are never written to the database and expire after
CART_SESSION_TTL_SECONDS of inactivity.
"""

from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .cart_session import CartSession

CART_KEY = "pos:cart:{user_id}"


def _key(user) -> str:
    return CART_KEY.format(user_id=user.pk)


def load_cart(user) -> CartSession:
    return CartSession.from_dict(cache.get(_key(user)))


def save_cart(user, cart: CartSession) -> None:
    if cart.is_empty:
        cache.delete(_key(user))
        return
    cache.set(_key(user), cart.to_dict(), timeout=settings.CART_SESSION_TTL_SECONDS)


def discard_cart(user) -> None:
    cache.delete(_key(user))
