from .api import ActiveCartView, AddCartItemView, CartItemView, CheckoutCartView

__all__ = ["ActiveCartView", "AddCartItemView", "CartItemView", "CheckoutCartView"]
