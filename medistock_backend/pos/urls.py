"""
PATH: pos/urls.py

POS URLS

Purpose:
- Operator cart lifecycle
- Cart item operations
- Cart checkout (finalizes to Sale via CheckoutCoordinator)
"""

from django.urls import path

from pos.views import ActiveCartView, AddCartItemView, CartItemView, CheckoutCartView

app_name = "pos"

urlpatterns = [
    path("cart/", ActiveCartView.as_view(), name="active-cart"),
    path("cart/items/", AddCartItemView.as_view(), name="add-cart-item"),
    path("cart/items/<uuid:medicine_id>/", CartItemView.as_view(), name="cart-item"),
    path("checkout/", CheckoutCartView.as_view(), name="checkout"),
]
