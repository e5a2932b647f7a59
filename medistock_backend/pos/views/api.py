# pos/views/api.py

"""
POS API VIEWS

Purpose:
- Operator cart lifecycle (held in the cache, one cart per operator)
- Add/update/remove/clear items (server-owned pricing)
- Checkout endpoint that turns the cart into a Sale via CheckoutCoordinator

Hard rules:
- Money is server-owned: unit_price is snapshotted from the Medicine on add,
  and checkout re-reads current prices anyway.
- The cart is saved back to the cache only after a successful mutation.
  A failed checkout leaves it exactly as it was.
"""

from __future__ import annotations

from django.urls import reverse
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from inventory.serializers import MedicineSerializer
from inventory.services import MedicineNotFound, StockCatalog
from pos.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from pos.services import CartLineNotFound, discard_cart, load_cart, save_cart
from sales.serializers import SaleSerializer
from sales.services import (
    CheckoutCoordinator,
    EmptyCartError,
    InsufficientStock,
    PersistenceError,
)
from users.permissions import IsOperator
from users.services.identity import seller_identity_for


def _not_found(exc):
    return error_response(
        code="NOT_FOUND",
        message=str(exc),
        http_status=status.HTTP_404_NOT_FOUND,
    )


def _warning_payload(warning):
    if warning is None:
        return None
    return {
        "code": "STOCK_CHANGED",
        "message": str(warning),
        "items": warning.item_names,
    }


# =====================================================
# CART VIEWS
# =====================================================


class ActiveCartView(APIView):
    """
    GET    /api/pos/cart/   current cart (empty cart if none)
    DELETE /api/pos/cart/   clear the cart
    """

    permission_classes = [IsOperator]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer}, description="Get the operator's cart")
    def get(self, request):
        cart = load_cart(request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: CartSerializer}, description="Clear the operator's cart")
    def delete(self, request):
        cart = load_cart(request.user)
        cart.clear()
        discard_cart(request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class AddCartItemView(APIView):
    """
    Add one unit of a medicine.

    - New medicine with stock > 0: inserted with quantity 1
    - Already in the cart: +1 unless the cart already holds all observed stock
    - Sold out and not in the cart: 409 INSUFFICIENT_STOCK, cart unchanged
    """

    permission_classes = [IsOperator]
    serializer_class = CartSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        examples=[
            OpenApiExample(
                "Add one unit",
                value={"medicine_id": "07d0722f-92fd-4a83-b84e-6e25f034a647"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            medicine = StockCatalog().get(serializer.validated_data["medicine_id"])
        except MedicineNotFound as exc:
            return _not_found(exc)

        cart = load_cart(request.user)
        if cart.add(medicine) is None:
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=f"{medicine.name} is out of stock.",
                http_status=status.HTTP_409_CONFLICT,
                details={"medicine_id": str(medicine.pk), "available": 0},
            )

        save_cart(request.user, cart)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class CartItemView(APIView):
    """
    PATCH  /api/pos/cart/items/<medicine_id>/   {"quantity": n} or {"delta": +/-n}
    DELETE /api/pos/cart/items/<medicine_id>/   remove the line (no-op if absent)
    """

    permission_classes = [IsOperator]
    serializer_class = CartSerializer

    @extend_schema(request=UpdateCartItemInputSerializer, responses={200: CartSerializer})
    def patch(self, request, medicine_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = load_cart(request.user)
        try:
            if serializer.validated_data.get("quantity") is not None:
                cart.set_quantity(medicine_id, serializer.validated_data["quantity"])
            else:
                cart.adjust(medicine_id, serializer.validated_data["delta"])
        except CartLineNotFound as exc:
            return _not_found(exc)

        save_cart(request.user, cart)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, medicine_id):
        cart = load_cart(request.user)
        cart.remove(medicine_id)
        save_cart(request.user, cart)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


# =====================================================
# CHECKOUT
# =====================================================


class CheckoutCartView(APIView):
    """
    Checkout the operator's cart into a Sale.

    201 response:
        {
          "sale": {...},
          "warning": null | {"code": "STOCK_CHANGED", "message": "...", "items": [...]},
          "invoice_url": "/api/sales/<id>/invoice/",
          "inventory": [...]   # refreshed catalog
        }
    """

    permission_classes = [IsOperator]

    coordinator_class = CheckoutCoordinator

    @extend_schema(request=None, responses={201: dict}, description="Checkout the operator's cart")
    def post(self, request):
        cart = load_cart(request.user)
        coordinator = self.coordinator_class()

        try:
            result = coordinator.checkout(
                cart,
                seller_identity_for(request.user),
                seller=request.user,
            )
        except EmptyCartError as exc:
            return error_response(
                code="EMPTY_CART",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
                details=_warning_payload(exc.warning),
            )
        except InsufficientStock as exc:
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
                details={
                    "medicine_id": str(exc.medicine_id),
                    "name": exc.name,
                    "requested": exc.requested,
                    "available": exc.available,
                    "retryable": True,
                },
            )
        except MedicineNotFound as exc:
            return _not_found(exc)
        except PersistenceError as exc:
            return error_response(
                code="PERSISTENCE_ERROR",
                message=str(exc),
                http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
                details={"retryable": True},
            )

        save_cart(request.user, cart)

        sale = result.sale
        inventory = coordinator.catalog.list()

        return Response(
            {
                "sale": SaleSerializer(sale).data,
                "warning": _warning_payload(result.warning),
                "invoice_url": reverse("sales:sales-invoice", args=[sale.pk]),
                "inventory": MedicineSerializer(inventory, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )
