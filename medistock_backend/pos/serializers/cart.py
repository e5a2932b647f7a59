# pos/serializers/cart.py

"""
CART SERIALIZERS

Purpose:
- Return the operator's in-memory cart in a frontend-friendly shape.
- Keep money + totals server-derived (single source of truth).
"""

from rest_framework import serializers


class CartLineSerializer(serializers.Serializer):
    medicine_id = serializers.CharField()
    name = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    stock_quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CartSerializer(serializers.Serializer):
    lines = CartLineSerializer(many=True)
    item_count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, source="total")


# =====================================================
# INPUT SERIALIZERS
# =====================================================


class AddCartItemInputSerializer(serializers.Serializer):
    medicine_id = serializers.UUIDField()


class UpdateCartItemInputSerializer(serializers.Serializer):
    """
    Either an absolute quantity or a +/- delta.
    """

    quantity = serializers.IntegerField(required=False)
    delta = serializers.IntegerField(required=False)

    def validate(self, attrs):
        has_qty = attrs.get("quantity") is not None
        has_delta = attrs.get("delta") is not None
        if has_qty == has_delta:
            raise serializers.ValidationError("Provide exactly one of quantity or delta.")
        return attrs
