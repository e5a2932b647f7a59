# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale, SaleLine


class SaleLineSerializer(serializers.ModelSerializer):
    """
    Sale line (read-only). Values are the checkout-time snapshot.
    """

    medicine_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = SaleLine
        fields = [
            "position",
            "medicine_id",
            "name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """
    Read-only sale shape used by sales history, checkout responses and the dashboard.
    """

    invoice_number = serializers.CharField(read_only=True)
    lines = SaleLineSerializer(many=True, read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_number",
            "created_at",
            "seller_identity",
            "seller",
            "total_amount",
            "item_count",
            "lines",
        ]
        read_only_fields = fields

    def get_item_count(self, obj) -> int:
        return sum(line.quantity for line in obj.lines.all())
