# inventory/serializers/medicine.py

"""
MEDICINE SERIALIZER

Purpose:
- Read shape for the catalog (inventory table + POS browse list).
- Write validation is delegated to StockCatalog.upsert() so API input and
  service input are checked by the same rules.
"""

from rest_framework import serializers

from inventory.models import Medicine


class MedicineSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Medicine
        fields = [
            "id",
            "name",
            "description",
            "batch_number",
            "expiry_date",
            "quantity",
            "price",
            "min_stock_level",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]


class MedicineWriteSerializer(serializers.Serializer):
    """
    Shape-only checks for swagger + type coercion.
    Business rules (positive price/quantity, required name) live in the catalog.
    """

    name = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    batch_number = serializers.CharField(required=False, allow_blank=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    min_stock_level = serializers.IntegerField(required=False)
