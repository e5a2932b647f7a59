# inventory/models/medicine.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Medicine(models.Model):
    """
    A sellable catalog item.

    STOCK MODEL (IMPORTANT):
    - quantity is the authoritative on-hand count
    - quantity is only ever reduced through StockCatalog.decrement()
      (a conditional UPDATE), never by read-modify-write
    - min_stock_level is advisory (low stock alerts only)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)

    batch_number = models.CharField(max_length=128, blank=True, db_index=True)
    expiry_date = models.DateField(null=True, blank=True)

    quantity = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    min_stock_level = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="medicine_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.batch_number or 'no batch'})"

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if self.price is None or Decimal(self.price) < 0:
            raise ValidationError({"price": "price must be non-negative"})

    @property
    def is_low_stock(self) -> bool:
        return int(self.quantity or 0) <= int(self.min_stock_level or 0)
