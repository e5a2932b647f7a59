# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class ImmutableRecordError(ValueError):
    """Raised on any attempt to change or delete a written ledger row."""


class Sale(models.Model):
    """
    A completed POS checkout.

    GUARANTEES:
    - Written exactly once, by SalesLedger.append(), inside the checkout transaction
    - Immutable afterwards: save() on an existing row and delete() raise
    - total_amount == sum(line.subtotal for line in lines)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    seller = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Operator who ran the checkout",
    )

    seller_identity = models.CharField(
        max_length=255,
        help_text="Seller display name as it was at checkout time",
    )

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def invoice_number(self) -> str:
        return str(self.id)[:8].upper()

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Sale is immutable once written.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Sale is immutable and cannot be deleted.")

    def __str__(self):
        return f"{self.invoice_number} | {self.total_amount}"
