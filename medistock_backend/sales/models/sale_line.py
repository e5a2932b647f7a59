# sales/models/sale_line.py

"""
SALE LINE (IMMUTABLE SNAPSHOT)

Name, quantity and unit price are copied at checkout time. Later edits to
(or deletion of) the Medicine never change a written line; the medicine FK
is informational only and is nulled when the medicine is deleted.
"""

from __future__ import annotations

import uuid

from django.db import models

from inventory.models import Medicine

from .sale import ImmutableRecordError, Sale


class SaleLine(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    position = models.PositiveIntegerField()

    medicine = models.ForeignKey(
        Medicine,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["sale", "position"], name="sale_line_unique_position"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="sale_line_quantity_positive"
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("SaleLine is immutable once written.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("SaleLine is immutable and cannot be deleted.")

    def __str__(self):
        return f"{self.name} x{self.quantity}"
