# sales/services/ledger.py

"""
======================================================
PATH: sales/services/ledger.py
======================================================
SALES LEDGER (APPEND-ONLY)

Purpose:
- Persist completed sales and read them back, newest first.

Hard rules:
- append() is the only writer of Sale / SaleLine rows.
- A written sale is never updated or deleted (the models refuse it).
- total_amount == sum(subtotal) and subtotal == quantity x unit_price are
  checked here before anything is written.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from sales.models import Sale, SaleLine

from .exceptions import LedgerIntegrityError, SaleNotFound

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SaleLineDraft:
    """Line snapshot copied from the catalog at checkout time."""

    medicine_id: str | None
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return _money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class SaleDraft:
    seller_identity: str
    lines: tuple[SaleLineDraft, ...]
    seller: object = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=timezone.now)

    @property
    def total_amount(self) -> Decimal:
        total = Decimal("0.00")
        for line in self.lines:
            total += line.subtotal
        return _money(total)


def _check_draft(draft: SaleDraft) -> None:
    if not draft.lines:
        raise LedgerIntegrityError("A sale needs at least one line.")

    for line in draft.lines:
        if line.quantity < 1:
            raise LedgerIntegrityError(f"Line '{line.name}' has non-positive quantity.")
        if _money(line.unit_price) < Decimal("0.00"):
            raise LedgerIntegrityError(f"Line '{line.name}' has a negative price.")


class SalesLedger:
    """
    ORM-backed ledger. Stateless: safe to share between operators.
    """

    def _queryset(self):
        return Sale.objects.select_related("seller").prefetch_related("lines")

    # -----------------------------
    # WRITE
    # -----------------------------
    @transaction.atomic
    def append(self, draft: SaleDraft) -> Sale:
        _check_draft(draft)

        sale = Sale(
            id=draft.id,
            seller=draft.seller,
            seller_identity=draft.seller_identity,
            total_amount=draft.total_amount,
            created_at=draft.created_at,
        )
        sale.save(force_insert=True)

        SaleLine.objects.bulk_create(
            [
                SaleLine(
                    sale=sale,
                    position=position,
                    medicine_id=line.medicine_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=_money(line.unit_price),
                    subtotal=line.subtotal,
                )
                for position, line in enumerate(draft.lines, start=1)
            ]
        )

        logger.info(
            "Sale appended",
            extra={
                "sale_id": str(sale.pk),
                "seller_identity": sale.seller_identity,
                "total_amount": str(sale.total_amount),
                "line_count": len(draft.lines),
            },
        )
        return self.get(sale.pk)

    # -----------------------------
    # READ
    # -----------------------------
    def list(self, *, limit: int | None = None) -> list[Sale]:
        qs = self._queryset().order_by("-created_at")
        if limit is not None:
            qs = qs[:limit]
        return list(qs)

    def get(self, sale_id) -> Sale:
        try:
            return self._queryset().get(pk=sale_id)
        except (Sale.DoesNotExist, ValidationError, ValueError):
            raise SaleNotFound(sale_id)

    def total_revenue(self) -> Decimal:
        total = Sale.objects.aggregate(total=Sum("total_amount")).get("total")
        return _money(total)
