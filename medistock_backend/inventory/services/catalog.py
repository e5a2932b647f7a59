# inventory/services/catalog.py

"""
======================================================
PATH: inventory/services/catalog.py
======================================================
STOCK CATALOG (APPLICATION SERVICE)

Purpose:
- Authoritative list of sellable medicines and their on-hand quantities.
- Create/update (upsert), delete, and conditional stock decrement.

Hard rules:
- Quantities are integer units.
- upsert() decides create vs update by the PRESENCE of a previously issued id,
  never by the shape of the id string.
- decrement() is the ONLY path that reduces quantity during a sale. It is a
  single conditional UPDATE (quantity >= amount) so the check and the write
  are indivisible; concurrent decrements on one row are serialized by the
  database and can never drive quantity below zero.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from inventory.models import Medicine

from .exceptions import InsufficientStock, MedicineNotFound

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

_TEXT_FIELDS = ("description", "batch_number")


def _to_int(value, *, field_name: str) -> int:
    if value is None or value == "":
        raise ValidationError({field_name: f"{field_name} is required"})
    if isinstance(value, bool):
        raise ValidationError({field_name: f"{field_name} must be an integer"})
    if isinstance(value, Decimal) or isinstance(value, float):
        try:
            whole = int(value)
        except (OverflowError, ValueError, InvalidOperation):
            raise ValidationError({field_name: f"{field_name} must be a finite number"})
        if value != whole:
            raise ValidationError({field_name: f"{field_name} must be a whole number"})
        return whole
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError({field_name: f"{field_name} must be an integer"})


def _require_positive_int(value, *, field_name: str) -> int:
    v = _to_int(value, field_name=field_name)
    if v <= 0:
        raise ValidationError({field_name: f"{field_name} must be greater than zero"})
    return v


def _require_price(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError({"price": "price is required"})
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError({"price": "price must be a valid decimal"})
    if not price.is_finite() or price <= Decimal("0.00"):
        raise ValidationError({"price": "price must be greater than zero"})
    return price.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _optional_date(value):
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value).strip())
    if parsed is None:
        raise ValidationError({"expiry_date": "expiry_date must be a YYYY-MM-DD date"})
    return parsed


def _clean_payload(data: dict) -> dict:
    """
    Normalize operator input into Medicine field values.

    Rejects: blank name, missing/non-positive price, missing/non-positive
    quantity, negative min_stock_level.
    """
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationError({"name": "name is required"})

    cleaned = {
        "name": name,
        "price": _require_price(data.get("price")),
        "quantity": _require_positive_int(data.get("quantity"), field_name="quantity"),
        "expiry_date": _optional_date(data.get("expiry_date")),
    }

    raw_min = data.get("min_stock_level")
    min_level = 0 if raw_min in (None, "") else _to_int(raw_min, field_name="min_stock_level")
    if min_level < 0:
        raise ValidationError({"min_stock_level": "min_stock_level cannot be negative"})
    cleaned["min_stock_level"] = min_level

    for field in _TEXT_FIELDS:
        cleaned[field] = str(data.get(field) or "").strip()

    return cleaned


def filter_medicines(qs, *, search: str | None = None, in_stock: bool = False):
    """
    Catalog read filters shared by StockCatalog.list and the medicine endpoints.

    - search: name or batch number contains (case-insensitive)
    - in_stock: only quantity > 0
    """
    q = (search or "").strip()
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(batch_number__icontains=q))

    if in_stock:
        qs = qs.filter(quantity__gt=0)

    return qs


class StockCatalog:
    """
    ORM-backed catalog. Stateless: safe to share between operators.
    """

    model = Medicine

    # -----------------------------
    # READ
    # -----------------------------
    def list(self, *, search: str | None = None, in_stock: bool = False) -> list[Medicine]:
        """
        Newest first. `search` matches name or batch number (case-insensitive).
        """
        qs = filter_medicines(self.model.objects.all(), search=search, in_stock=in_stock)
        return list(qs.order_by("-created_at"))

    def get(self, medicine_id) -> Medicine:
        try:
            return self.model.objects.get(pk=medicine_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise MedicineNotFound(medicine_id)

    def get_many(self, medicine_ids) -> dict:
        """Fresh rows keyed by id (missing ids are simply absent)."""
        rows = self.model.objects.filter(pk__in=list(medicine_ids))
        return {row.pk: row for row in rows}

    # -----------------------------
    # WRITE
    # -----------------------------
    @transaction.atomic
    def upsert(self, data: dict) -> Medicine:
        """
        Create when `data` carries no id; otherwise update that exact record.
        """
        cleaned = _clean_payload(data)
        medicine_id = data.get("id")

        if medicine_id in (None, ""):
            medicine = self.model(**cleaned)
            medicine.full_clean()
            medicine.save()
            logger.info(
                "Medicine created",
                extra={"medicine_id": str(medicine.pk), "medicine_name": medicine.name},
            )
            return medicine

        try:
            medicine = self.model.objects.select_for_update().get(pk=medicine_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise MedicineNotFound(medicine_id)

        for field, value in cleaned.items():
            setattr(medicine, field, value)

        medicine.full_clean()
        medicine.save()
        logger.info(
            "Medicine updated",
            extra={"medicine_id": str(medicine.pk), "medicine_name": medicine.name},
        )
        return medicine

    def delete(self, medicine_id) -> None:
        try:
            deleted, _ = self.model.objects.filter(pk=medicine_id).delete()
        except (ValidationError, ValueError):
            raise MedicineNotFound(medicine_id)

        if not deleted:
            raise MedicineNotFound(medicine_id)

        logger.info("Medicine deleted", extra={"medicine_id": str(medicine_id)})

    def decrement(self, medicine_id, amount) -> None:
        """
        Compare-and-decrement: reduce quantity by `amount` only if
        quantity >= amount, in one UPDATE statement.

        Raises:
        - InsufficientStock when the row has fewer than `amount` units
        - MedicineNotFound when the row no longer exists
        """
        qty = _require_positive_int(amount, field_name="amount")

        updated = self.model.objects.filter(pk=medicine_id, quantity__gte=qty).update(
            quantity=F("quantity") - qty,
            updated_at=timezone.now(),
        )
        if updated == 1:
            return

        current = self.model.objects.filter(pk=medicine_id).values("name", "quantity").first()
        if current is None:
            raise MedicineNotFound(medicine_id)

        logger.warning(
            "Conditional decrement rejected",
            extra={
                "medicine_id": str(medicine_id),
                "requested": qty,
                "available": current["quantity"],
            },
        )
        raise InsufficientStock(
            medicine_id=medicine_id,
            name=current["name"],
            requested=qty,
            available=int(current["quantity"]),
        )
