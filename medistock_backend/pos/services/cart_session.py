# pos/services/cart_session.py

"""
======================================================
PATH: pos/services/cart_session.py
======================================================
CART SESSION (IN-MEMORY, ONE OPERATOR)

Purpose:
- Hold the operator's in-progress selection before checkout.
- Snapshot name/unit price at add time and remember the stock level the
  operator last saw for each line.

Hard rules:
- Never touches the database. A CartSession is plain data; pos.services.cart_store
  keeps it in the cache between requests.
- Every line satisfies 1 <= quantity <= stock_quantity after any mutation.
- total() is recomputed from the lines on every call (no cached total).
- Observed stock is advisory only. Checkout re-reads the catalog.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, ROUND_HALF_UP

from inventory.services.exceptions import NotFound

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class CartLineNotFound(NotFound):
    def __init__(self, medicine_id):
        self.medicine_id = medicine_id
        super().__init__(f"Medicine {medicine_id} is not in the cart")


@dataclass
class CartLine:
    medicine_id: str
    name: str
    unit_price: Decimal
    quantity: int
    stock_quantity: int

    @property
    def line_total(self) -> Decimal:
        return _money(self.unit_price * self.quantity)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["unit_price"] = str(self.unit_price)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            medicine_id=str(data["medicine_id"]),
            name=data["name"],
            unit_price=_money(data["unit_price"]),
            quantity=int(data["quantity"]),
            stock_quantity=int(data["stock_quantity"]),
        )


class CartSession:
    """
    Ordered collection of CartLine keyed by medicine id (one line per medicine).

    `add` takes anything shaped like a Medicine row: id, name, price, quantity.
    """

    def __init__(self, lines=None):
        self._lines: dict[str, CartLine] = {}
        for line in lines or []:
            self._lines[str(line.medicine_id)] = line

    # -----------------------------
    # READ
    # -----------------------------
    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, medicine_id) -> bool:
        return str(medicine_id) in self._lines

    def get(self, medicine_id) -> CartLine:
        try:
            return self._lines[str(medicine_id)]
        except KeyError:
            raise CartLineNotFound(medicine_id)

    def total(self) -> Decimal:
        total = Decimal("0.00")
        for line in self._lines.values():
            total += line.unit_price * line.quantity
        return _money(total)

    # -----------------------------
    # MUTATIONS
    # -----------------------------
    def add(self, medicine) -> CartLine | None:
        """
        Add one unit of `medicine`.

        - Existing line: increment by one unless already at the observed stock;
          a sold-out row leaves the line untouched.
        - New line: inserted with quantity 1 only when stock > 0.
        Returns the affected line, or None when nothing was inserted.
        """
        key = str(medicine.pk if hasattr(medicine, "pk") else medicine.id)
        stock = max(int(medicine.quantity or 0), 0)

        line = self._lines.get(key)
        if line is not None:
            if stock <= 0:
                # Sold out: the line keeps its last observed stock untouched.
                logger.info(
                    "Add ignored: medicine sold out",
                    extra={"medicine_id": key, "cart_quantity": line.quantity},
                )
                return line
            line.stock_quantity = stock
            line.quantity = min(line.quantity + 1, stock)
            return line

        if stock <= 0:
            logger.info("Add ignored: medicine sold out", extra={"medicine_id": key})
            return None

        line = CartLine(
            medicine_id=key,
            name=medicine.name,
            unit_price=_money(medicine.price),
            quantity=1,
            stock_quantity=stock,
        )
        self._lines[key] = line
        return line

    def set_quantity(self, medicine_id, new_qty: int) -> CartLine:
        """
        Clamp `new_qty` into [1, stock_quantity]. A request that clamps to zero
        (zero or negative input, or no observed stock) leaves the line as is.

        Raises CartLineNotFound when the medicine is not in the cart.
        """
        line = self.get(medicine_id)

        clamped = min(int(new_qty), line.stock_quantity)
        if clamped < 1:
            return line

        line.quantity = clamped
        return line

    def adjust(self, medicine_id, delta: int) -> CartLine:
        """+/- buttons: set_quantity(current + delta)."""
        line = self.get(medicine_id)
        return self.set_quantity(medicine_id, line.quantity + int(delta))

    def remove(self, medicine_id) -> None:
        self._lines.pop(str(medicine_id), None)

    def clear(self) -> None:
        self._lines.clear()

    # -----------------------------
    # CACHE SHAPE
    # -----------------------------
    def to_dict(self) -> dict:
        return {"lines": [line.to_dict() for line in self._lines.values()]}

    @classmethod
    def from_dict(cls, data: dict | None) -> "CartSession":
        if not data:
            return cls()
        return cls(CartLine.from_dict(row) for row in data.get("lines", []))
