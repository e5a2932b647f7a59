# sales/services/exceptions.py

"""
SALES SERVICE ERRORS

Checkout failures are typed so the POS layer can tell the operator what to do:
- EmptyCartError: nothing to sell (not retryable as-is)
- InsufficientStock (from inventory): stock moved under us, retry against
  refreshed stock
- PersistenceError: the store was unreachable or too slow, retry later

StockChangedWarning is never raised by checkout. It rides along on the
CheckoutResult when lines were clamped or dropped.
"""

from inventory.services.exceptions import InsufficientStock, NotFound


class CheckoutError(Exception):
    """Base exception for all checkout failures."""


class EmptyCartError(CheckoutError):
    def __init__(self, message: str = "Cart is empty.", *, warning=None):
        self.warning = warning
        super().__init__(message)


class PersistenceError(CheckoutError):
    """Database unreachable, timed out, or rejected the write. Retryable."""


class LedgerIntegrityError(CheckoutError):
    """A sale draft whose totals or lines do not add up."""


class SaleNotFound(NotFound):
    def __init__(self, sale_id):
        self.sale_id = sale_id
        super().__init__(f"Sale {sale_id} not found")


class StockChangedWarning(UserWarning):
    """
    Some cart lines were reduced or removed because stock changed since the
    operator added them.
    """

    def __init__(self, item_names):
        self.item_names = list(item_names)
        super().__init__(
            "Stock changed for: " + ", ".join(self.item_names)
            + ". Quantities were adjusted to what is available."
        )


__all__ = [
    "CheckoutError",
    "EmptyCartError",
    "InsufficientStock",
    "LedgerIntegrityError",
    "PersistenceError",
    "SaleNotFound",
    "StockChangedWarning",
]
