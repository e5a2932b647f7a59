# sales/services/checkout_coordinator.py

"""
CHECKOUT COORDINATOR (APPLICATION SERVICE)

Purpose:
- Turn an operator's CartSession into one immutable Sale while decrementing
  stock, all-or-nothing.

Flow:
    Building -> Validating -> Committing -> Committed | Aborted

1. Empty cart => EmptyCartError, before any catalog or ledger call.
2. prepare(): re-read every line from the catalog and clamp the requested
   quantity to current stock. Lines clamped to zero are dropped. Every
   clamped or dropped line name goes into one StockChangedWarning.
3. Line snapshots (name, unit price) come from the rows read in step 2,
   not from the cart.
4. commit(): inside ONE database transaction, conditionally decrement every
   line and append the sale. Any InsufficientStock rolls the whole attempt
   back: no sale, no decrement.
5. On success the cart is cleared. On failure it is left untouched so the
   operator can adjust and retry.

Hard rules:
- Quantities are integer units.
- Money is computed server-side from catalog prices.
- No optimistic locking here: the conditional decrement is the guard.
- Commit time is bounded (CHECKOUT_TIMEOUT_SECONDS). Database failures and
  timeouts surface as PersistenceError.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, connection, transaction

from inventory.services import StockCatalog

from .exceptions import EmptyCartError, PersistenceError, StockChangedWarning
from .ledger import SaleDraft, SaleLineDraft, SalesLedger

logger = logging.getLogger(__name__)


class CheckoutState(str, enum.Enum):
    BUILDING = "building"
    VALIDATING = "validating"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CheckoutPlan:
    """Validated lines ready to commit, plus any stock warning raised while building them."""

    lines: tuple[SaleLineDraft, ...]
    warning: StockChangedWarning | None = None

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class CheckoutResult:
    sale: object
    warning: StockChangedWarning | None = None


class CheckoutCoordinator:
    """
    Catalog and ledger are injectable so storage can be swapped in tests.
    """

    def __init__(self, *, catalog=None, ledger=None, timeout_seconds=None):
        self.catalog = catalog if catalog is not None else StockCatalog()
        self.ledger = ledger if ledger is not None else SalesLedger()
        if timeout_seconds is None:
            timeout_seconds = getattr(settings, "CHECKOUT_TIMEOUT_SECONDS", None)
        self.timeout_seconds = timeout_seconds
        self.state = CheckoutState.BUILDING

    # -----------------------------
    # State
    # -----------------------------
    def _transition(self, state: CheckoutState, **extra) -> None:
        previous = self.state
        self.state = state
        logger.info(
            "Checkout state %s -> %s",
            previous.value,
            state.value,
            extra={"checkout_state": state.value, **extra},
        )

    # -----------------------------
    # Entry point
    # -----------------------------
    def checkout(self, cart, seller_identity: str, *, seller=None) -> CheckoutResult:
        self.state = CheckoutState.BUILDING

        if cart.is_empty:
            raise EmptyCartError()

        plan = self.prepare(cart)
        sale = self.commit(plan, seller_identity, seller=seller)

        cart.clear()
        return CheckoutResult(sale=sale, warning=plan.warning)

    # -----------------------------
    # Validating
    # -----------------------------
    def prepare(self, cart) -> CheckoutPlan:
        """
        Re-read current stock and build the line snapshots. No writes.

        Raises EmptyCartError when the cart is empty or every line was dropped.
        """
        if cart.is_empty:
            raise EmptyCartError()

        self._transition(CheckoutState.VALIDATING, line_count=len(cart.lines))

        try:
            current = {
                str(pk): row
                for pk, row in self.catalog.get_many(line.medicine_id for line in cart.lines).items()
            }
        except DatabaseError as exc:
            self._transition(CheckoutState.ABORTED, reason="catalog_unavailable")
            raise PersistenceError("Could not read current stock.") from exc

        lines: list[SaleLineDraft] = []
        changed: list[str] = []

        for cart_line in cart.lines:
            row = current.get(str(cart_line.medicine_id))
            available = max(int(row.quantity), 0) if row is not None else 0
            qty = min(cart_line.quantity, available)

            if qty < cart_line.quantity:
                changed.append(row.name if row is not None else cart_line.name)
            if qty <= 0:
                continue

            lines.append(
                SaleLineDraft(
                    medicine_id=str(row.pk),
                    name=row.name,
                    quantity=qty,
                    unit_price=row.price,
                )
            )

        warning = StockChangedWarning(changed) if changed else None
        if warning is not None:
            logger.warning(
                "Cart lines adjusted to current stock",
                extra={"item_names": changed},
            )

        if not lines:
            self._transition(CheckoutState.ABORTED, reason="all_lines_dropped")
            raise EmptyCartError(
                "All items in the cart are out of stock.", warning=warning
            )

        return CheckoutPlan(lines=tuple(lines), warning=warning)

    # -----------------------------
    # Committing
    # -----------------------------
    def _bound_statement_time(self) -> None:
        if not self.timeout_seconds or connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            timeout_ms = int(float(self.timeout_seconds) * 1000)
            cursor.execute(f"SET LOCAL statement_timeout = {timeout_ms}")

    def commit(self, plan: CheckoutPlan, seller_identity: str, *, seller=None):
        """
        Decrement every planned line and append the sale in one transaction.

        Raises:
        - EmptyCartError for a plan with no lines
        - InsufficientStock when any decrement is rejected (nothing applied)
        - MedicineNotFound when a planned medicine was deleted (nothing applied)
        - PersistenceError on database failure or timeout (nothing applied)
        """
        if plan.is_empty:
            raise EmptyCartError()

        draft = SaleDraft(
            seller_identity=seller_identity,
            seller=seller,
            lines=plan.lines,
        )
        self._transition(CheckoutState.COMMITTING, sale_id=str(draft.id))

        try:
            with transaction.atomic():
                self._bound_statement_time()
                for line in plan.lines:
                    self.catalog.decrement(line.medicine_id, line.quantity)
                sale = self.ledger.append(draft)
        except DatabaseError as exc:
            self._transition(CheckoutState.ABORTED, sale_id=str(draft.id), reason="database_error")
            logger.exception("Checkout commit failed", extra={"sale_id": str(draft.id)})
            raise PersistenceError("The sale could not be saved. Please retry.") from exc
        except Exception as exc:
            self._transition(
                CheckoutState.ABORTED,
                sale_id=str(draft.id),
                reason=type(exc).__name__,
            )
            raise

        self._transition(
            CheckoutState.COMMITTED,
            sale_id=str(sale.pk),
            total_amount=str(sale.total_amount),
        )
        return sale
