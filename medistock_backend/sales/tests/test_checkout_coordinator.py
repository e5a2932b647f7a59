# sales/tests/test_checkout_coordinator.py

"""
CHECKOUT COORDINATOR TESTS

Run with:
    python manage.py test sales -v 2
"""

from __future__ import annotations

import threading
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import OperationalError, connection
from django.test import TestCase, TransactionTestCase

from inventory.models import Medicine
from inventory.services import InsufficientStock, StockCatalog
from pos.services import CartSession
from sales.models import Sale, SaleLine
from sales.services import (
    CheckoutCoordinator,
    CheckoutState,
    EmptyCartError,
    LedgerIntegrityError,
    PersistenceError,
    SalesLedger,
    StockChangedWarning,
)

User = get_user_model()


def _medicine(name: str, quantity: int, price: str) -> Medicine:
    return Medicine.objects.create(name=name, quantity=quantity, price=Decimal(price))


def _cart(*lines) -> CartSession:
    """lines: (medicine, quantity) pairs, added while stock is still visible."""
    cart = CartSession()
    for medicine, qty in lines:
        cart.add(medicine)
        cart.set_quantity(medicine.pk, qty)
    return cart


def _quantity(medicine: Medicine) -> int:
    medicine.refresh_from_db()
    return medicine.quantity


class CheckoutHappyPathTests(TestCase):
    """
    GUARANTEES:
    - one sale per checkout, total == sum of line subtotals
    - stock decremented by exactly the sold quantity
    - cart cleared on success
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email="cashier@clinic.test", password="pass12345", username="cashier", role="sales"
        )
        self.coordinator = CheckoutCoordinator()

    def test_single_line_checkout(self):
        med = _medicine("Paracetamol", 10, "2.50")
        cart = _cart((med, 3))

        result = self.coordinator.checkout(cart, "cashier", seller=self.user)

        self.assertIsNone(result.warning)
        self.assertEqual(result.sale.total_amount, Decimal("7.50"))
        self.assertEqual(result.sale.seller_identity, "cashier")
        self.assertEqual(result.sale.seller, self.user)
        self.assertEqual(_quantity(med), 7)
        self.assertTrue(cart.is_empty)
        self.assertEqual(Sale.objects.count(), 1)
        self.assertEqual(self.coordinator.state, CheckoutState.COMMITTED)

    def test_multi_line_totals_and_order(self):
        first = _medicine("Amoxicillin", 5, "4.20")
        second = _medicine("Cetirizine", 8, "0.35")
        cart = _cart((first, 2), (second, 3))

        sale = self.coordinator.checkout(cart, "cashier").sale
        lines = list(sale.lines.all())

        self.assertEqual([line.name for line in lines], ["Amoxicillin", "Cetirizine"])
        self.assertEqual([line.position for line in lines], [1, 2])
        self.assertEqual(lines[0].subtotal, Decimal("8.40"))
        self.assertEqual(lines[1].subtotal, Decimal("1.05"))
        self.assertEqual(sale.total_amount, sum(line.subtotal for line in lines))
        self.assertEqual(_quantity(first), 3)
        self.assertEqual(_quantity(second), 5)

    def test_sale_uses_current_catalog_price_and_name(self):
        med = _medicine("Ibuprofen", 4, "1.00")
        cart = _cart((med, 2))

        Medicine.objects.filter(pk=med.pk).update(price=Decimal("1.25"), name="Ibuprofen 200mg")

        sale = self.coordinator.checkout(cart, "cashier").sale
        line = sale.lines.get()

        self.assertEqual(line.unit_price, Decimal("1.25"))
        self.assertEqual(line.name, "Ibuprofen 200mg")
        self.assertEqual(sale.total_amount, Decimal("2.50"))

    def test_selling_the_last_units_leaves_zero(self):
        med = _medicine("Loratadine", 2, "1.80")
        self.coordinator.checkout(_cart((med, 2)), "cashier")
        self.assertEqual(_quantity(med), 0)


class CheckoutStockChangeTests(TestCase):
    """
    GUARANTEES:
    - lines are clamped to current stock; zero-stock lines are dropped
    - clamped/dropped names come back in one StockChangedWarning
    - a cart whose every line is dropped raises EmptyCartError, nothing written
    """

    def setUp(self):
        self.coordinator = CheckoutCoordinator()

    def test_line_clamped_to_current_stock(self):
        med = _medicine("Omeprazole", 5, "3.00")
        cart = _cart((med, 5))
        Medicine.objects.filter(pk=med.pk).update(quantity=2)

        result = self.coordinator.checkout(cart, "cashier")

        self.assertIsInstance(result.warning, StockChangedWarning)
        self.assertEqual(result.warning.item_names, ["Omeprazole"])
        self.assertEqual(result.sale.lines.get().quantity, 2)
        self.assertEqual(result.sale.total_amount, Decimal("6.00"))
        self.assertEqual(_quantity(med), 0)

    def test_sold_out_line_dropped_others_sold(self):
        kept = _medicine("Metformin", 6, "0.90")
        gone = _medicine("Salbutamol", 1, "7.50")
        cart = _cart((kept, 2), (gone, 1))
        Medicine.objects.filter(pk=gone.pk).update(quantity=0)

        result = self.coordinator.checkout(cart, "cashier")

        self.assertEqual(result.warning.item_names, ["Salbutamol"])
        self.assertEqual([line.name for line in result.sale.lines.all()], ["Metformin"])
        self.assertEqual(result.sale.total_amount, Decimal("1.80"))

    def test_deleted_medicine_dropped_with_cart_name(self):
        kept = _medicine("Metformin", 6, "0.90")
        deleted = _medicine("Discontinued", 3, "5.00")
        cart = _cart((kept, 1), (deleted, 1))
        StockCatalog().delete(deleted.pk)

        result = self.coordinator.checkout(cart, "cashier")

        self.assertEqual(result.warning.item_names, ["Discontinued"])
        self.assertEqual(result.sale.lines.count(), 1)

    def test_every_line_dropped_is_empty_cart(self):
        med = _medicine("Insulin", 2, "12.00")
        cart = _cart((med, 2))
        Medicine.objects.filter(pk=med.pk).update(quantity=0)

        with self.assertRaises(EmptyCartError) as ctx:
            self.coordinator.checkout(cart, "cashier")

        self.assertEqual(ctx.exception.warning.item_names, ["Insulin"])
        self.assertEqual(Sale.objects.count(), 0)
        self.assertFalse(cart.is_empty)
        self.assertEqual(self.coordinator.state, CheckoutState.ABORTED)


class CheckoutEmptyCartTests(TestCase):
    def test_empty_cart_touches_neither_catalog_nor_ledger(self):
        catalog = mock.Mock(spec=StockCatalog)
        ledger = mock.Mock(spec=SalesLedger)
        coordinator = CheckoutCoordinator(catalog=catalog, ledger=ledger)

        with self.assertRaises(EmptyCartError):
            coordinator.checkout(CartSession(), "cashier")

        self.assertEqual(catalog.mock_calls, [])
        self.assertEqual(ledger.mock_calls, [])


class CheckoutAtomicityTests(TestCase):
    """
    GUARANTEES:
    - a rejected decrement aborts the whole attempt: no sale, no decrement
    - two checkouts racing for the last unit: exactly one wins
    - database failure surfaces as PersistenceError with nothing applied
    """

    def setUp(self):
        self.coordinator = CheckoutCoordinator()

    def test_insufficient_stock_rolls_back_earlier_decrements(self):
        first = _medicine("Amoxicillin", 5, "4.20")
        second = _medicine("Cetirizine", 5, "0.35")
        cart = _cart((first, 2), (second, 2))

        plan = self.coordinator.prepare(cart)
        # stock moves between validation and commit
        Medicine.objects.filter(pk=second.pk).update(quantity=1)

        with self.assertRaises(InsufficientStock) as ctx:
            self.coordinator.commit(plan, "cashier")

        self.assertEqual(ctx.exception.name, "Cetirizine")
        self.assertEqual(_quantity(first), 5)
        self.assertEqual(_quantity(second), 1)
        self.assertEqual(Sale.objects.count(), 0)
        self.assertEqual(SaleLine.objects.count(), 0)
        self.assertEqual(self.coordinator.state, CheckoutState.ABORTED)

    def test_race_for_last_unit_has_one_winner(self):
        med = _medicine("Epinephrine", 1, "25.00")
        cart_a = _cart((med, 1))
        cart_b = _cart((med, 1))

        plan_a = CheckoutCoordinator().prepare(cart_a)
        plan_b = CheckoutCoordinator().prepare(cart_b)

        sale = CheckoutCoordinator().commit(plan_a, "operator-a")
        with self.assertRaises(InsufficientStock):
            CheckoutCoordinator().commit(plan_b, "operator-b")

        self.assertEqual(_quantity(med), 0)
        self.assertEqual(list(Sale.objects.values_list("pk", flat=True)), [sale.pk])

    def test_database_failure_is_persistence_error(self):
        med = _medicine("Paracetamol", 10, "2.50")
        cart = _cart((med, 4))

        ledger = mock.Mock(spec=SalesLedger)
        ledger.append.side_effect = OperationalError("could not connect")
        coordinator = CheckoutCoordinator(ledger=ledger)

        with self.assertRaises(PersistenceError):
            coordinator.checkout(cart, "cashier")

        self.assertEqual(_quantity(med), 10)
        self.assertEqual(cart.get(med.pk).quantity, 4)
        self.assertEqual(coordinator.state, CheckoutState.ABORTED)

    def test_catalog_read_failure_is_persistence_error(self):
        med = _medicine("Paracetamol", 10, "2.50")
        cart = _cart((med, 1))

        catalog = mock.Mock(spec=StockCatalog)
        catalog.get_many.side_effect = OperationalError("timeout")
        ledger = mock.Mock(spec=SalesLedger)

        with self.assertRaises(PersistenceError):
            CheckoutCoordinator(catalog=catalog, ledger=ledger).checkout(cart, "cashier")

        ledger.append.assert_not_called()
        catalog.decrement.assert_not_called()

    def test_unexpected_commit_failure_ends_aborted(self):
        med = _medicine("Paracetamol", 10, "2.50")
        cart = _cart((med, 2))

        ledger = mock.Mock(spec=SalesLedger)
        ledger.append.side_effect = LedgerIntegrityError("A sale needs at least one line.")
        coordinator = CheckoutCoordinator(ledger=ledger)

        with self.assertRaises(LedgerIntegrityError):
            coordinator.checkout(cart, "cashier")

        self.assertEqual(coordinator.state, CheckoutState.ABORTED)
        self.assertEqual(_quantity(med), 10)
        self.assertEqual(cart.get(med.pk).quantity, 2)


class CheckoutConcurrencyTests(TransactionTestCase):
    """
    GUARANTEES:
    - two operators committing the last unit at the same moment, each on its
      own connection: exactly one sale, stock ends at zero, never negative
    """

    def setUp(self):
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            self.skipTest("needs a file-backed or server database for concurrent connections")

    def test_concurrent_commits_for_last_unit(self):
        med = _medicine("Epinephrine", 1, "25.00")
        plans = [CheckoutCoordinator().prepare(_cart((med, 1))) for _ in range(2)]

        barrier = threading.Barrier(len(plans))
        outcomes = []

        def commit(plan, operator):
            try:
                barrier.wait()
                CheckoutCoordinator().commit(plan, operator)
                outcomes.append("committed")
            except InsufficientStock:
                outcomes.append("insufficient_stock")
            finally:
                connection.close()

        threads = [
            threading.Thread(target=commit, args=(plan, f"operator-{i}"))
            for i, plan in enumerate(plans)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(sorted(outcomes), ["committed", "insufficient_stock"])
        self.assertEqual(_quantity(med), 0)
        self.assertEqual(Sale.objects.count(), 1)
        self.assertEqual(SaleLine.objects.count(), 1)
