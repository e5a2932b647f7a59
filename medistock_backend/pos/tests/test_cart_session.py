# pos/tests/test_cart_session.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.test import SimpleTestCase

from pos.services import CartLineNotFound, CartSession


@dataclass
class _Med:
    """Stand-in for a Medicine row (the session never touches the database)."""

    name: str
    price: Decimal
    quantity: int
    id: uuid.UUID = None

    def __post_init__(self):
        if self.id is None:
            self.id = uuid.uuid4()

    @property
    def pk(self):
        return self.id


class CartSessionAddTests(SimpleTestCase):
    """
    GUARANTEES:
    - add inserts a new line at quantity 1 only when stock > 0
    - add increments by one while below observed stock, never beyond
    - unit price and name are snapshotted at add time
    """

    def test_add_new_line(self):
        cart = CartSession()
        med = _Med("Paracetamol", Decimal("2.50"), 3)

        line = cart.add(med)

        self.assertEqual(line.quantity, 1)
        self.assertEqual(line.unit_price, Decimal("2.50"))
        self.assertEqual(line.stock_quantity, 3)
        self.assertEqual(cart.item_count, 1)

    def test_add_sold_out_is_noop(self):
        cart = CartSession()
        self.assertIsNone(cart.add(_Med("Gone", Decimal("1.00"), 0)))
        self.assertTrue(cart.is_empty)

    def test_add_increments_up_to_stock(self):
        cart = CartSession()
        med = _Med("Ibuprofen", Decimal("1.10"), 2)

        cart.add(med)
        cart.add(med)
        cart.add(med)

        self.assertEqual(len(cart), 1)
        self.assertEqual(cart.get(med.pk).quantity, 2)

    def test_price_snapshot_is_kept_on_re_add(self):
        cart = CartSession()
        med = _Med("Cetirizine", Decimal("1.20"), 5)
        cart.add(med)

        med.price = Decimal("9.99")
        cart.add(med)

        self.assertEqual(cart.get(med.pk).unit_price, Decimal("1.20"))
        self.assertEqual(cart.total(), Decimal("2.40"))

    def test_re_add_after_sell_out_leaves_line_unchanged(self):
        cart = CartSession()
        med = _Med("Amoxicillin", Decimal("4.20"), 5)
        for _ in range(3):
            cart.add(med)

        med.quantity = 0
        line = cart.add(med)

        self.assertEqual(line.quantity, 3)
        self.assertEqual(line.stock_quantity, 5)
        self.assertLessEqual(line.quantity, line.stock_quantity)

    def test_re_add_after_stock_shrinks_clamps_line(self):
        cart = CartSession()
        med = _Med("Loratadine", Decimal("0.90"), 5)
        for _ in range(4):
            cart.add(med)

        med.quantity = 2
        line = cart.add(med)

        self.assertEqual(line.quantity, 2)
        self.assertEqual(line.stock_quantity, 2)


class CartSessionQuantityTests(SimpleTestCase):
    """
    GUARANTEES:
    - set_quantity clamps into [1, stock]
    - a value clamping to 0 leaves the line unchanged
    - remove is unconditional
    - total is recomputed on every call
    """

    def setUp(self):
        self.cart = CartSession()
        self.med = _Med("Amoxicillin", Decimal("4.00"), 5)
        self.cart.add(self.med)

    def test_set_quantity_within_stock(self):
        self.cart.set_quantity(self.med.pk, 4)
        self.assertEqual(self.cart.get(self.med.pk).quantity, 4)
        self.assertEqual(self.cart.total(), Decimal("16.00"))

    def test_set_quantity_clamps_to_stock(self):
        self.cart.set_quantity(self.med.pk, 50)
        self.assertEqual(self.cart.get(self.med.pk).quantity, 5)

    def test_set_quantity_zero_or_negative_is_noop(self):
        self.cart.set_quantity(self.med.pk, 3)
        self.cart.set_quantity(self.med.pk, 0)
        self.cart.set_quantity(self.med.pk, -4)
        self.assertEqual(self.cart.get(self.med.pk).quantity, 3)

    def test_adjust_by_delta(self):
        self.cart.adjust(self.med.pk, +2)
        self.assertEqual(self.cart.get(self.med.pk).quantity, 3)
        self.cart.adjust(self.med.pk, -5)
        self.assertEqual(self.cart.get(self.med.pk).quantity, 3)

    def test_set_quantity_unknown_line(self):
        with self.assertRaises(CartLineNotFound):
            self.cart.set_quantity(uuid.uuid4(), 1)

    def test_remove_is_unconditional(self):
        self.cart.remove(uuid.uuid4())
        self.cart.remove(self.med.pk)
        self.cart.remove(self.med.pk)
        self.assertTrue(self.cart.is_empty)
        self.assertEqual(self.cart.total(), Decimal("0.00"))

    def test_total_tracks_every_mutation(self):
        other = _Med("Omeprazole", Decimal("0.35"), 10)
        self.cart.add(other)
        self.cart.set_quantity(other.pk, 3)

        self.assertEqual(self.cart.total(), Decimal("5.05"))

        self.cart.remove(self.med.pk)
        self.assertEqual(self.cart.total(), Decimal("1.05"))

    def test_clear(self):
        self.cart.clear()
        self.assertTrue(self.cart.is_empty)
        self.assertEqual(self.cart.item_count, 0)


class CartSessionCacheShapeTests(SimpleTestCase):
    def test_to_dict_from_dict_keeps_lines_and_order(self):
        cart = CartSession()
        first = _Med("A", Decimal("1.00"), 2)
        second = _Med("B", Decimal("3.30"), 9)
        cart.add(first)
        cart.add(second)
        cart.set_quantity(second.pk, 4)

        restored = CartSession.from_dict(cart.to_dict())

        self.assertEqual([line.name for line in restored.lines], ["A", "B"])
        self.assertEqual(restored.get(second.pk).quantity, 4)
        self.assertEqual(restored.get(second.pk).unit_price, Decimal("3.30"))
        self.assertEqual(restored.total(), cart.total())

    def test_from_dict_none_is_empty(self):
        self.assertTrue(CartSession.from_dict(None).is_empty)
