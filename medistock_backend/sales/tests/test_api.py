# sales/tests/test_api.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import Medicine
from sales.services import SaleDraft, SaleLineDraft, SalesLedger

User = get_user_model()


class SalesApiTests(TestCase):
    """
    GUARANTEES:
    - operators can read the ledger (list newest first, retrieve)
    - invoice endpoint returns invoice_<id8>.pdf
    - dashboard sums revenue and stock, counts low stock, shows 5 recent sales
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email="cashier@clinic.test",
            password="pass12345",
            username="cashier",
            role="sales",
            clinic_name="Sunrise Clinic",
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

        self.ledger = SalesLedger()
        self.sales = [
            self.ledger.append(
                SaleDraft(
                    seller_identity="cashier",
                    lines=(SaleLineDraft(medicine_id=None, name="Paracetamol", quantity=n, unit_price=Decimal("2.00")),),
                )
            )
            for n in range(1, 8)
        ]

        Medicine.objects.create(name="Low", quantity=2, min_stock_level=5, price=Decimal("1.00"))
        Medicine.objects.create(name="Fine", quantity=40, min_stock_level=5, price=Decimal("1.00"))

    def test_list_and_retrieve(self):
        res = self.client.get(reverse("sales:sales-list"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 7)

        sale = self.sales[0]
        res = self.client.get(reverse("sales:sales-detail", args=[sale.pk]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["invoice_number"], str(sale.pk)[:8].upper())
        self.assertEqual(res.data["lines"][0]["name"], "Paracetamol")

    def test_retrieve_unknown(self):
        res = self.client.get(reverse("sales:sales-detail", args=[uuid.uuid4()]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_invoice_pdf(self):
        sale = self.sales[0]
        res = self.client.get(reverse("sales:sales-invoice", args=[sale.pk]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res["Content-Type"], "application/pdf")
        self.assertIn(f'filename="invoice_{str(sale.pk)[:8]}.pdf"', res["Content-Disposition"])
        self.assertTrue(res.content.startswith(b"%PDF"))

    def test_dashboard(self):
        res = self.client.get(reverse("sales:dashboard"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        # 2 * (1 + 2 + ... + 7)
        self.assertEqual(res.data["total_revenue"], "56.00")
        self.assertEqual(res.data["total_stock"], 42)
        self.assertEqual(res.data["low_stock_count"], 1)
        self.assertEqual(len(res.data["recent_sales"]), 5)
        self.assertEqual(res.data["currency"], "USD")

    def test_requires_authentication(self):
        self.assertEqual(
            APIClient().get(reverse("sales:sales-list")).status_code,
            status.HTTP_401_UNAUTHORIZED,
        )
