# inventory/tests/test_api.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import Medicine
from inventory.services import StockCatalog

User = get_user_model()


class MedicineApiTests(TestCase):
    """
    GUARANTEES:
    - any operator can browse; only admins write
    - writes go through the catalog rules (error envelope on bad input)
    - ?in_stock=true hides sold-out medicines
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@clinic.test", password="pass12345", username="admin", role="admin"
        )
        self.cashier = User.objects.create_user(
            email="cashier@clinic.test", password="pass12345", username="cashier", role="sales"
        )
        self.client = APIClient()
        self.list_url = reverse("medicines-list")

        self.med = Medicine.objects.create(
            name="Cetirizine", batch_number="CTZ-1", quantity=10, price=Decimal("1.20"), min_stock_level=10
        )
        self.sold_out = Medicine.objects.create(
            name="Loratadine", batch_number="LRT-1", quantity=0, price=Decimal("1.80")
        )

    def test_requires_authentication(self):
        res = self.client.get(self.list_url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_operator_can_list_and_filter_in_stock(self):
        self.client.force_authenticate(self.cashier)

        res = self.client.get(self.list_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 2)

        res = self.client.get(self.list_url, {"in_stock": "true"})
        self.assertEqual([row["name"] for row in res.data], ["Cetirizine"])

    def test_search_by_q(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.get(self.list_url, {"q": "lrt"})
        self.assertEqual([row["name"] for row in res.data], ["Loratadine"])

    def test_list_filters_match_catalog_reads(self):
        Medicine.objects.create(
            name="Cetirizine Syrup", batch_number="CTZ-2", quantity=0, price=Decimal("3.10")
        )
        self.client.force_authenticate(self.cashier)
        catalog = StockCatalog()

        for params in ({"q": "ctz"}, {"in_stock": "true"}, {"q": "cetirizine", "in_stock": "1"}):
            with self.subTest(params=params):
                res = self.client.get(self.list_url, params)
                expected = catalog.list(
                    search=params.get("q"), in_stock="in_stock" in params
                )
                self.assertEqual(
                    {row["id"] for row in res.data}, {str(m.pk) for m in expected}
                )

    def test_sales_role_cannot_create(self):
        self.client.force_authenticate(self.cashier)
        res = self.client.post(
            self.list_url, {"name": "X", "price": "1.00", "quantity": 1}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_create_and_update(self):
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            self.list_url,
            {"name": "Omeprazole", "price": "4.00", "quantity": 12, "batch_number": "OMP-3"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        med_id = res.data["id"]

        res = self.client.patch(
            reverse("medicines-detail", args=[med_id]), {"quantity": 30}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["quantity"], 30)
        self.assertEqual(res.data["name"], "Omeprazole")
        self.assertEqual(Medicine.objects.filter(name="Omeprazole").count(), 1)

    def test_create_with_zero_price_returns_validation_envelope(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            self.list_url, {"name": "Bad", "price": "0", "quantity": 1}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("price", res.data["error"]["details"])

    def test_delete_then_missing(self):
        self.client.force_authenticate(self.admin)
        url = reverse("medicines-detail", args=[self.sold_out.pk])

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Medicine.objects.filter(pk=self.sold_out.pk).exists())

        res = self.client.delete(reverse("medicines-detail", args=[uuid.uuid4()]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_low_stock_alerts(self):
        self.client.force_authenticate(self.cashier)
        url = reverse("medicines-low-stock-alerts")

        res = self.client.get(url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual({row["name"] for row in res.data["results"]}, {"Cetirizine", "Loratadine"})

        res = self.client.get(url, {"threshold": "0"})
        self.assertEqual([row["name"] for row in res.data["results"]], ["Loratadine"])

        res = self.client.get(url, {"threshold": "-2"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
