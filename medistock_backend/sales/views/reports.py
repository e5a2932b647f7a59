# sales/views/reports.py

"""
PATH: sales/views/reports.py

DASHBOARD (OPERATOR HOME SCREEN)

Numbers:
- total_revenue: sum of every sale's total_amount
- total_stock: sum of on-hand units across the catalog
- low_stock_count: medicines at or below their min_stock_level
- recent_sales: the five newest sales
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import F, Sum
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import Medicine
from sales.serializers import SaleSerializer
from sales.services import SalesLedger
from users.permissions import IsOperator
from users.services.identity import presentation_for

RECENT_SALES_LIMIT = 5


def _money(x) -> str:
    """
    JSON-safe money string.
    """
    if x is None:
        return "0.00"
    return f"{Decimal(str(x)):.2f}"


class DashboardView(APIView):
    permission_classes = [IsOperator]

    @extend_schema(responses={200: dict}, description="Revenue, stock and recent sales summary")
    def get(self, request):
        ledger = SalesLedger()

        total_stock = Medicine.objects.aggregate(total=Sum("quantity")).get("total") or 0
        low_stock_count = Medicine.objects.filter(quantity__lte=F("min_stock_level")).count()

        return Response(
            {
                "currency": presentation_for(request.user).currency,
                "total_revenue": _money(ledger.total_revenue()),
                "total_stock": int(total_stock),
                "low_stock_count": low_stock_count,
                "recent_sales": SaleSerializer(
                    ledger.list(limit=RECENT_SALES_LIMIT), many=True
                ).data,
            }
        )
