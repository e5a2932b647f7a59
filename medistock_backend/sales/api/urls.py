# sales/api/urls.py

"""
SALES API URLS

Rules:
- Explicit non-PK routes (like "dashboard") MUST be registered BEFORE router
  URLs, otherwise the router will treat "dashboard" as a <pk>.

Provides:
    GET /api/sales/                  ledger list (newest first)
    GET /api/sales/<uuid>/           one sale
    GET /api/sales/<uuid>/invoice/   PDF invoice
    GET /api/sales/dashboard/        revenue / stock / recent sales
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.viewsets.sale import SaleViewSet
from sales.views import DashboardView

app_name = "sales"

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("", include(router.urls)),
]
