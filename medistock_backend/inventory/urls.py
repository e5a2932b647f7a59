# inventory/urls.py

"""
INVENTORY URLS

Purpose:
- Register catalog routes under /api/inventory/
- Includes viewset actions like:
    /inventory/medicines/alerts/low-stock/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.views import MedicineViewSet

router = DefaultRouter()

router.register(r"medicines", MedicineViewSet, basename="medicines")

urlpatterns = [
    path("", include(router.urls)),
]
