# inventory/views/medicine.py

"""
MEDICINE VIEWSET

Purpose:
- Catalog management endpoints (CRUD + low stock alerts)
- POS browse list (?in_stock=true hides sold-out items)

Key rule alignment:
- Every write goes through StockCatalog (same validation, same create/update
  disambiguation as non-HTTP callers).
- Only admins may write; any operator may read.
"""

from django.core.exceptions import ValidationError
from django.db.models import F
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from backend.api_errors import error_response, validation_error_response
from inventory.models import Medicine
from inventory.serializers import MedicineSerializer, MedicineWriteSerializer
from inventory.services import MedicineNotFound, StockCatalog, filter_medicines
from users.permissions import IsAdminOrReadOnly


def _truthy(raw) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


class MedicineViewSet(viewsets.ModelViewSet):
    """
    Medicine endpoints.

    Query params (list):
    - q=<text>          name or batch number contains
    - in_stock=true     only quantity > 0
    - quantity__lte / expiry_date__lte ... (django-filter)
    - ordering=name|-quantity|expiry_date ...
    """

    serializer_class = MedicineSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = {
        "quantity": ["lte", "gte"],
        "expiry_date": ["lte", "gte"],
    }
    ordering_fields = ["name", "quantity", "price", "expiry_date", "created_at"]

    catalog_class = StockCatalog

    def get_catalog(self) -> StockCatalog:
        return self.catalog_class()

    def get_queryset(self):
        params = self.request.query_params
        qs = filter_medicines(
            Medicine.objects.all(),
            search=params.get("q"),
            in_stock=_truthy(params.get("in_stock")),
        )
        return qs.order_by("-created_at")

    # -----------------------------
    # Writes via StockCatalog
    # -----------------------------
    def _upsert(self, payload: dict, *, http_status: int):
        try:
            medicine = self.get_catalog().upsert(payload)
        except ValidationError as exc:
            return validation_error_response(exc)
        except MedicineNotFound as exc:
            return error_response(
                code="NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        return Response(MedicineSerializer(medicine).data, status=http_status)

    @extend_schema(request=MedicineWriteSerializer, responses={201: MedicineSerializer})
    def create(self, request, *args, **kwargs):
        shape = MedicineWriteSerializer(data=request.data)
        shape.is_valid(raise_exception=True)

        # Creation never trusts a client-supplied id.
        payload = dict(shape.validated_data)
        return self._upsert(payload, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=MedicineWriteSerializer, responses={200: MedicineSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()

        shape = MedicineWriteSerializer(data=request.data, partial=partial)
        shape.is_valid(raise_exception=True)

        payload = {}
        if partial:
            payload = {
                field: getattr(instance, field)
                for field in MedicineWriteSerializer().fields
            }
        payload.update(shape.validated_data)
        payload["id"] = instance.pk

        return self._upsert(payload, http_status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        try:
            self.get_catalog().delete(kwargs.get(self.lookup_field))
        except MedicineNotFound as exc:
            return error_response(
                code="NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -----------------------------
    # Alerts: Low stock
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Override each medicine's min_stock_level with one threshold.",
            ),
        ],
        responses={
            200: OpenApiResponse(
                response=MedicineSerializer(many=True),
                description="Medicines at or below their reorder threshold",
            ),
            400: OpenApiResponse(description="Invalid threshold"),
        },
    )
    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock_alerts(self, request):
        """
        GET /api/inventory/medicines/alerts/low-stock/?threshold=<int>
        """
        qs = self.get_queryset()

        raw_threshold = (request.query_params.get("threshold") or "").strip()
        if raw_threshold:
            try:
                threshold = int(raw_threshold)
                if threshold < 0:
                    raise ValueError
            except ValueError:
                return error_response(
                    code="VALIDATION_ERROR",
                    message="threshold must be a non-negative integer",
                    http_status=status.HTTP_400_BAD_REQUEST,
                )
            qs = qs.filter(quantity__lte=threshold)
        else:
            qs = qs.filter(quantity__lte=F("min_stock_level"))

        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "results": data})
