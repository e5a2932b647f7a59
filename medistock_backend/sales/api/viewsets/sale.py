# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (LEDGER READ)

Purpose:
- "Sales History" API for the operator UI: list + retrieve, newest first.
- Invoice endpoint: PDF receipt for one sale.

Rules:
- Read-only. Sales are created by checkout only and never edited.
- Invoice header (clinic name, currency) comes from the requesting
  operator's profile.

Filters (list):
- q=<text>                  invoice number prefix or seller
- date_from / date_to       YYYY-MM-DD (inclusive)
======================================================
"""

from __future__ import annotations

from django.db.models import Q
from django.http import HttpResponse
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from backend.api_errors import error_response
from sales.models import Sale
from sales.serializers import SaleSerializer
from sales.services import SaleNotFound, SalesLedger, invoice_filename, render_invoice
from users.permissions import IsOperator
from users.services.identity import presentation_for


def _parse_day(raw):
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return parse_date(raw)
    except ValueError:
        return None


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SaleSerializer
    permission_classes = [IsOperator]

    ledger_class = SalesLedger

    def get_ledger(self) -> SalesLedger:
        return self.ledger_class()

    # ======================================================
    # QUERYSET
    # ======================================================

    def get_queryset(self):
        qs = (
            Sale.objects.all()
            .select_related("seller")
            .prefetch_related("lines")
            .order_by("-created_at")
        )

        params = self.request.query_params

        q = (params.get("q") or "").strip()
        if q:
            # invoice numbers are the uppercased id prefix
            qs = qs.filter(Q(seller_identity__icontains=q) | Q(id__istartswith=q.lower()))

        date_from = _parse_day(params.get("date_from"))
        if date_from:
            qs = qs.filter(created_at__date__gte=date_from)

        date_to = _parse_day(params.get("date_to"))
        if date_to:
            qs = qs.filter(created_at__date__lte=date_to)

        return qs

    def retrieve(self, request, *args, **kwargs):
        try:
            sale = self.get_ledger().get(kwargs.get(self.lookup_field))
        except SaleNotFound as exc:
            return error_response(
                code="NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(SaleSerializer(sale).data)

    # ======================================================
    # INVOICE PDF
    # GET /api/sales/:id/invoice/
    # ======================================================

    @extend_schema(
        responses={
            (200, "application/pdf"): OpenApiResponse(
                response=OpenApiTypes.BINARY,
                description="PDF invoice (invoice_<id8>.pdf)",
            ),
            404: OpenApiResponse(description="Sale not found"),
        },
    )
    @action(detail=True, methods=["get"], url_path="invoice")
    def invoice(self, request, pk=None):
        try:
            sale = self.get_ledger().get(pk)
        except SaleNotFound as exc:
            return error_response(
                code="NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        pdf = render_invoice(sale, presentation_for(request.user))

        response = HttpResponse(pdf, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{invoice_filename(sale)}"'
        return response
