# backend/api_errors.py

"""
API ERROR NORMALIZATION

Every domain failure leaves the API in one envelope:

    {"error": {"code": "...", "message": "...", "details": {...}?}}
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int, details=None):
    body = {"code": code, "message": message}
    if details:
        body["details"] = details
    return Response({"error": body}, status=http_status)


def validation_error_response(exc: ValidationError):
    details = getattr(exc, "message_dict", None)
    if details:
        message = "; ".join(
            f"{field}: {' '.join(str(m) for m in msgs)}" for field, msgs in details.items()
        )
    else:
        message = " ".join(str(m) for m in getattr(exc, "messages", [str(exc)]))

    return error_response(
        code="VALIDATION_ERROR",
        message=message,
        http_status=status.HTTP_400_BAD_REQUEST,
        details=details,
    )
