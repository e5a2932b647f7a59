# users/services/identity.py

"""
OPERATOR IDENTITY

Supplies the checkout and invoice layers with who is selling and how the
clinic presents itself. No authentication happens here: callers pass an
already-authenticated operator.
"""

from __future__ import annotations

from django.conf import settings

from sales.services.invoice_renderer import InvoicePresentation


def seller_identity_for(user) -> str:
    """Display name stamped on a sale (username, falling back to email)."""
    ident = (getattr(user, "username", "") or "").strip()
    if ident:
        return ident
    return (getattr(user, "email", "") or "").strip()


def presentation_for(user) -> InvoicePresentation:
    clinic_name = (getattr(user, "clinic_name", "") or "").strip()
    currency = (getattr(user, "currency", "") or "").strip().upper()

    return InvoicePresentation(
        clinic_name=clinic_name or settings.CLINIC_DEFAULT_NAME,
        currency=currency or settings.DEFAULT_CURRENCY,
    )
