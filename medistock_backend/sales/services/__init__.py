from .checkout_coordinator import (
    CheckoutCoordinator,
    CheckoutPlan,
    CheckoutResult,
    CheckoutState,
)
from .exceptions import (
    CheckoutError,
    EmptyCartError,
    InsufficientStock,
    LedgerIntegrityError,
    PersistenceError,
    SaleNotFound,
    StockChangedWarning,
)
from .invoice_renderer import (
    InvoicePresentation,
    build_invoice_content,
    invoice_filename,
    render_invoice,
)
from .ledger import SaleDraft, SaleLineDraft, SalesLedger

__all__ = [
    "CheckoutCoordinator",
    "CheckoutPlan",
    "CheckoutResult",
    "CheckoutState",
    "CheckoutError",
    "EmptyCartError",
    "InsufficientStock",
    "LedgerIntegrityError",
    "PersistenceError",
    "SaleNotFound",
    "StockChangedWarning",
    "InvoicePresentation",
    "build_invoice_content",
    "invoice_filename",
    "render_invoice",
    "SaleDraft",
    "SaleLineDraft",
    "SalesLedger",
]
