# sales/services/invoice_renderer.py

"""
======================================================
PATH: sales/services/invoice_renderer.py
======================================================
INVOICE RENDERER (PDF)

Purpose:
- Turn one committed Sale into a printable PDF receipt.

Hard rules:
- Pure: reads only the sale and the presentation. Never touches the catalog
  or the cart.
- Deterministic: the same sale + presentation yields the same bytes
  (reportlab invariant mode).
- The printed total is sale.total_amount, never a re-summed value.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from decimal import Decimal

from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 15 * mm
BOTTOM_MARGIN = 20 * mm
ROW_HEIGHT = 7 * mm
NAME_MAX_CHARS = 42

# column x positions: item, qty, unit price, subtotal
COLUMNS = (15 * mm, 100 * mm, 130 * mm, 160 * mm)


@dataclass(frozen=True)
class InvoicePresentation:
    clinic_name: str
    currency: str


@dataclass(frozen=True)
class InvoiceContent:
    title: str
    header_lines: tuple[str, ...]
    column_titles: tuple[str, ...]
    rows: tuple[tuple[str, str, str, str], ...]
    total_line: str
    invoice_id: str


def format_money(amount, currency: str) -> str:
    return f"{currency} {Decimal(str(amount)):.2f}"


def invoice_id_for(sale) -> str:
    return str(sale.id)[:8].upper()


def invoice_filename(sale) -> str:
    return f"invoice_{str(sale.id)[:8]}.pdf"


def build_invoice_content(sale, presentation: InvoicePresentation) -> InvoiceContent:
    """
    Text content of the invoice, in print order. Split from drawing so the
    content is checkable without parsing PDF bytes.
    """
    currency = presentation.currency
    invoice_id = invoice_id_for(sale)
    stamped = timezone.localtime(sale.created_at).strftime("%Y-%m-%d %H:%M:%S")

    rows = tuple(
        (
            line.name,
            str(line.quantity),
            format_money(line.unit_price, currency),
            format_money(line.subtotal, currency),
        )
        for line in sale.lines.all()
    )

    return InvoiceContent(
        title=presentation.clinic_name,
        header_lines=(
            f"Date: {stamped}",
            f"Invoice ID: {invoice_id}",
            f"Served by: {sale.seller_identity}",
        ),
        column_titles=("Item", "Qty", "Price", "Total"),
        rows=rows,
        total_line=f"Total Amount: {format_money(sale.total_amount, currency)}",
        invoice_id=invoice_id,
    )


def _clip(text: str) -> str:
    if len(text) <= NAME_MAX_CHARS:
        return text
    return text[: NAME_MAX_CHARS - 3] + "..."


def _draw_columns(pdf, y, values) -> None:
    for x, value in zip(COLUMNS, values):
        pdf.drawString(x, y, value)


def render_invoice(sale, presentation: InvoicePresentation) -> bytes:
    content = build_invoice_content(sale, presentation)

    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4, invariant=1)
    pdf.setTitle(f"Invoice {content.invoice_id}")
    pdf.setAuthor(content.title)

    y = PAGE_HEIGHT - 20 * mm
    pdf.setFont("Helvetica-Bold", 18)
    pdf.drawCentredString(PAGE_WIDTH / 2, y, content.title)

    pdf.setFont("Helvetica", 10)
    y = PAGE_HEIGHT - 30 * mm
    for text in content.header_lines:
        pdf.drawString(LEFT, y, text)
        y -= 5 * mm

    y = PAGE_HEIGHT - 50 * mm
    pdf.setFont("Helvetica-Bold", 11)
    _draw_columns(pdf, y, content.column_titles)
    y -= 3 * mm
    pdf.line(LEFT, y, PAGE_WIDTH - LEFT, y)
    y -= ROW_HEIGHT

    pdf.setFont("Helvetica", 10)
    for name, qty, price, subtotal in content.rows:
        if y < BOTTOM_MARGIN:
            pdf.showPage()
            pdf.setFont("Helvetica", 10)
            y = PAGE_HEIGHT - 20 * mm
        _draw_columns(pdf, y, (_clip(name), qty, price, subtotal))
        y -= ROW_HEIGHT

    if y < BOTTOM_MARGIN + ROW_HEIGHT:
        pdf.showPage()
        y = PAGE_HEIGHT - 20 * mm

    pdf.line(LEFT, y + 3 * mm, PAGE_WIDTH - LEFT, y + 3 * mm)
    y -= 5 * mm
    pdf.setFont("Helvetica-Bold", 12)
    pdf.drawString(130 * mm, y, content.total_line)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()
