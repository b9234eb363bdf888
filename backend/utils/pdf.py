# backend/utils/pdf.py

import logging
import re
import uuid
from pathlib import Path
from typing import List, Optional

from config import settings
# Models are imported for type hints only
from models.invoice import Invoice
from models.order import OrderItem
from models.users import Customer

logger = logging.getLogger(__name__)

# Path configuration
STORAGE_DIR = Path(settings.INVOICE_STORAGE_DIR)
FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

# Built-in fonts unless the DejaVu files are installed
FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

def ensure_storage_dir() -> None:
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)

def new_document_name(invoice: Invoice) -> str:
    """Unique file name per rendering, so earlier documents stay fetchable."""
    safe_number = re.sub(r"[^A-Za-z0-9_-]", "_", invoice.invoice_number or "INV")
    return f"{safe_number}_{invoice.id}_{uuid.uuid4().hex[:8]}.pdf"

def get_pdf_path(file_name: str) -> Path:
    ensure_storage_dir()
    return STORAGE_DIR / file_name

def document_url(file_name: str) -> str:
    return f"{settings.INVOICE_URL_PREFIX.rstrip('/')}/{file_name}"

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts in ReportLab when they are available."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    if not FONT_REGULAR_PATH.exists():
        return

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    FONT_BOLD_NAME = "DejaVuSans"

    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    logger.info("Registered DejaVu fonts for invoice rendering")

def generate_invoice_pdf(
    invoice: Invoice,
    items: List[OrderItem],
    out_path: Path,
    customer: Optional[Customer] = None,
    company: Optional[dict] = None,
) -> None:
    """
    Draws an invoice on a single A4 canvas (new pages as the table grows):
    - header with invoice number, date and order reference
    - seller (left) and buyer (right)
    - line table: description, unit price, quantity, line total
    - subtotal / total block and a short note
    """
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas
    from reportlab.lib.units import mm

    _init_fonts()
    ensure_storage_dir()

    c = canvas.Canvas(str(out_path), pagesize=A4)
    width, height = A4

    # Helper for drawing a single string
    def draw_text(x, y, text, font=None, size=10, align="left"):
        c.setFont(font or FONT_REGULAR_NAME, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)

    # --- 1. HEADER ---
    y = height - 20 * mm
    draw_text(190 * mm, y, "INVOICE", font=FONT_BOLD_NAME, size=18, align="right")
    y -= 7 * mm
    draw_text(190 * mm, y, f"Invoice #: {invoice.invoice_number}", size=10, align="right")
    y -= 5 * mm
    invoice_date = invoice.invoice_date.strftime("%Y-%m-%d") if invoice.invoice_date else ""
    draw_text(190 * mm, y, f"Date: {invoice_date}", size=9, align="right")
    y -= 5 * mm
    draw_text(190 * mm, y, f"Order ID: {invoice.order_id}", size=9, align="right")

    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 10 * mm

    # --- 2. SELLER / BUYER ---
    y_columns = y
    company = company or {}
    draw_text(20 * mm, y, company.get("name") or "", font=FONT_BOLD_NAME, size=14)
    for line in (company.get("address"), company.get("email")):
        if line:
            y -= 5 * mm
            draw_text(20 * mm, y, line, size=9)

    y = y_columns
    draw_text(110 * mm, y, "Bill To:", font=FONT_BOLD_NAME, size=12)
    y -= 5 * mm
    draw_text(110 * mm, y, customer.name if customer else "Unknown")
    if customer:
        for line in (customer.address, customer.email, customer.phone):
            if line:
                y -= 5 * mm
                draw_text(110 * mm, y, line, size=9)

    y = y_columns - 35 * mm

    # --- 3. LINE TABLE ---
    c.setFillColorRGB(0.95, 0.95, 0.95)
    c.rect(20 * mm, y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
    c.setFillColorRGB(0, 0, 0)

    c.setFont(FONT_BOLD_NAME, 9)
    c.drawString(22 * mm, y, "Description")
    c.drawRightString(130 * mm, y, "Unit")
    c.drawRightString(150 * mm, y, "Qty")
    c.drawRightString(185 * mm, y, "Total")
    y -= 8 * mm

    c.setFont(FONT_REGULAR_NAME, 9)
    subtotal = 0
    for it in items:
        name = it.product.name if it.product else f"ID:{it.product_id}"
        line_total = it.price * it.quantity
        subtotal += line_total

        c.drawString(22 * mm, y, str(name)[:60])
        c.drawRightString(130 * mm, y, f"{it.price:.2f}")
        c.drawRightString(150 * mm, y, f"{it.quantity}")
        c.drawRightString(185 * mm, y, f"{line_total:.2f}")

        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm

        # New page when the table runs out of room
        if y < 40 * mm:
            c.showPage()
            y = height - 20 * mm
            c.setFont(FONT_REGULAR_NAME, 9)

    # --- 4. TOTALS ---
    y -= 5 * mm
    if y < 40 * mm:
        c.showPage()
        y = height - 30 * mm

    c.setFont(FONT_REGULAR_NAME, 10)
    c.drawRightString(150 * mm, y, "Subtotal:")
    c.drawRightString(185 * mm, y, f"{subtotal:.2f}")
    y -= 5 * mm
    c.drawRightString(150 * mm, y, "Tax:")
    c.drawRightString(185 * mm, y, f"{0:.2f}")
    y -= 6 * mm

    c.setFont(FONT_BOLD_NAME, 12)
    c.drawRightString(150 * mm, y, "Total:")
    c.drawRightString(185 * mm, y, f"{invoice.amount:.2f}")

    # --- 5. NOTE ---
    y -= 15 * mm
    draw_text(20 * mm, y, "Thank you for your order. Please contact us with any questions about this invoice.", size=9)

    c.showPage()
    c.save()
