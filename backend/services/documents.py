# services/documents.py
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, joinedload

from config import settings
from errors import InvoiceNotFoundError, RenderingFailure
from models.invoice import Invoice
from models.order import Order, OrderItem
from utils.pdf import document_url, generate_invoice_pdf, get_pdf_path, new_document_name

logger = logging.getLogger(__name__)


def _company() -> dict:
    return {
        "name": settings.COMPANY_NAME,
        "address": settings.COMPANY_ADDRESS,
        "email": settings.COMPANY_EMAIL,
    }


def regenerate_invoice_document(db: Session, invoice_id: int) -> str:
    """
    Renders the invoice to a new PDF and points `document_url` at it.

    Safe to repeat: each call writes a separate file, so URLs handed out
    earlier keep working, and the invoice always stores the latest one.
    """
    invoice = (
        db.query(Invoice)
        .options(
            joinedload(Invoice.order).joinedload(Order.items).joinedload(OrderItem.product),
            joinedload(Invoice.customer),
        )
        .filter(Invoice.id == invoice_id)
        .first()
    )
    if not invoice:
        raise InvoiceNotFoundError(invoice_id)

    file_name = new_document_name(invoice)
    try:
        generate_invoice_pdf(
            invoice,
            invoice.order.items,
            get_pdf_path(file_name),
            customer=invoice.customer,
            company=_company(),
        )
    except Exception as e:
        raise RenderingFailure(f"Could not render invoice {invoice.invoice_number}: {e}") from e

    url = document_url(file_name)
    invoice.document_url = url
    db.commit()
    return url


def render_invoice_document_task(bind: Engine, invoice_id: int) -> None:
    # Runs after the confirmation response; failures leave document_url empty for a later regenerate
    with Session(bind=bind) as db:
        try:
            url = regenerate_invoice_document(db, invoice_id)
            logger.info("Rendered invoice %s document at %s", invoice_id, url)
        except Exception:
            db.rollback()
            logger.exception("Invoice document rendering failed for invoice %s", invoice_id)
