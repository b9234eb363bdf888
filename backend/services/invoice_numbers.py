# services/invoice_numbers.py
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from models.invoice import Invoice, InvoiceCounter
from utils.dates import utcnow

logger = logging.getLogger(__name__)

COUNTER_ID = 1
NUMBER_PREFIX = "INV"


def format_invoice_number(year: int, sequence: int) -> str:
    return f"{NUMBER_PREFIX}-{year}-{sequence:06d}"


def _last_issued_sequence(db: Session) -> int:
    # Suffix of the most recently dated invoice, across all years
    last = db.query(Invoice).order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).first()
    if last is None or last.sequence is None:
        return 0
    return last.sequence


def allocate_sequence(db: Session) -> int:
    """
    Reserves the next invoice sequence value inside the caller's transaction.

    The increment is a single UPDATE, so the row stays locked until the
    caller commits or rolls back. A rollback releases the value again.
    """
    result = db.execute(
        update(InvoiceCounter)
        .where(InvoiceCounter.id == COUNTER_ID)
        .values(value=InvoiceCounter.value + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        # First allocation: continue from whatever invoices already exist.
        # A concurrent seed fails on the primary key and the caller retries.
        seeded = _last_issued_sequence(db) + 1
        db.add(InvoiceCounter(id=COUNTER_ID, value=seeded))
        db.flush()
        logger.info("Seeded invoice counter at %s", seeded)
        return seeded

    return db.execute(select(InvoiceCounter.value).where(InvoiceCounter.id == COUNTER_ID)).scalar_one()


def next_invoice_number(db: Session, year: Optional[int] = None) -> str:
    """Returns the next `INV-{year}-{sequence:06d}` number; the sequence never resets."""
    sequence = allocate_sequence(db)
    return format_invoice_number(year or utcnow().year, sequence)
