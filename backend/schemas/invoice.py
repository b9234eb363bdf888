# schemas/invoice.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from schemas.order import OrderItemOut

# Order summary embedded in an invoice listing
class InvoiceOrderOut(BaseModel):
    id: int
    order_date: datetime
    status: str
    items: List[OrderItemOut]

# Output schema for an invoice
class InvoiceOut(BaseModel):
    id: int
    invoice_number: str
    invoice_date: datetime
    amount: float
    document_url: Optional[str] = None
    document_url_absolute: Optional[str] = None
    order_id: int
    order: Optional[InvoiceOrderOut] = None

    class Config:
        from_attributes = True

# All invoices of one customer
class CustomerInvoicesOut(BaseModel):
    customer_id: int
    customer_name: str
    invoices: List[InvoiceOut]

# Result of a document (re)generation
class InvoiceDocumentOut(BaseModel):
    invoice_id: int
    document_url: str
    document_url_absolute: str
