from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from database import Base

# Represents the invoice issued together with an order
class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), unique=True, index=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True, nullable=False)
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)
    invoice_date = Column(DateTime, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)

    # Set after commit by the document renderer, overwritten on regeneration
    document_url = Column(String, nullable=True)

    order = relationship("Order", back_populates="invoice")
    customer = relationship("Customer")

    @property
    def sequence(self):
        # Numeric suffix of INV-{year}-{sequence}
        parts = (self.invoice_number or "").split("-")
        if len(parts) == 3 and parts[2].isdigit():
            return int(parts[2])
        return None

# Single-row counter backing invoice number allocation
class InvoiceCounter(Base):
    __tablename__ = "invoice_counters"

    id = Column(Integer, primary_key=True)
    value = Column(Integer, nullable=False)
