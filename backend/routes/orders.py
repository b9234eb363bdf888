# backend/routes/orders.py
from typing import List, Optional
from urllib.parse import urljoin

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request
from sqlalchemy.orm import Session, joinedload

from database import get_db
from errors import NotFoundError
from utils.audit import write_log
from models.invoice import Invoice
from models.order import Order, OrderItem
from schemas.invoice import CustomerInvoicesOut, InvoiceDocumentOut, InvoiceOrderOut, InvoiceOut
from schemas.order import OrderDeletedOut, OrderItemOut, OrderResponse, OrderStatusOut
from services.documents import regenerate_invoice_document, render_invoice_document_task
from services.orders import confirm_order, delete_order, get_order, update_order_status

router = APIRouter(prefix="/order", tags=["Orders"])

def _items_to_out(order: Order) -> List[OrderItemOut]:
    return [
        OrderItemOut(
            id=it.id,
            product_id=it.product_id,
            product_name=it.product.name if it.product else None,
            quantity=it.quantity,
            price=float(it.price),
            line_total=round(float(it.price * it.quantity), 2),
        )
        for it in order.items
    ]

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        customer_id=order.customer_id,
        order_date=order.order_date,
        status=order.status.value,
        comments=order.comments,
        total_amount=round(float(order.total_amount), 2),
        invoice_id=order.invoice.id if order.invoice else None,
        invoice_number=order.invoice.invoice_number if order.invoice else None,
        items=_items_to_out(order),
    )

def _absolute_url(request: Request, url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    return urljoin(str(request.base_url), url.lstrip("/"))

def _invoice_to_out(invoice: Invoice, request: Request) -> InvoiceOut:
    order = invoice.order
    return InvoiceOut(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        invoice_date=invoice.invoice_date,
        amount=round(float(invoice.amount), 2),
        document_url=invoice.document_url,
        document_url_absolute=_absolute_url(request, invoice.document_url),
        order_id=invoice.order_id,
        order=InvoiceOrderOut(
            id=order.id,
            order_date=order.order_date,
            status=order.status.value,
            items=_items_to_out(order),
        ) if order else None,
    )


# Confirm the customer's cart into an order + invoice; the PDF is rendered after the response
@router.post("/confirm/{customer_id}", response_model=OrderResponse)
def confirm_cart(
    customer_id: int,
    background_tasks: BackgroundTasks,
    comments: Optional[str] = Body(None),
    db: Session = Depends(get_db),
):
    order = confirm_order(db, customer_id, comments)
    out = _order_to_out(order)

    background_tasks.add_task(render_invoice_document_task, db.get_bind(), out.invoice_id)

    write_log(
        db, customer_id=customer_id, action="ORDER_CONFIRM", resource="orders",
        meta={"order_id": out.id, "invoice_number": out.invoice_number, "total": out.total_amount},
    )
    return out


@router.get("", response_model=List[OrderResponse])
def list_orders(db: Session = Depends(get_db)):
    orders = db.query(Order).options(
        joinedload(Order.items).joinedload(OrderItem.product),
        joinedload(Order.invoice),
    ).order_by(Order.order_date.desc()).all()
    return [_order_to_out(o) for o in orders]


# All invoices grouped by customer, customers by name, invoices newest first
@router.get("/invoices", response_model=List[CustomerInvoicesOut])
def list_invoices_by_customer(request: Request, db: Session = Depends(get_db)):
    invoices = db.query(Invoice).options(
        joinedload(Invoice.customer),
        joinedload(Invoice.order).joinedload(Order.items).joinedload(OrderItem.product),
    ).order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).all()

    if not invoices:
        raise NotFoundError("No invoices found.")

    groups = {}
    for inv in invoices:
        name = inv.customer.name if inv.customer and inv.customer.name else "Unknown"
        groups.setdefault((inv.customer_id, name), []).append(_invoice_to_out(inv, request))

    return [
        CustomerInvoicesOut(customer_id=customer_id, customer_name=name, invoices=items)
        for (customer_id, name), items in sorted(groups.items(), key=lambda g: (g[0][1], g[0][0]))
    ]


# Invoices of one customer, newest first
@router.get("/invoices/customer/{customer_id}", response_model=List[InvoiceOut])
def list_customer_invoices(customer_id: int, request: Request, db: Session = Depends(get_db)):
    invoices = db.query(Invoice).options(
        joinedload(Invoice.order).joinedload(Order.items).joinedload(OrderItem.product)
    ).filter(Invoice.customer_id == customer_id).order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).all()

    if not invoices:
        raise NotFoundError("No invoices found for this customer.")
    return [_invoice_to_out(i, request) for i in invoices]


# Render the invoice document again (repairs a failed background rendering)
@router.post("/invoices/{invoice_id}/regenerate", response_model=InvoiceDocumentOut)
def regenerate_invoice(invoice_id: int, request: Request, db: Session = Depends(get_db)):
    url = regenerate_invoice_document(db, invoice_id)
    invoice = db.get(Invoice, invoice_id)

    write_log(
        db, customer_id=invoice.customer_id, action="INVOICE_REGENERATE", resource="invoices",
        meta={"invoice_id": invoice_id, "document_url": url},
    )
    return InvoiceDocumentOut(
        invoice_id=invoice_id,
        document_url=url,
        document_url_absolute=_absolute_url(request, url),
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(order_id: int, db: Session = Depends(get_db)):
    return _order_to_out(get_order(db, order_id))


@router.put("/{order_id}/status", response_model=OrderStatusOut)
def set_order_status(order_id: int, status: str = Body(...), db: Session = Depends(get_db)):
    order, old_status = update_order_status(db, order_id, status)
    out = OrderStatusOut(id=order.id, status=order.status.value)

    write_log(
        db, customer_id=order.customer_id, action="ORDER_STATUS_CHANGE", resource="orders",
        meta={"order_id": out.id, "old": old_status.value, "new": out.status},
    )
    return out


# Delete an order with its lines and invoice
@router.delete("/{order_id}", response_model=OrderDeletedOut)
def remove_order(order_id: int, db: Session = Depends(get_db)):
    order = get_order(db, order_id)
    customer_id = order.customer_id

    _, invoice_id = delete_order(db, order_id)

    write_log(
        db, customer_id=customer_id, action="ORDER_DELETE", resource="orders",
        meta={"order_id": order_id, "invoice_id": invoice_id},
    )
    return OrderDeletedOut(
        message="Order and its items deleted successfully.",
        order_id=order_id,
        invoice_id=invoice_id,
    )
