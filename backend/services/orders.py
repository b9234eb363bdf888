# services/orders.py
import logging
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from database import run_in_transaction
from errors import EmptyCartError, InvalidStatusError, OrderNotFoundError
from models.cart import Cart
from models.invoice import Invoice
from models.order import ALLOWED_TRANSITIONS, Order, OrderItem, OrderStatus
from services.invoice_numbers import next_invoice_number
from utils.dates import utcnow

logger = logging.getLogger(__name__)


def confirm_order(db: Session, customer_id: int, comments: Optional[str] = None) -> Order:
    """
    Turns the customer's cart into an Order plus its Invoice and empties the cart.

    Everything happens in one transaction. Lines keep the price captured in
    the cart. Rendering the invoice document is left to the caller, after
    this returns.
    """

    def _confirm(s: Session) -> Order:
        cart = (
            s.query(Cart)
            .options(selectinload(Cart.items))
            .filter(Cart.customer_id == customer_id)
            .first()
        )
        if cart is None or not cart.items:
            raise EmptyCartError(customer_id)

        now = utcnow()
        # Number first: the counter UPDATE is the transaction's first write
        invoice_number = next_invoice_number(s, year=now.year)

        order = Order(
            customer_id=customer_id,
            order_date=now,
            status=OrderStatus.PENDING,
            comments=comments,
            total_amount=cart.total_amount,
            items=[
                OrderItem(product_id=ci.product_id, quantity=ci.quantity, price=ci.price)
                for ci in cart.items
            ],
        )
        invoice = Invoice(
            order=order,
            customer_id=customer_id,
            invoice_number=invoice_number,
            invoice_date=now,
            amount=order.total_amount,
        )
        s.add_all([order, invoice])

        # Clearing bumps the cart version, so a concurrent add forces a retry
        cart.items.clear()
        cart.total_amount = Decimal("0.00")
        cart.updated_at = now
        return order

    order = run_in_transaction(db, _confirm)
    logger.info("Confirmed order %s for customer %s (invoice %s)", order.id, customer_id, order.invoice.invoice_number)
    return order


def get_order(db: Session, order_id: int) -> Order:
    order = (
        db.query(Order)
        .options(joinedload(Order.items).joinedload(OrderItem.product), joinedload(Order.invoice))
        .filter(Order.id == order_id)
        .first()
    )
    if not order:
        raise OrderNotFoundError(order_id)
    return order


def parse_status(value: str) -> OrderStatus:
    normalized = (value or "").strip().lower()
    for status in OrderStatus:
        if status.value.lower() == normalized:
            return status
    allowed = ", ".join(s.value for s in OrderStatus)
    raise InvalidStatusError(f"Unknown order status '{value}'. Allowed: {allowed}")


def update_order_status(db: Session, order_id: int, value: str) -> Tuple[Order, OrderStatus]:
    """Moves an order to a new status; returns the order and its previous status."""
    new_status = parse_status(value)

    def _update(s: Session) -> Tuple[Order, OrderStatus]:
        order = s.get(Order, order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        old_status = order.status
        if new_status != old_status and new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise InvalidStatusError(f"Cannot change status from {old_status.value} to {new_status.value}")

        order.status = new_status
        return order, old_status

    return run_in_transaction(db, _update)


def delete_order(db: Session, order_id: int) -> Tuple[int, Optional[int]]:
    """
    Deletes an order together with its lines and its invoice.

    The invoice goes in the same transaction, so no invoice is ever left
    without its order. Returns the deleted order id and invoice id.
    """

    def _delete(s: Session) -> Tuple[int, Optional[int]]:
        order = s.query(Order).options(joinedload(Order.invoice)).filter(Order.id == order_id).first()
        if not order:
            raise OrderNotFoundError(order_id)

        invoice_id = order.invoice.id if order.invoice else None
        if order.invoice:
            s.delete(order.invoice)
        s.delete(order)
        return order_id, invoice_id

    return run_in_transaction(db, _delete)
