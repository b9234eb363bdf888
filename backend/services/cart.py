# services/cart.py
from decimal import Decimal

from sqlalchemy.orm import Session, selectinload

from database import run_in_transaction
from errors import CartItemNotFoundError, CustomerNotFoundError, ProductNotFoundError, ProductUnavailableError
from models.cart import Cart, CartItem
from models.product import Product
from models.users import Customer
from utils.dates import utcnow

ZERO = Decimal("0.00")


def cart_total(cart: Cart) -> Decimal:
    return sum((it.price * it.quantity for it in cart.items), ZERO).quantize(Decimal("0.01"))


def _touch(cart: Cart) -> None:
    # Recompute the derived total and force a version bump on flush
    cart.total_amount = cart_total(cart)
    cart.updated_at = utcnow()


def _find_cart(db: Session, customer_id: int) -> Cart:
    return (
        db.query(Cart)
        .options(selectinload(Cart.items))
        .filter(Cart.customer_id == customer_id)
        .first()
    )


def get_or_create_cart(db: Session, customer_id: int) -> Cart:
    # Carts are created lazily; the caller commits
    cart = _find_cart(db, customer_id)
    if cart:
        return cart
    if db.get(Customer, customer_id) is None:
        raise CustomerNotFoundError(customer_id)
    cart = Cart(customer_id=customer_id, total_amount=ZERO, items=[])
    db.add(cart)
    return cart


def open_cart(db: Session, customer_id: int) -> Cart:
    return run_in_transaction(db, lambda s: get_or_create_cart(s, customer_id))


def add_cart_item(db: Session, customer_id: int, product_id: int, quantity: int = 1) -> Cart:
    """Adds `quantity` units of a product, re-snapshotting the line price to the current catalog price."""

    def _add(s: Session) -> Cart:
        cart = get_or_create_cart(s, customer_id)

        product = s.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        if not product.is_available:
            raise ProductUnavailableError(product_id)

        item = next((it for it in cart.items if it.product_id == product_id), None)
        if item:
            item.quantity += quantity
            item.price = product.price
        else:
            cart.items.append(CartItem(product_id=product.id, quantity=quantity, price=product.price))

        _touch(cart)
        return cart

    return run_in_transaction(db, _add)


def decrement_cart_item(db: Session, customer_id: int, product_id: int) -> Cart:
    """Removes one unit of a product; the line disappears when it reaches zero."""

    def _decrement(s: Session) -> Cart:
        cart = _find_cart(s, customer_id)
        if not cart:
            raise CartItemNotFoundError(product_id)
        item = next((it for it in cart.items if it.product_id == product_id), None)
        if not item:
            raise CartItemNotFoundError(product_id)

        item.quantity -= 1
        if item.quantity <= 0:
            cart.items.remove(item)

        _touch(cart)
        return cart

    return run_in_transaction(db, _decrement)


def remove_cart_product(db: Session, customer_id: int, product_id: int) -> Cart:
    def _remove(s: Session) -> Cart:
        cart = _find_cart(s, customer_id)
        item = next((it for it in cart.items if it.product_id == product_id), None) if cart else None
        if not item:
            raise CartItemNotFoundError(product_id)

        cart.items.remove(item)
        _touch(cart)
        return cart

    return run_in_transaction(db, _remove)
