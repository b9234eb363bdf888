# backend/routes/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log
from models.cart import Cart
from schemas.cart import CartAddItem, CartOut, CartItemOut
from services import cart as cart_service

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(cart: Cart) -> CartOut:
    items_out = []
    for it in cart.items:
        items_out.append(CartItemOut(
            id=it.id,
            product_id=it.product_id,
            product_name=it.product.name if it.product else "",
            price=float(it.price),
            quantity=it.quantity,
            line_total=round(float(it.price * it.quantity), 2),
        ))
    return CartOut(
        id=cart.id,
        customer_id=cart.customer_id,
        total_amount=round(float(cart.total_amount), 2),
        created_at=cart.created_at,
        items=items_out,
    )

@router.get("/{customer_id}", response_model=CartOut)
def get_cart(customer_id: int, db: Session = Depends(get_db)):
    cart = cart_service.open_cart(db, customer_id)
    return _cart_to_out(cart)

@router.post("/{customer_id}/items", response_model=CartOut)
def add_to_cart(customer_id: int, payload: CartAddItem, db: Session = Depends(get_db)):
    cart = cart_service.add_cart_item(db, customer_id, payload.product_id, payload.quantity)
    out = _cart_to_out(cart)

    write_log(
        db,
        customer_id=customer_id,
        action="CART_ADD",
        resource="cart",
        meta={"product_id": payload.product_id, "quantity": payload.quantity, "total": out.total_amount},
    )
    return out

# Remove one unit of a product
@router.delete("/{customer_id}/items/{product_id}", response_model=CartOut)
def decrement_cart_item(customer_id: int, product_id: int, db: Session = Depends(get_db)):
    cart = cart_service.decrement_cart_item(db, customer_id, product_id)
    out = _cart_to_out(cart)

    write_log(
        db,
        customer_id=customer_id,
        action="CART_DECREMENT",
        resource="cart",
        meta={"product_id": product_id, "total": out.total_amount},
    )
    return out

# Remove a product line entirely
@router.delete("/{customer_id}/products/{product_id}", response_model=CartOut)
def remove_cart_product(customer_id: int, product_id: int, db: Session = Depends(get_db)):
    cart = cart_service.remove_cart_product(db, customer_id, product_id)
    out = _cart_to_out(cart)

    write_log(
        db,
        customer_id=customer_id,
        action="CART_REMOVE",
        resource="cart",
        meta={"product_id": product_id, "total": out.total_amount},
    )
    return out
