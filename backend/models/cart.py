# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Represents the customer's shopping cart
class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), unique=True, index=True, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, nullable=True)

    # Optimistic concurrency: every flush checks and bumps the version
    version = Column(Integer, nullable=False)

    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan")
    customer = relationship("Customer", back_populates="cart")

    __mapper_args__ = {"version_id_col": version}


# Represents a single product line within a cart
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    price = Column(Numeric(12, 2), nullable=False) # Price snapshot taken by the last add

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        # One line per product in a cart
        UniqueConstraint("cart_id", "product_id", name="uq_cartitem_cart_product"),
    )
