from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum

# Closed set of order states
class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

# Allowed moves between states; re-setting the current state is a no-op
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True, nullable=False)
    order_date = Column(DateTime, nullable=False, index=True) # UTC, set at confirmation
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    comments = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")
    invoice = relationship("Invoice", back_populates="order", uselist=False)
    customer = relationship("Customer")

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
