from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


# Output schema for an individual order line
class OrderItemOut(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price: float
    line_total: float


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    customer_id: int
    order_date: datetime
    status: str
    comments: Optional[str] = None
    total_amount: float
    invoice_id: Optional[int] = None
    invoice_number: Optional[str] = None
    items: List[OrderItemOut]

    class Config:
        from_attributes = True

# Response schema for a status change
class OrderStatusOut(BaseModel):
    id: int
    status: str

# Response schema for a deleted order
class OrderDeletedOut(BaseModel):
    message: str
    order_id: int
    invoice_id: Optional[int] = None
