from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

# Request schema for adding a product to the cart
class CartAddItem(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)

# Response schema for a single cart line
class CartItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    price: float
    quantity: int
    line_total: float

    class Config:
        from_attributes = True

# Response schema for the entire cart
class CartOut(BaseModel):
    id: int
    customer_id: int
    total_amount: float
    created_at: Optional[datetime] = None
    items: List[CartItemOut]
