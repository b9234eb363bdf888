# schemas/reports.py
from datetime import datetime, date
from typing import List
from pydantic import BaseModel

# Pending demand over a resolved ordering window
class PendingTotalResponse(BaseModel):
    window_id: int
    date_from: datetime
    date_to: datetime
    total_pending_amount: float
    pending_count: int

# Per-ingredient amounts (grams / millilitres)
class IngredientAmounts(BaseModel):
    rice: float
    water: float
    vinegar: float
    sugar: float
    salt: float

class RecipeLine(BaseModel):
    ingredient: str
    amount: float
    unit: str

class ProductDemandOut(BaseModel):
    product_id: int
    product_name: str
    total_quantity: int
    total_rollouts: int

class StockRequirementsResponse(BaseModel):
    window_id: int
    date_from: datetime
    date_to: datetime
    total_pending_orders: int
    total_items_ordered: int
    total_rollouts: int
    rollouts_per_group: int
    full_groups: int
    remainder: int
    precise_groups: float
    rounded_up_groups: int
    recipe_per_group: List[RecipeLine]
    ingredients_precise: IngredientAmounts
    ingredients_rounded_up: IngredientAmounts
    per_product: List[ProductDemandOut]

# Revenue rollup
class DailyRevenue(BaseModel):
    date: date
    revenue: float
    orders: int

class RevenueResponse(BaseModel):
    date_from: datetime
    date_to: datetime
    total: float
    daily: List[DailyRevenue]
