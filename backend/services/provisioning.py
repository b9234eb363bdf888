# services/provisioning.py
"""
Provisioning math over Pending orders inside an ordering window.

Demand is measured in rollouts: ordered quantity times the product's
*current* stock counter, read live at report time (the counter is used as a
per-unit multiplier, not as inventory). Rollouts are then scaled through a
fixed recipe defined per group of seven rollouts.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from models.order import Order, OrderItem, OrderStatus
from models.ordering_window import OrderingWindow
from models.product import Product
from services.ordering_window import window_interval

ROLLOUTS_PER_GROUP = 7

# Ingredient, amount per group, unit
RECIPE_PER_GROUP = (
    ("rice", 300, "g"),
    ("water", 400, "ml"),
    ("vinegar", 60, "ml"),
    ("sugar", 15, "g"),
    ("salt", 5, "g"),
)

CENTS = Decimal("0.01")
GROUPS_DISPLAY = Decimal("0.0001")


@dataclass(frozen=True)
class ProductDemand:
    product_id: int
    product_name: str
    total_quantity: int
    total_rollouts: int


@dataclass(frozen=True)
class ProvisioningReport:
    window_id: int
    date_from: datetime
    date_to: datetime
    total_pending_orders: int
    total_items_ordered: int
    total_rollouts: int
    full_groups: int
    remainder: int
    precise_groups: Decimal  # unrounded
    ingredients_precise: Dict[str, Decimal]
    ingredients_rounded_up: Dict[str, Decimal]
    per_product: List[ProductDemand] = field(default_factory=list)

    @property
    def precise_groups_display(self) -> Decimal:
        return self.precise_groups.quantize(GROUPS_DISPLAY, rounding=ROUND_HALF_EVEN)

    @property
    def rounded_up_groups(self) -> int:
        return self.full_groups + (1 if self.remainder else 0)


def pending_in_interval(query, start: datetime, end: datetime):
    return query.filter(
        Order.status == OrderStatus.PENDING,
        Order.order_date >= start,
        Order.order_date <= end,
    )


def scale_recipe(total_rollouts: int) -> Tuple[Decimal, Dict[str, Decimal], Dict[str, Decimal]]:
    """Returns (precise groups, precise ingredient amounts, ingredient amounts for whole groups)."""
    precise_groups = Decimal(total_rollouts) / Decimal(ROLLOUTS_PER_GROUP)
    full_groups, remainder = divmod(total_rollouts, ROLLOUTS_PER_GROUP)
    whole_groups = full_groups + (1 if remainder else 0)

    precise = {}
    rounded_up = {}
    for name, amount, _unit in RECIPE_PER_GROUP:
        precise[name] = (precise_groups * amount).quantize(CENTS, rounding=ROUND_HALF_EVEN)
        rounded_up[name] = Decimal(whole_groups * amount).quantize(CENTS)
    return precise_groups, precise, rounded_up


def compute_requirements(db: Session, window: OrderingWindow, now: Optional[datetime] = None) -> ProvisioningReport:
    start, end = window_interval(window, now)

    # Single SELECT: every figure below comes from the same snapshot
    rows = pending_in_interval(
        db.query(
            OrderItem.order_id,
            OrderItem.product_id,
            OrderItem.quantity,
            Product.name,
            Product.stock,
        )
        .join(Order, Order.id == OrderItem.order_id)
        .join(Product, Product.id == OrderItem.product_id),
        start,
        end,
    ).all()

    order_ids = set()
    total_items = 0
    total_rollouts = 0
    per_product: Dict[int, dict] = {}

    for order_id, product_id, quantity, name, stock in rows:
        rollouts = quantity * (stock or 0)
        order_ids.add(order_id)
        total_items += quantity
        total_rollouts += rollouts

        entry = per_product.setdefault(product_id, {"name": name, "quantity": 0, "rollouts": 0})
        entry["quantity"] += quantity
        entry["rollouts"] += rollouts

    precise_groups, precise, rounded_up = scale_recipe(total_rollouts)
    full_groups, remainder = divmod(total_rollouts, ROLLOUTS_PER_GROUP)

    breakdown = sorted(
        (
            ProductDemand(
                product_id=pid,
                product_name=e["name"],
                total_quantity=e["quantity"],
                total_rollouts=e["rollouts"],
            )
            for pid, e in per_product.items()
        ),
        key=lambda d: (d.product_name, d.product_id),
    )

    return ProvisioningReport(
        window_id=window.id,
        date_from=start,
        date_to=end,
        total_pending_orders=len(order_ids),
        total_items_ordered=total_items,
        total_rollouts=total_rollouts,
        full_groups=full_groups,
        remainder=remainder,
        precise_groups=precise_groups,
        ingredients_precise=precise,
        ingredients_rounded_up=rounded_up,
        per_product=breakdown,
    )


def sum_pending_amount(db: Session, window: OrderingWindow, now: Optional[datetime] = None) -> Tuple[Decimal, int]:
    """Sum of Order.total_amount and count over Pending orders in the window."""
    start, end = window_interval(window, now)
    amounts = [row.total_amount for row in pending_in_interval(db.query(Order.total_amount), start, end)]
    return sum(amounts, Decimal("0.00")), len(amounts)
