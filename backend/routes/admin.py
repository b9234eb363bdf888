# backend/routes/admin.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services.ordering_window import resolve_active_window, window_interval
from services.provisioning import RECIPE_PER_GROUP, ROLLOUTS_PER_GROUP, compute_requirements, sum_pending_amount
from services.revenue import revenue_summary
from utils.dates import to_naive_utc, utcnow
from schemas.reports import (
    PendingTotalResponse, StockRequirementsResponse, IngredientAmounts,
    RecipeLine, ProductDemandOut, RevenueResponse, DailyRevenue,
)

router = APIRouter(prefix="/admin", tags=["Admin"])

def _amounts(values: dict) -> IngredientAmounts:
    return IngredientAmounts(**{name: float(v) for name, v in values.items()})

# -----------------------------
# 1) Pending order total over the ordering window
# -----------------------------
@router.get("/orders/pending/total", response_model=PendingTotalResponse)
def pending_total(
    window_id: Optional[int] = Query(None, alias="windowId"),
    db: Session = Depends(get_db),
):
    window = resolve_active_window(db, window_id)
    now = utcnow()
    start, end = window_interval(window, now)
    total, count = sum_pending_amount(db, window, now)

    return PendingTotalResponse(
        window_id=window.id,
        date_from=start,
        date_to=end,
        total_pending_amount=round(float(total), 2),
        pending_count=count,
    )

# -----------------------------
# 2) Ingredient requirements for pending demand
# -----------------------------
@router.get("/stock/requirements", response_model=StockRequirementsResponse)
def stock_requirements(
    window_id: Optional[int] = Query(None, alias="windowId"),
    db: Session = Depends(get_db),
):
    window = resolve_active_window(db, window_id)
    report = compute_requirements(db, window)

    return StockRequirementsResponse(
        window_id=report.window_id,
        date_from=report.date_from,
        date_to=report.date_to,
        total_pending_orders=report.total_pending_orders,
        total_items_ordered=report.total_items_ordered,
        total_rollouts=report.total_rollouts,
        rollouts_per_group=ROLLOUTS_PER_GROUP,
        full_groups=report.full_groups,
        remainder=report.remainder,
        precise_groups=float(report.precise_groups_display),
        rounded_up_groups=report.rounded_up_groups,
        recipe_per_group=[RecipeLine(ingredient=n, amount=a, unit=u) for n, a, u in RECIPE_PER_GROUP],
        ingredients_precise=_amounts(report.ingredients_precise),
        ingredients_rounded_up=_amounts(report.ingredients_rounded_up),
        per_product=[ProductDemandOut(**vars(p)) for p in report.per_product],
    )

# -----------------------------
# 3) Revenue (all statuses), end date inclusive
# -----------------------------
@router.get("/revenue", response_model=RevenueResponse)
def revenue(
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    summary = revenue_summary(db, to_naive_utc(date_from), to_naive_utc(date_to))
    return RevenueResponse(
        date_from=summary["date_from"],
        date_to=summary["date_to"],
        total=round(float(summary["total"]), 2),
        daily=[
            DailyRevenue(date=d["date"], revenue=round(float(d["revenue"]), 2), orders=d["orders"])
            for d in summary["daily"]
        ],
    )
