# services/revenue.py
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models.order import Order
from services.ordering_window import day_interval
from utils.dates import utcnow

DEFAULT_LOOKBACK_DAYS = 30


def revenue_summary(db: Session, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None) -> dict:
    """Revenue over all order statuses, with every day in the range present (zero-filled)."""
    now = utcnow()
    start, end = day_interval(date_from or now - timedelta(days=DEFAULT_LOOKBACK_DAYS), date_to or now)

    rows = (
        db.query(Order.order_date, Order.total_amount)
        .filter(Order.order_date >= start, Order.order_date <= end)
        .all()
    )

    by_day = {}
    for order_date, amount in rows:
        revenue, count = by_day.get(order_date.date(), (Decimal("0.00"), 0))
        by_day[order_date.date()] = (revenue + amount, count + 1)

    daily = []
    day = start.date()
    while day <= end.date():
        revenue, count = by_day.get(day, (Decimal("0.00"), 0))
        daily.append({"date": day, "revenue": revenue, "orders": count})
        day += timedelta(days=1)

    total = sum((d["revenue"] for d in daily), Decimal("0.00"))
    return {"date_from": start, "date_to": end, "total": total, "daily": daily}
