# backend/routes/ordering_window.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db, run_in_transaction
from utils.audit import write_log
from schemas.ordering_window import OrderingWindowOut, OrderingWindowStatus, OrderingWindowUpdate
from services.ordering_window import get_ordering_window, is_window_active, upsert_ordering_window

router = APIRouter(prefix="/orderingwindow", tags=["Ordering window"])


# Public check: current window and whether ordering is open right now
@router.get("", response_model=OrderingWindowStatus)
def get_window(db: Session = Depends(get_db)):
    window = get_ordering_window(db)
    if not window:
        # Ordering is allowed until a window is configured
        return OrderingWindowStatus(id=None, is_enabled=True, on_date=None, off_date=None, is_active=True)

    return OrderingWindowStatus(
        id=window.id,
        is_enabled=window.is_enabled,
        on_date=window.on_date,
        off_date=window.off_date,
        is_active=is_window_active(window),
    )


# Replace the window settings (creates the single record on first use)
@router.put("", response_model=OrderingWindowOut)
def update_window(payload: OrderingWindowUpdate, db: Session = Depends(get_db)):
    window = run_in_transaction(
        db, lambda s: upsert_ordering_window(s, payload.is_enabled, payload.on_date, payload.off_date)
    )
    out = OrderingWindowOut.model_validate(window)

    write_log(
        db,
        customer_id=None,
        action="ORDERING_WINDOW_UPDATE",
        resource="orderingwindow",
        meta={"window_id": out.id, "is_enabled": out.is_enabled},
    )
    return out
