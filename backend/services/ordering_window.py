# services/ordering_window.py
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from errors import NoWindowConfiguredError, WindowNotFoundError
from models.ordering_window import OrderingWindow
from utils.dates import end_of_day, start_of_day, to_naive_utc, utcnow

# Lower bound used when a window has no opening date
EARLIEST = datetime.min

SINGLETON_ID = 1


def resolve_active_window(db: Session, window_id: Optional[int] = None) -> OrderingWindow:
    """
    Picks the window a report should run against.

    An explicit id wins. Otherwise the enabled window with the latest
    opening date is used, falling back to the latest window overall
    (a missing opening date counts as the earliest possible one).
    """
    if window_id is not None:
        window = db.get(OrderingWindow, window_id)
        if window is None:
            raise WindowNotFoundError(window_id)
        return window

    window = (
        db.query(OrderingWindow)
        .filter(OrderingWindow.is_enabled.is_(True), OrderingWindow.on_date.isnot(None))
        .order_by(OrderingWindow.on_date.desc(), OrderingWindow.id.desc())
        .first()
    )
    if window is not None:
        return window

    window = (
        db.query(OrderingWindow)
        .order_by(OrderingWindow.on_date.desc().nulls_last(), OrderingWindow.id.desc())
        .first()
    )
    if window is None:
        raise NoWindowConfiguredError()
    return window


def window_interval(window: OrderingWindow, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    # `end` is inclusive: the last instant of the closing day
    start = start_of_day(window.on_date) if window.on_date else EARLIEST
    end = end_of_day(window.off_date or now or utcnow())
    return start, end


def day_interval(date_from: datetime, date_to: datetime) -> Tuple[datetime, datetime]:
    return start_of_day(date_from), end_of_day(date_to)


def is_window_active(window: Optional[OrderingWindow], now: Optional[datetime] = None) -> bool:
    # Ordering is open by default until a window is configured
    if window is None:
        return True
    now = now or utcnow()
    if not window.is_enabled:
        return False
    if window.on_date and now < window.on_date:
        return False
    if window.off_date and now > window.off_date:
        return False
    return True


def get_ordering_window(db: Session) -> Optional[OrderingWindow]:
    return db.query(OrderingWindow).order_by(OrderingWindow.id.asc()).first()


def upsert_ordering_window(
    db: Session,
    is_enabled: bool,
    on_date: Optional[datetime],
    off_date: Optional[datetime],
) -> OrderingWindow:
    """Updates the configured window in place, creating it only if none exists."""
    window = get_ordering_window(db)
    if window is None:
        # Fixed key: a concurrent first upsert collides and is retried as an update
        window = OrderingWindow(id=SINGLETON_ID)
        db.add(window)

    window.is_enabled = is_enabled
    window.on_date = to_naive_utc(on_date)
    window.off_date = to_naive_utc(off_date)
    return window
