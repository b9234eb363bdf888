# utils/dates.py
from datetime import datetime, timedelta, timezone
from typing import Optional

# Datetimes are stored as naive UTC values
def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Aware values are converted to UTC; naive values are assumed to already be UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def end_of_day(value: datetime) -> datetime:
    """Last representable instant of `value`'s calendar day (inclusive bound)."""
    start = datetime.combine(value.date(), datetime.min.time())
    return start + timedelta(days=1) - timedelta(microseconds=1)

def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), datetime.min.time())
