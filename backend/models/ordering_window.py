from sqlalchemy import Column, Integer, Boolean, DateTime
from database import Base


# Global ordering/provisioning window. Updated in place; the API never creates a second row.
class OrderingWindow(Base):
    __tablename__ = "ordering_windows"

    id = Column(Integer, primary_key=True, index=True)
    is_enabled = Column(Boolean, nullable=False, default=True) # Manual override
    on_date = Column(DateTime, nullable=True) # UTC, ordering opens
    off_date = Column(DateTime, nullable=True) # UTC, ordering closes
