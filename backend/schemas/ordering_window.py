from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# Schema for displaying the ordering window (camelCase on the wire)
class OrderingWindowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: Optional[int] = None
    is_enabled: bool = Field(True, alias="isEnabled")
    on_date: Optional[datetime] = Field(None, alias="onDate")
    off_date: Optional[datetime] = Field(None, alias="offDate")

# Public view with the computed open/closed flag
class OrderingWindowStatus(OrderingWindowOut):
    is_active: bool = Field(..., alias="isActive")


# Schema for replacing the ordering window settings; snake_case names are accepted too
class OrderingWindowUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_enabled: bool = Field(True, alias="isEnabled")
    on_date: Optional[datetime] = Field(None, alias="onDate")
    off_date: Optional[datetime] = Field(None, alias="offDate")
