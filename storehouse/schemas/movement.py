from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime, date, timezone
from storehouse.models.movement import MovementType


class MovementResponse(BaseModel):
    id: str
    timestamp: datetime
    movement_type: MovementType
    product_name: str
    product_code: str
    client_name: Optional[str] = None
    quantity: int
    location: str
    previous_location: Optional[str] = None
    details: Optional[str] = None

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    class Config:
        from_attributes = True


class MovementFilter(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    movement_types: Optional[List[MovementType]] = None
    search: Optional[str] = None
