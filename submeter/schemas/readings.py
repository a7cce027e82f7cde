"""MeterReading schemas for the reading store."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator


class ReadingCreate(BaseModel):
    """Schema for recording a cumulative index reading."""

    meter_id: str
    reading_date: date
    reading_value: Decimal
    read_by: str | None = None

    @field_validator("meter_id")
    @classmethod
    def validate_meter_id(cls, v: str) -> str:
        """Validate the meter id is not blank."""
        if not v or not v.strip():
            raise ValueError("meter_id must not be empty")
        return v.strip()


class ReadingResponse(BaseModel):
    """Schema for meter reading response."""

    id: int
    meter_id: str
    reading_date: date
    reading_value: Decimal
    read_by: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
