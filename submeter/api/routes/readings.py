"""MeterReading routes for the reading store."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from submeter.core.database import get_db
from submeter.schemas.readings import ReadingCreate, ReadingResponse
from submeter.services import readings as reading_service

router = APIRouter(prefix="/readings", tags=["meter-readings"])


@router.post(
    "/",
    response_model=ReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    reading_data: ReadingCreate,
    db: Session = Depends(get_db),
) -> ReadingResponse:
    """Record a cumulative index reading (one per meter and day)."""
    reading = reading_service.create_reading(db, reading_data)
    return ReadingResponse.model_validate(reading)


@router.get(
    "/meter/{meter_id}",
    response_model=list[ReadingResponse],
)
def list_meter_readings(
    meter_id: str,
    reading_date: date | None = Query(None, description="Only the reading for this date"),
    db: Session = Depends(get_db),
) -> list[ReadingResponse]:
    """List readings for a meter, newest first."""
    readings = reading_service.list_readings(db, meter_id, reading_date)
    return [ReadingResponse.model_validate(r) for r in readings]


@router.delete(
    "/{reading_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_reading(
    reading_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete a reading to correct a data-entry error."""
    reading_service.delete_reading(db, reading_id)
