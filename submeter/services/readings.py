"""Reading store: window selection plus the reading write path."""

import logging
from datetime import date

from sqlalchemy import and_
from sqlalchemy.orm import Session

from submeter.core.exceptions import ConflictError, NotFoundError
from submeter.models.meter_reading import MeterReading
from submeter.schemas.readings import ReadingCreate
from submeter.services.directory import get_meter

logger = logging.getLogger(__name__)


def find_latest_in_window(
    db: Session,
    meter_id: str,
    start: date,
    end: date,
) -> MeterReading | None:
    """Get the reading with the latest date inside the inclusive window [start, end]."""
    reading = (
        db.query(MeterReading)
        .filter(
            and_(
                MeterReading.meter_id == meter_id,
                MeterReading.reading_date >= start,
                MeterReading.reading_date <= end,
            )
        )
        .order_by(MeterReading.reading_date.desc())
        .first()
    )
    logger.debug(
        "Latest reading for %s in %s..%s: %s",
        meter_id,
        start,
        end,
        reading.reading_date if reading else None,
    )
    return reading


def create_reading(db: Session, reading_data: ReadingCreate) -> MeterReading:
    """Record a cumulative index reading; one per meter and date."""
    get_meter(db, reading_data.meter_id)

    existing = (
        db.query(MeterReading)
        .filter(
            and_(
                MeterReading.meter_id == reading_data.meter_id,
                MeterReading.reading_date == reading_data.reading_date,
            )
        )
        .first()
    )
    if existing:
        raise ConflictError("Reading for this meter and date already exists")

    db_reading = MeterReading(
        meter_id=reading_data.meter_id,
        reading_date=reading_data.reading_date,
        reading_value=reading_data.reading_value,
        read_by=reading_data.read_by,
    )
    db.add(db_reading)
    db.commit()
    db.refresh(db_reading)
    logger.info(
        "Recorded reading %s for meter %s on %s",
        db_reading.reading_value,
        db_reading.meter_id,
        db_reading.reading_date,
    )
    return db_reading


def list_readings(
    db: Session,
    meter_id: str,
    reading_date: date | None = None,
) -> list[MeterReading]:
    """Get readings for a meter, newest first, optionally for a single date."""
    query = db.query(MeterReading).filter(MeterReading.meter_id == meter_id)
    if reading_date is not None:
        query = query.filter(MeterReading.reading_date == reading_date)
    return query.order_by(MeterReading.reading_date.desc()).all()


def delete_reading(db: Session, reading_id: int) -> None:
    """Delete a reading (corrections only)."""
    reading = db.query(MeterReading).filter(MeterReading.id == reading_id).first()
    if not reading:
        raise NotFoundError("Reading not found")
    db.delete(reading)
    db.commit()
