"""MeterReading database model - the cumulative index ledger."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from submeter.core.database import Base

if TYPE_CHECKING:
    from submeter.models.meter import Meter


class MeterReading(Base):
    """Cumulative index reading, at most one per meter and day."""

    __tablename__ = "meter_readings"
    __table_args__ = (
        UniqueConstraint("meter_id", "reading_date", name="uq_meter_reading_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        index=True,
    )  # When added to database
    reading_date: Mapped[date] = mapped_column(index=True)  # Day the index was read

    # The cumulative index value (using Decimal for precision)
    reading_value: Mapped[Decimal] = mapped_column(Numeric(precision=30, scale=2))
    read_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Foreign keys
    meter_id: Mapped[str] = mapped_column(ForeignKey("meters.id"), index=True)

    # Relationships
    meter: Mapped["Meter"] = relationship(back_populates="readings")
