"""Meter database model."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from submeter.core.database import Base

if TYPE_CHECKING:
    from submeter.models.meter_reading import MeterReading
    from submeter.models.stall import Stall


class Meter(Base):
    """Utility meter attached to a stall.

    ``meter_type`` is kept as a plain string and checked against
    ``UtilityType`` when a computation runs, so bad data surfaces as a
    validation error instead of failing on load.
    """

    __tablename__ = "meters"

    id: Mapped[str] = mapped_column(String(30), primary_key=True)
    meter_sn: Mapped[str | None] = mapped_column(String(50), nullable=True)
    meter_type: Mapped[str] = mapped_column(String(20), index=True)
    multiplier: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("1"))

    # Foreign keys
    stall_id: Mapped[str] = mapped_column(ForeignKey("stalls.id"), index=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    stall: Mapped["Stall"] = relationship(back_populates="meters")
    readings: Mapped[list["MeterReading"]] = relationship(back_populates="meter")
