"""Building database model with its utility rate configuration."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from submeter.core.database import Base

if TYPE_CHECKING:
    from submeter.models.stall import Stall


class Building(Base):
    """Building entity holding per-utility rates and minimum consumptions.

    Electric and water each have a rate per unit and a minimum billable
    consumption. LPG only has a rate per kilogram; its minimum is fixed.
    """

    __tablename__ = "buildings"

    id: Mapped[str] = mapped_column(String(30), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True)

    electric_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))  # per kWh
    electric_min_consumption: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    water_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))  # per m3
    water_min_consumption: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    lpg_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))  # per kg

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    stalls: Mapped[list["Stall"]] = relationship(back_populates="building")
