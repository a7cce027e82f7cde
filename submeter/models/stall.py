"""Stall database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from submeter.core.database import Base
from submeter.models.enums import StallStatus

if TYPE_CHECKING:
    from submeter.models.building import Building
    from submeter.models.meter import Meter
    from submeter.models.tenant import Tenant


class Stall(Base):
    """Physical stall inside a building, optionally leased to a tenant."""

    __tablename__ = "stalls"

    id: Mapped[str] = mapped_column(String(30), primary_key=True)
    stall_sn: Mapped[str] = mapped_column(String(30), unique=True)
    status: Mapped[StallStatus] = mapped_column(String(20), default=StallStatus.AVAILABLE)

    # Foreign keys
    building_id: Mapped[str] = mapped_column(ForeignKey("buildings.id"), index=True)
    tenant_id: Mapped[str | None] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    building: Mapped["Building"] = relationship(back_populates="stalls")
    tenant: Mapped["Tenant | None"] = relationship(back_populates="stalls")
    meters: Mapped[list["Meter"]] = relationship(back_populates="stall")
