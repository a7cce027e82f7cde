"""Tenant database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from submeter.core.database import Base

if TYPE_CHECKING:
    from submeter.models.stall import Stall


class Tenant(Base):
    """Tenant entity carrying its tax codes and penalty flag."""

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(30), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    building_id: Mapped[str | None] = mapped_column(
        ForeignKey("buildings.id"),
        nullable=True,
        index=True,
    )
    vat_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    wt_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    for_penalty: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    stalls: Mapped[list["Stall"]] = relationship(back_populates="tenant")
