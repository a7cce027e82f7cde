"""VAT and withholding-tax code models.

Percentages are stored per utility and may be whole numbers (12 meaning 12%)
or fractions (0.12); readers normalize them before use.
"""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from submeter.core.database import Base


class VatCode(Base):
    """Named VAT percentage bundle."""

    __tablename__ = "vat_codes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(100), nullable=True)
    electric: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    water: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    lpg: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))


class WtCode(Base):
    """Named withholding-tax percentage bundle."""

    __tablename__ = "wt_codes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(100), nullable=True)
    electric: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    water: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    lpg: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
