"""Seed script to populate the database with a demo building.

Loads one building with rates, VAT/WT codes, two tenants, four stalls (one
vacant), one meter per utility plus a CT-metered electric meter, and a few
months of index readings ending 2025-02-20.

Run:
    python -m scripts.seed_data
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from submeter import models  # noqa: F401
from submeter.core.database import Base, SessionLocal, engine
from submeter.models import (
    Building,
    Meter,
    MeterReading,
    Stall,
    StallStatus,
    Tenant,
    UtilityType,
    VatCode,
    WtCode,
)

logger = logging.getLogger(__name__)

STALLS = [
    ("STL-1", "A-101", "TNT-1"),
    ("STL-2", "A-102", "TNT-1"),
    ("STL-3", "B-201", "TNT-2"),
    ("STL-4", "C-301", None),
]

METERS = [
    ("MTR-1", "E-0001", UtilityType.ELECTRIC, "1", "STL-1"),
    ("MTR-2", "W-0001", UtilityType.WATER, "1", "STL-2"),
    ("MTR-3", "L-0001", UtilityType.LPG, "1", "STL-3"),
    ("MTR-4", "E-0080", UtilityType.ELECTRIC, "80", "STL-4"),  # CT ratio 400:5
]

# Month-end anchors of MTR-1, then a partial February
READINGS: dict[str, dict[str, str]] = {
    "MTR-1": {
        "2024-11-21": "9588.00",
        "2024-11-30": "9604.20",
        "2024-12-15": "9631.20",
        "2024-12-31": "9660.00",
        "2025-01-15": "9676.45",
        "2025-01-31": "9694.00",
        "2025-02-10": "9704.50",
        "2025-02-20": "9731.00",
    },
    "MTR-2": {
        "2024-12-31": "512.40",
        "2025-01-31": "530.90",
        "2025-02-20": "541.10",
    },
    "MTR-3": {
        "2024-12-31": "88.00",
        "2025-01-31": "88.00",
        "2025-02-20": "95.50",
    },
    "MTR-4": {
        "2025-01-15": "100.00",
        "2025-02-10": "101.50",
    },
}


def seed_database(db: Session) -> bool:
    """Seed the demo data. Returns False when the database already has data."""
    if db.query(Building).first():
        logger.info("Database already has data. Skipping seed.")
        return False

    logger.info("Seeding database...")

    db.add(
        Building(
            id="BLDG-1",
            name="Central Market",
            electric_rate=Decimal("12.50"),
            electric_min_consumption=Decimal("10.00"),
            water_rate=Decimal("45.00"),
            water_min_consumption=Decimal("5.00"),
            lpg_rate=Decimal("120.00"),
        )
    )
    db.add_all(
        [
            VatCode(code="V-12", description="VAT 12%", electric=12, water=12, lpg=12),
            VatCode(code="Z-PH", description="Zero Rated", electric=0, water=0, lpg=0),
            WtCode(code="WC158", description="EWT 1%", electric=1, water=1, lpg=1),
        ]
    )
    db.flush()
    db.add_all(
        [
            Tenant(
                id="TNT-1",
                name="Dela Cruz Dry Goods",
                building_id="BLDG-1",
                vat_code="V-12",
                wt_code="WC158",
                for_penalty=False,
            ),
            Tenant(
                id="TNT-2",
                name="Santos Eatery",
                building_id="BLDG-1",
                vat_code="V-12",
                wt_code=None,
                for_penalty=True,
            ),
        ]
    )
    for stall_id, stall_sn, tenant_id in STALLS:
        db.add(
            Stall(
                id=stall_id,
                stall_sn=stall_sn,
                building_id="BLDG-1",
                tenant_id=tenant_id,
                status=StallStatus.OCCUPIED if tenant_id else StallStatus.AVAILABLE,
            )
        )
    for meter_id, meter_sn, utility, multiplier, stall_id in METERS:
        db.add(
            Meter(
                id=meter_id,
                meter_sn=meter_sn,
                meter_type=utility.value,
                multiplier=Decimal(multiplier),
                stall_id=stall_id,
            )
        )
    db.flush()

    count = 0
    for meter_id, values in READINGS.items():
        for reading_date, value in values.items():
            db.add(
                MeterReading(
                    meter_id=meter_id,
                    reading_date=date.fromisoformat(reading_date),
                    reading_value=Decimal(value),
                    read_by="System Admin",
                )
            )
            count += 1

    db.commit()
    logger.info("Seeded 1 building, 2 tenants, 4 stalls, 4 meters, %d readings", count)
    return True


def main() -> None:
    """Create tables and seed the configured database."""
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
