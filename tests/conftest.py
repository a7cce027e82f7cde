"""Shared fixtures: in-memory database, API client and a configured building."""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from submeter.core.database import Base, get_db
from submeter.main import app
from submeter.models import Building, Meter, MeterReading, Stall, Tenant, VatCode, WtCode


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def building(test_db) -> Building:
    """A building with rates, tax codes, two tenants and four stalls.

    Rates: electric 10.00/kWh (min 5), water 30.00/m3 (min 3), LPG 100.00/kg.
    TNT-1: VAT 12%, WT 1%, no penalty; stalls STL-1 and STL-2.
    TNT-2: no tax codes, penalty-subject; stall STL-3.
    STL-4 is vacant.
    """
    bldg = Building(
        id="BLDG-1",
        name="Test Market",
        electric_rate=Decimal("10.00"),
        electric_min_consumption=Decimal("5.00"),
        water_rate=Decimal("30.00"),
        water_min_consumption=Decimal("3.00"),
        lpg_rate=Decimal("100.00"),
    )
    test_db.add(bldg)
    test_db.add_all(
        [
            VatCode(code="V-12", electric=Decimal("12"), water=Decimal("12"), lpg=Decimal("12")),
            VatCode(
                code="V-FRAC",
                electric=Decimal("0.12"),
                water=Decimal("0.12"),
                lpg=Decimal("0.12"),
            ),
            WtCode(code="W-1", electric=Decimal("1"), water=Decimal("1"), lpg=Decimal("1")),
            Tenant(
                id="TNT-1",
                name="Dry Goods",
                building_id="BLDG-1",
                vat_code="V-12",
                wt_code="W-1",
                for_penalty=False,
            ),
            Tenant(id="TNT-2", name="Eatery", building_id="BLDG-1", for_penalty=True),
            Stall(id="STL-1", stall_sn="A-101", building_id="BLDG-1", tenant_id="TNT-1"),
            Stall(id="STL-2", stall_sn="A-102", building_id="BLDG-1", tenant_id="TNT-1"),
            Stall(id="STL-3", stall_sn="B-201", building_id="BLDG-1", tenant_id="TNT-2"),
            Stall(id="STL-4", stall_sn="C-301", building_id="BLDG-1", tenant_id=None),
        ]
    )
    test_db.commit()
    return bldg


@pytest.fixture
def add_meter(test_db):
    """Factory: add a meter with readings given as {"YYYY-MM-DD": "value"}."""

    def _add_meter(
        meter_id: str,
        stall_id: str,
        meter_type: str = "electric",
        multiplier: str = "1",
        readings: dict[str, str] | None = None,
    ) -> Meter:
        meter = Meter(
            id=meter_id,
            meter_sn=f"SN-{meter_id}",
            meter_type=meter_type,
            multiplier=Decimal(multiplier),
            stall_id=stall_id,
        )
        test_db.add(meter)
        for reading_date, value in (readings or {}).items():
            test_db.add(
                MeterReading(
                    meter_id=meter_id,
                    reading_date=date.fromisoformat(reading_date),
                    reading_value=Decimal(value),
                )
            )
        test_db.commit()
        return meter

    return _add_meter
