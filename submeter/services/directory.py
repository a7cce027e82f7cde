"""Directory lookups for meters, stalls, buildings, tenants and tax codes."""

from collections.abc import Iterable

from sqlalchemy.orm import Session

from submeter.core.exceptions import NotFoundError
from submeter.models.building import Building
from submeter.models.meter import Meter
from submeter.models.stall import Stall
from submeter.models.tax_code import VatCode, WtCode
from submeter.models.tenant import Tenant


def get_meter(db: Session, meter_id: str) -> Meter:
    """Get a meter by ID."""
    meter = db.query(Meter).filter(Meter.id == meter_id).first()
    if not meter:
        raise NotFoundError("Meter not found")
    return meter


def get_stall_for_meter(db: Session, meter: Meter) -> Stall:
    """Get the stall a meter is installed in."""
    stall = db.query(Stall).filter(Stall.id == meter.stall_id).first()
    if not stall:
        raise NotFoundError("Stall not found for this meter")
    return stall


def get_building(db: Session, building_id: str) -> Building:
    """Get a building and its rate configuration."""
    building = db.query(Building).filter(Building.id == building_id).first()
    if not building:
        raise NotFoundError("Building configuration not found")
    return building


def get_tenant(db: Session, tenant_id: str | None) -> Tenant:
    """Get a tenant by ID."""
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first() if tenant_id else None
    if not tenant:
        raise NotFoundError("Tenant not found")
    return tenant


def get_vat_code(db: Session, code: str) -> VatCode:
    """Get a VAT percentage bundle by code."""
    vat = db.query(VatCode).filter(VatCode.code == code).first()
    if not vat:
        raise NotFoundError(f"VAT code '{code}' not found")
    return vat


def get_wt_code(db: Session, code: str) -> WtCode:
    """Get a withholding-tax percentage bundle by code."""
    wt = db.query(WtCode).filter(WtCode.code == code).first()
    if not wt:
        raise NotFoundError(f"WT code '{code}' not found")
    return wt


def get_stalls_for_tenant(db: Session, tenant_id: str) -> list[Stall]:
    """Get all stalls leased to a tenant."""
    return db.query(Stall).filter(Stall.tenant_id == tenant_id).order_by(Stall.id).all()


def get_stalls_for_building(db: Session, building_id: str) -> list[Stall]:
    """Get all stalls in a building."""
    return db.query(Stall).filter(Stall.building_id == building_id).order_by(Stall.id).all()


def get_meters_for_stalls(db: Session, stall_ids: Iterable[str]) -> list[Meter]:
    """Get all meters installed in the given stalls."""
    ids = list(stall_ids)
    if not ids:
        return []
    return db.query(Meter).filter(Meter.stall_id.in_(ids)).order_by(Meter.id).all()


def filter_stalls_by_scope(stalls: list[Stall], building_scope: set[str] | None) -> list[Stall]:
    """Keep stalls inside the caller's buildings; a None scope keeps everything."""
    if building_scope is None:
        return stalls
    return [s for s in stalls if s.building_id in building_scope]
