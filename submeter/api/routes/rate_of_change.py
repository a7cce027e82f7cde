"""Rate-of-change routes for meters, tenants and buildings."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from submeter.api.dependencies import get_building_scope
from submeter.core.database import get_db
from submeter.schemas.rate_of_change import BuildingRocResult, MeterRocResult, TenantRocResult
from submeter.services import rate_of_change as roc_service

router = APIRouter(prefix="/rate-of-change", tags=["rate-of-change"])


@router.get(
    "/meters/{meter_id}/period-end/{end_date}",
    response_model=MeterRocResult,
)
def get_meter_rate_of_change(
    meter_id: str,
    end_date: str,
    db: Session = Depends(get_db),
) -> MeterRocResult:
    """Consumption change of a meter versus the previous period, rounded up."""
    return roc_service.compute_rate_of_change_for_meter(db, meter_id, end_date)


@router.get(
    "/tenants/{tenant_id}/period-end/{end_date}",
    response_model=TenantRocResult,
)
def get_tenant_rate_of_change(
    tenant_id: str,
    end_date: str,
    building_scope: set[str] | None = Depends(get_building_scope),
    db: Session = Depends(get_db),
) -> TenantRocResult:
    """Per-meter rate of change for a tenant plus one figure from summed consumption."""
    return roc_service.compute_rate_of_change_for_tenant(db, tenant_id, end_date, building_scope)


@router.get(
    "/buildings/{building_id}/period-end/{end_date}",
    response_model=BuildingRocResult,
)
def get_building_rate_of_change(
    building_id: str,
    end_date: str,
    building_scope: set[str] | None = Depends(get_building_scope),
    db: Session = Depends(get_db),
) -> BuildingRocResult:
    """Rate of change for a building grouped by tenant."""
    return roc_service.compute_rate_of_change_for_building(
        db, building_id, end_date, building_scope
    )
