"""Billing routes for per-meter bills and tenant roll-ups."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from submeter.api.dependencies import get_building_scope
from submeter.core.database import get_db
from submeter.schemas.billing import MeterBillingResult, TenantBillingResult
from submeter.services import billing as billing_service

router = APIRouter(prefix="/billing", tags=["billing"])

_PENALTY_DESCRIPTION = "Penalty percentage (2 or 0.02) for penalty-subject tenants"


@router.get(
    "/meters/{meter_id}/period-end/{end_date}",
    response_model=MeterBillingResult,
)
def get_meter_billing(
    meter_id: str,
    end_date: str,
    penalty_rate: Decimal | None = Query(None, ge=0, description=_PENALTY_DESCRIPTION),
    db: Session = Depends(get_db),
) -> MeterBillingResult:
    """Bill a meter for the calendar month containing end_date (YYYY-MM-DD).

    Example: end_date=2025-02-20 compares the latest reading in
    2025-02-01..2025-02-20 with the latest reading in 2025-01-01..2025-01-31.
    """
    return billing_service.compute_billing_for_meter(db, meter_id, end_date, penalty_rate)


@router.get(
    "/tenants/{tenant_id}/period-end/{end_date}",
    response_model=TenantBillingResult,
)
def get_tenant_billing(
    tenant_id: str,
    end_date: str,
    penalty_rate: Decimal | None = Query(None, ge=0, description=_PENALTY_DESCRIPTION),
    building_scope: set[str] | None = Depends(get_building_scope),
    db: Session = Depends(get_db),
) -> TenantBillingResult:
    """Bill every meter of a tenant.

    Meters that cannot be billed appear as inline errors; totals cover the rest.
    """
    return billing_service.compute_billing_for_tenant(
        db, tenant_id, end_date, penalty_rate, building_scope
    )
