"""Billing orchestrator: per-meter bills and tenant roll-ups."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from submeter.core.config import settings
from submeter.core.exceptions import InsufficientDataError, NotFoundError, ScopeError
from submeter.models.enums import UtilityType
from submeter.models.meter import Meter
from submeter.schemas.billing import (
    BillingBreakdown,
    MeterBillingFailure,
    MeterBillingResult,
    MeterInfo,
    MoneyTotals,
    ReadingIndices,
    StallInfo,
    TenantBillingResult,
    TenantInfo,
)
from submeter.schemas.periods import CalendarPeriod
from submeter.services import directory
from submeter.services.consumption import (
    compute_meter_consumption,
    parse_utility_type,
    unit_rate,
)
from submeter.services.fanout import compute_per_meter
from submeter.services.periods import billing_periods, format_window, parse_end_date
from submeter.services.readings import find_latest_in_window
from submeter.services.rounding import quantize
from submeter.services.tax import apply_taxes, get_tenant_tax_rates, normalize_pct

logger = logging.getLogger(__name__)

_MONEY_FIELDS = ("base", "vat", "wt", "penalty", "total")


def _penalty_fraction(penalty_rate: Decimal | None) -> Decimal:
    return normalize_pct(settings.DEFAULT_PENALTY_RATE if penalty_rate is None else penalty_rate)


def compute_billing_for_meter(
    db: Session,
    meter_id: str,
    end_date: str,
    penalty_rate: Decimal | None = None,
) -> MeterBillingResult:
    """Bill one meter for the calendar month containing ``end_date``.

    Consumption runs from the latest reading of the previous calendar month
    to the latest reading between the first of the month and ``end_date``.
    ``penalty_rate`` is a percentage (2 or 0.02) applied only to tenants
    flagged for penalty.
    """
    end = parse_end_date(end_date)
    meter = directory.get_meter(db, meter_id)
    return _bill_meter(db, meter, end, _penalty_fraction(penalty_rate))


def _bill_meter(
    db: Session,
    meter: Meter,
    end: date,
    penalty_fraction: Decimal,
) -> MeterBillingResult:
    utility = parse_utility_type(meter.meter_type)
    stall = directory.get_stall_for_meter(db, meter)
    building = directory.get_building(db, stall.building_id)
    if not stall.tenant_id:
        raise NotFoundError("Stall has no tenant; nothing to bill")
    tenant = directory.get_tenant(db, stall.tenant_id)

    multiplier = Decimal(meter.multiplier or 1)

    periods = billing_periods(end)
    current = find_latest_in_window(db, meter.id, periods.current.start, periods.current.end)
    if current is None:
        raise InsufficientDataError(f"No readings for {format_window(periods.current)}")
    previous = find_latest_in_window(db, meter.id, periods.previous.start, periods.previous.end)
    if previous is None:
        raise InsufficientDataError(f"No readings for {format_window(periods.previous)}")

    tax_rates = get_tenant_tax_rates(db, tenant)

    consumption = compute_meter_consumption(
        utility, building, previous.reading_value, current.reading_value, multiplier
    )
    rate = unit_rate(utility, building)
    base = consumption * rate
    taxes = apply_taxes(
        base,
        tax_rates.vat_for(utility),
        tax_rates.wt_for(utility),
        tenant.for_penalty,
        penalty_fraction,
    )

    logger.info(
        "Billed meter %s (%s) for %s: consumption=%s total=%s",
        meter.id,
        utility.value,
        format_window(periods.current),
        quantize(consumption),
        taxes.total,
    )

    return MeterBillingResult(
        meter=MeterInfo(
            meter_id=meter.id,
            meter_sn=meter.meter_sn,
            meter_type=utility,
            multiplier=multiplier,
        ),
        stall=StallInfo(
            stall_id=stall.id,
            building_id=stall.building_id,
            tenant_id=stall.tenant_id,
        ),
        tenant=TenantInfo(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            vat_code=tenant.vat_code,
            wt_code=tenant.wt_code,
            for_penalty=tenant.for_penalty,
        ),
        period=CalendarPeriod(current=periods.current, previous=periods.previous),
        indices=ReadingIndices(
            prev_index=quantize(previous.reading_value),
            prev_date=previous.reading_date,
            curr_index=quantize(current.reading_value),
            curr_date=current.reading_date,
        ),
        billing=BillingBreakdown(
            consumption=quantize(consumption),
            rate=rate,
            base=quantize(base),
            vat=taxes.vat,
            wt=taxes.wt,
            penalty=taxes.penalty,
            total=taxes.total,
        ),
    )


def _billing_failure(meter: Meter, exc: HTTPException) -> MeterBillingFailure:
    return MeterBillingFailure(
        meter_id=meter.id,
        stall_id=meter.stall_id,
        status_code=exc.status_code,
        error=str(exc.detail) or "Billing failed for this meter",
    )


def summarize_billing(
    results: list[MeterBillingResult | MeterBillingFailure],
) -> tuple[dict[UtilityType, MoneyTotals], MoneyTotals]:
    """Sum money figures of successful bills per utility type and overall."""
    by_type: dict[UtilityType, dict[str, Decimal]] = {}
    grand = {field: Decimal("0") for field in _MONEY_FIELDS}

    for result in results:
        if not isinstance(result, MeterBillingResult):
            continue
        sums = by_type.setdefault(
            result.meter.meter_type, {field: Decimal("0") for field in _MONEY_FIELDS}
        )
        for field in _MONEY_FIELDS:
            value = getattr(result.billing, field)
            sums[field] += value
            grand[field] += value

    totals_by_type = {
        utility: MoneyTotals(**{field: quantize(value) for field, value in sums.items()})
        for utility, sums in by_type.items()
    }
    grand_totals = MoneyTotals(**{field: quantize(value) for field, value in grand.items()})
    return totals_by_type, grand_totals


def compute_billing_for_tenant(
    db: Session,
    tenant_id: str,
    end_date: str,
    penalty_rate: Decimal | None = None,
    building_scope: set[str] | None = None,
) -> TenantBillingResult:
    """Bill every meter of a tenant within the caller's building scope.

    A failing meter is reported inline and left out of the totals; the
    roll-up still succeeds for the remaining meters.
    """
    end = parse_end_date(end_date)
    tenant = directory.get_tenant(db, tenant_id)

    stalls = directory.get_stalls_for_tenant(db, tenant.id)
    if not stalls:
        raise NotFoundError("No stalls found for this tenant")
    scoped = directory.filter_stalls_by_scope(stalls, building_scope)
    if not scoped:
        raise ScopeError("No accessible stalls in your assigned buildings")

    meters = directory.get_meters_for_stalls(db, [s.id for s in scoped])
    if not meters:
        raise NotFoundError("No meters found for this tenant (within your scope)")

    penalty_fraction = _penalty_fraction(penalty_rate)
    results = compute_per_meter(
        meters,
        lambda meter: _bill_meter(db, meter, end, penalty_fraction),
        _billing_failure,
    )
    totals_by_type, grand_totals = summarize_billing(results)

    logger.info(
        "Billed tenant %s: %d meters, %d failed, grand total %s",
        tenant.id,
        len(results),
        sum(1 for r in results if isinstance(r, MeterBillingFailure)),
        grand_totals.total,
    )

    return TenantBillingResult(
        tenant_id=tenant.id,
        end_date=end,
        meters=results,
        totals_by_type=totals_by_type,
        grand_totals=grand_totals,
    )
