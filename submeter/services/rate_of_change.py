"""Rate-of-change calculator for meters, tenants and buildings.

Consumption figures come from calendar-month windows (the same selection as
billing, but with no tax applied). Output periods are labelled with rolling
display windows; the two are reported side by side and never reconciled.

Group figures are aggregate-then-ratio: consumption is summed across meters
and a single rate is derived from the sums. Individual meter rates are never
averaged.
"""

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from submeter.core.exceptions import InsufficientDataError, NotFoundError, ScopeError
from submeter.models.meter import Meter
from submeter.models.stall import Stall
from submeter.schemas.billing import ReadingIndices
from submeter.schemas.periods import BillingPeriods, CalendarPeriod, DisplayPeriods
from submeter.schemas.rate_of_change import (
    BuildingRocResult,
    MeterRocFailure,
    MeterRocResult,
    RocAggregate,
    TenantRocGroup,
    TenantRocResult,
)
from submeter.services import directory
from submeter.services.consumption import compute_meter_consumption, parse_utility_type
from submeter.services.fanout import compute_per_meter
from submeter.services.periods import (
    billing_periods,
    display_periods,
    format_window,
    parse_end_date,
)
from submeter.services.readings import find_latest_in_window
from submeter.services.rounding import ceil_percent_change, quantize

logger = logging.getLogger(__name__)


def compute_rate_of_change_for_meter(db: Session, meter_id: str, end_date: str) -> MeterRocResult:
    """Compare a meter's current-period consumption with the previous period.

    current consumption  = latest(current month .. end) - latest(previous month)
    previous consumption = latest(previous month) - latest(pre-previous month)

    The pre-previous reading is optional; without it (or when the previous
    consumption is zero) the rate of change is None.
    """
    end = parse_end_date(end_date)
    meter = directory.get_meter(db, meter_id)
    return _roc_meter(db, meter, billing_periods(end), display_periods(end))


def _roc_meter(
    db: Session,
    meter: Meter,
    periods: BillingPeriods,
    display: DisplayPeriods,
) -> MeterRocResult:
    utility = parse_utility_type(meter.meter_type)
    stall = directory.get_stall_for_meter(db, meter)
    building = directory.get_building(db, stall.building_id)
    multiplier = Decimal(meter.multiplier or 1)

    current = find_latest_in_window(db, meter.id, periods.current.start, periods.current.end)
    previous = find_latest_in_window(db, meter.id, periods.previous.start, periods.previous.end)
    if current is None or previous is None:
        raise InsufficientDataError(
            "Insufficient readings to compute current period. Need data in "
            f"{format_window(periods.current)} and {format_window(periods.previous)}."
        )
    pre_previous = find_latest_in_window(
        db, meter.id, periods.pre_previous.start, periods.pre_previous.end
    )

    current_consumption = compute_meter_consumption(
        utility, building, previous.reading_value, current.reading_value, multiplier
    )
    previous_consumption: Decimal | None = None
    if pre_previous is not None:
        previous_consumption = compute_meter_consumption(
            utility, building, pre_previous.reading_value, previous.reading_value, multiplier
        )

    return MeterRocResult(
        meter_id=meter.id,
        stall_id=stall.id,
        building_id=stall.building_id,
        tenant_id=stall.tenant_id,
        meter_type=utility,
        period=display,
        calendar_period=CalendarPeriod(current=periods.current, previous=periods.previous),
        indices=ReadingIndices(
            prev_index=quantize(previous.reading_value),
            prev_date=previous.reading_date,
            curr_index=quantize(current.reading_value),
            curr_date=current.reading_date,
        ),
        current_consumption=current_consumption,
        previous_consumption=previous_consumption,
        rate_of_change=ceil_percent_change(current_consumption, previous_consumption),
    )


def _roc_failure(meter: Meter, exc: HTTPException) -> MeterRocFailure:
    return MeterRocFailure(
        meter_id=meter.id,
        stall_id=meter.stall_id,
        status_code=exc.status_code,
        error=str(exc.detail) or "Failed to compute rate of change",
    )


def aggregate_rate_of_change(results: list[MeterRocResult | MeterRocFailure]) -> RocAggregate:
    """Sum consumption across meters and derive one rate from the sums.

    Only meters with both a current and a previous figure feed the rate, so a
    meter without history does not read as growth. The rate comes from the
    unrounded ``comparable_current_consumption`` and ``previous_consumption``
    sums; only the reported sums are rounded.
    """
    successes = [r for r in results if isinstance(r, MeterRocResult)]
    comparable = [r for r in successes if r.previous_consumption is not None]

    current_total = sum((r.current_consumption for r in successes), Decimal("0"))
    comparable_current: Decimal | None = None
    previous_total: Decimal | None = None
    if comparable:
        comparable_current = sum((r.current_consumption for r in comparable), Decimal("0"))
        previous_total = sum((r.previous_consumption for r in comparable), Decimal("0"))

    return RocAggregate(
        meter_count=len(results),
        failed_count=len(results) - len(successes),
        current_consumption=quantize(current_total),
        comparable_current_consumption=quantize(comparable_current),
        previous_consumption=quantize(previous_total),
        rate_of_change=(
            ceil_percent_change(comparable_current, previous_total) if comparable else None
        ),
    )


def _roc_for_meters(
    db: Session,
    meters: list[Meter],
    end: date,
) -> list[MeterRocResult | MeterRocFailure]:
    periods = billing_periods(end)
    display = display_periods(end)
    return compute_per_meter(
        meters,
        lambda meter: _roc_meter(db, meter, periods, display),
        _roc_failure,
    )


def compute_rate_of_change_for_tenant(
    db: Session,
    tenant_id: str,
    end_date: str,
    building_scope: set[str] | None = None,
) -> TenantRocResult:
    """Rate of change for every meter of a tenant plus one aggregate figure."""
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

    results = _roc_for_meters(db, meters, end)
    aggregate = aggregate_rate_of_change(results)
    logger.info(
        "Rate of change for tenant %s: %d meters, aggregate %s%%",
        tenant.id,
        aggregate.meter_count,
        aggregate.rate_of_change,
    )
    return TenantRocResult(
        tenant_id=tenant.id,
        period=display_periods(end),
        meters=results,
        aggregate=aggregate,
    )


def _group_stalls_by_tenant(stalls: list[Stall]) -> dict[str | None, list[Stall]]:
    groups: dict[str | None, list[Stall]] = {}
    for stall in stalls:
        groups.setdefault(stall.tenant_id, []).append(stall)
    # Vacant stalls last
    if None in groups:
        groups[None] = groups.pop(None)
    return groups


def compute_rate_of_change_for_building(
    db: Session,
    building_id: str,
    end_date: str,
    building_scope: set[str] | None = None,
) -> BuildingRocResult:
    """Rate of change for a building, grouped by tenant.

    Each tenant group gets its own aggregate; the building aggregate is
    derived from every meter in the building.
    """
    end = parse_end_date(end_date)
    building = directory.get_building(db, building_id)
    if building_scope is not None and building.id not in building_scope:
        raise ScopeError("No access to this building")

    stalls = directory.get_stalls_for_building(db, building.id)
    groups: list[TenantRocGroup] = []
    all_results: list[MeterRocResult | MeterRocFailure] = []

    for tenant_id, tenant_stalls in _group_stalls_by_tenant(stalls).items():
        meters = directory.get_meters_for_stalls(db, [s.id for s in tenant_stalls])
        if not meters:
            continue
        results = _roc_for_meters(db, meters, end)
        all_results.extend(results)
        groups.append(
            TenantRocGroup(
                tenant_id=tenant_id,
                meters=results,
                aggregate=aggregate_rate_of_change(results),
            )
        )

    if not all_results:
        raise NotFoundError("No meters found for this building")

    aggregate = aggregate_rate_of_change(all_results)
    logger.info(
        "Rate of change for building %s: %d tenant groups, %d meters, aggregate %s%%",
        building.id,
        len(groups),
        aggregate.meter_count,
        aggregate.rate_of_change,
    )
    return BuildingRocResult(
        building_id=building.id,
        period=display_periods(end),
        tenants=groups,
        aggregate=aggregate,
    )
