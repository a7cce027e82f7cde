"""Rate-of-change schemas for meters and tenant/building aggregates."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, field_serializer

from submeter.models.enums import UtilityType
from submeter.schemas.billing import ReadingIndices
from submeter.schemas.periods import CalendarPeriod, DisplayPeriods
from submeter.services.rounding import quantize


class MeterRocResult(BaseModel):
    """Period-over-period consumption change for one meter.

    ``period`` holds the rolling display labels; ``calendar_period`` holds
    the calendar windows the readings were actually selected from.
    Consumption is held unrounded so group sums are exact; it is rounded
    when the result is serialized.
    """

    status: Literal["ok"] = "ok"
    meter_id: str
    stall_id: str
    building_id: str
    tenant_id: str | None
    meter_type: UtilityType
    period: DisplayPeriods
    calendar_period: CalendarPeriod
    indices: ReadingIndices
    current_consumption: Decimal
    previous_consumption: Decimal | None
    rate_of_change: int | None

    @field_serializer("current_consumption", "previous_consumption")
    def _round_consumption(self, value: Decimal | None) -> Decimal | None:
        return quantize(value)


class MeterRocFailure(BaseModel):
    """Inline error for a meter whose rate of change could not be computed."""

    status: Literal["error"] = "error"
    meter_id: str
    stall_id: str | None
    status_code: int
    error: str


class RocAggregate(BaseModel):
    """Group-level figures derived from summed consumption.

    ``current_consumption`` covers every successful meter.
    ``comparable_current_consumption`` and ``previous_consumption`` cover only
    meters that have both figures, and ``rate_of_change`` is derived from
    those two sums.
    """

    meter_count: int
    failed_count: int
    current_consumption: Decimal
    comparable_current_consumption: Decimal | None
    previous_consumption: Decimal | None
    rate_of_change: int | None


class TenantRocResult(BaseModel):
    """Rate of change for all meters of a tenant."""

    tenant_id: str
    period: DisplayPeriods
    meters: list[MeterRocResult | MeterRocFailure]
    aggregate: RocAggregate


class TenantRocGroup(BaseModel):
    """Meters of one tenant inside a building; ``tenant_id`` is None for vacant stalls."""

    tenant_id: str | None
    meters: list[MeterRocResult | MeterRocFailure]
    aggregate: RocAggregate


class BuildingRocResult(BaseModel):
    """Rate of change for a building, grouped by tenant."""

    building_id: str
    period: DisplayPeriods
    tenants: list[TenantRocGroup]
    aggregate: RocAggregate
