"""Billing schemas for per-meter bills and tenant roll-ups."""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

from submeter.models.enums import UtilityType
from submeter.schemas.periods import CalendarPeriod


class TaxBreakdown(BaseModel):
    """Rounded output of the tax engine."""

    vat: Decimal
    wt: Decimal
    penalty: Decimal
    total: Decimal


class MeterInfo(BaseModel):
    """Meter attributes echoed in a result."""

    meter_id: str
    meter_sn: str | None
    meter_type: UtilityType
    multiplier: Decimal


class StallInfo(BaseModel):
    """Resolved stall, building and tenant identities."""

    stall_id: str
    building_id: str
    tenant_id: str | None


class TenantInfo(BaseModel):
    """Tenant tax configuration used for a bill."""

    tenant_id: str
    tenant_name: str
    vat_code: str | None
    wt_code: str | None
    for_penalty: bool


class ReadingIndices(BaseModel):
    """The two index readings a computation was based on."""

    prev_index: Decimal
    prev_date: date
    curr_index: Decimal
    curr_date: date


class BillingBreakdown(BaseModel):
    """Consumption and money figures for one meter."""

    consumption: Decimal
    rate: Decimal
    base: Decimal
    vat: Decimal
    wt: Decimal
    penalty: Decimal
    total: Decimal


class MeterBillingResult(BaseModel):
    """Successful bill for a single meter."""

    status: Literal["ok"] = "ok"
    meter: MeterInfo
    stall: StallInfo
    tenant: TenantInfo
    period: CalendarPeriod
    indices: ReadingIndices
    billing: BillingBreakdown


class MeterBillingFailure(BaseModel):
    """Inline error for a meter that could not be billed."""

    status: Literal["error"] = "error"
    meter_id: str
    stall_id: str | None
    status_code: int
    error: str


class MoneyTotals(BaseModel):
    """Summed money figures."""

    base: Decimal = Decimal("0")
    vat: Decimal = Decimal("0")
    wt: Decimal = Decimal("0")
    penalty: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class TenantBillingResult(BaseModel):
    """Bills for every meter of a tenant plus totals from the successes."""

    tenant_id: str
    end_date: date
    meters: list[MeterBillingResult | MeterBillingFailure]
    totals_by_type: dict[UtilityType, MoneyTotals]
    grand_totals: MoneyTotals
