"""Tax engine: VAT, withholding tax and late-payment penalty.

Rule (order matters):

    vat     = base * vat_rate
    wt      = vat * wt_rate        # withholding is taken from the VAT, not the base
    penalty = base * penalty_rate  # only for penalty-subject tenants
    total   = base + vat + penalty - wt

Stored percentages are either whole numbers (12 = 12%) or fractions (0.12).
``normalize_pct`` maps both onto a fraction and is the only place that does.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from submeter.models.enums import UtilityType
from submeter.models.tenant import Tenant
from submeter.schemas.billing import TaxBreakdown
from submeter.services.directory import get_vat_code, get_wt_code
from submeter.services.rounding import quantize

_ZERO = Decimal("0")


def normalize_pct(value: Decimal | int | float | str | None) -> Decimal:
    """Convert a stored percentage into a fraction: 12 -> 0.12, 0.12 -> 0.12."""
    if value is None or value == "":
        return _ZERO
    pct = Decimal(str(value))
    return pct / 100 if pct >= 1 else pct


def apply_taxes(
    base: Decimal,
    vat_rate: Decimal,
    wt_rate: Decimal,
    for_penalty: bool,
    penalty_rate: Decimal,
) -> TaxBreakdown:
    """Apply VAT, withholding and penalty to a base amount.

    Rates are fractions, already passed through ``normalize_pct``.
    Each figure is rounded on its own; ``total`` comes from the unrounded
    intermediates and is rounded once.
    """
    vat = base * vat_rate
    wt = vat * wt_rate
    penalty = base * penalty_rate if for_penalty else _ZERO
    total = base + vat + penalty - wt
    return TaxBreakdown(
        vat=quantize(vat),
        wt=quantize(wt),
        penalty=quantize(penalty),
        total=quantize(total),
    )


@dataclass(frozen=True)
class TenantTaxRates:
    """Per-utility VAT and WT fractions for a tenant."""

    vat: dict[UtilityType, Decimal]
    wt: dict[UtilityType, Decimal]

    def vat_for(self, utility: UtilityType) -> Decimal:
        return self.vat.get(utility, _ZERO)

    def wt_for(self, utility: UtilityType) -> Decimal:
        return self.wt.get(utility, _ZERO)


def _bundle(row) -> dict[UtilityType, Decimal]:
    if row is None:
        return {utility: _ZERO for utility in UtilityType}
    return {
        UtilityType.ELECTRIC: normalize_pct(row.electric),
        UtilityType.WATER: normalize_pct(row.water),
        UtilityType.LPG: normalize_pct(row.lpg),
    }


def get_tenant_tax_rates(db: Session, tenant: Tenant) -> TenantTaxRates:
    """Look up a tenant's VAT and WT bundles; a null code means 0%."""
    vat_row = get_vat_code(db, tenant.vat_code) if tenant.vat_code else None
    wt_row = get_wt_code(db, tenant.wt_code) if tenant.wt_code else None
    return TenantTaxRates(vat=_bundle(vat_row), wt=_bundle(wt_row))
