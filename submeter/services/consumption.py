"""Consumption calculator.

A non-positive index delta (rollover, meter swap, bad entry) is billed at the
configured minimum instead of the raw delta. The substitution is business
policy: it applies whenever ``raw <= 0`` and is not flagged.
"""

from decimal import Decimal

from submeter.core.exceptions import InvalidInputError
from submeter.models.building import Building
from submeter.models.enums import UtilityType

LPG_MIN_CONSUMPTION = Decimal("1")


def parse_utility_type(value: str | None) -> UtilityType:
    """Map a stored meter type onto ``UtilityType``."""
    normalized = (value or "").strip().lower()
    try:
        return UtilityType(normalized)
    except ValueError as exc:
        raise InvalidInputError(f"Unsupported meter type: {normalized or value}") from exc


def minimum_consumption(utility: UtilityType, building: Building) -> Decimal:
    """Minimum billable consumption for a utility in a building."""
    if utility == UtilityType.ELECTRIC:
        return Decimal(building.electric_min_consumption or 0)
    if utility == UtilityType.WATER:
        return Decimal(building.water_min_consumption or 0)
    return LPG_MIN_CONSUMPTION


def unit_rate(utility: UtilityType, building: Building) -> Decimal:
    """Price per unit (kWh, m3 or kg) for a utility in a building."""
    if utility == UtilityType.ELECTRIC:
        return Decimal(building.electric_rate or 0)
    if utility == UtilityType.WATER:
        return Decimal(building.water_rate or 0)
    return Decimal(building.lpg_rate or 0)


def compute_consumption(
    previous_index: Decimal,
    current_index: Decimal,
    multiplier: Decimal,
    minimum: Decimal,
) -> Decimal:
    """Billable consumption between two index readings (unrounded).

    consumption = (current - previous) * multiplier, or ``minimum`` when that
    is not positive.
    """
    raw = (Decimal(current_index) - Decimal(previous_index)) * Decimal(multiplier)
    if raw > 0:
        return raw
    return Decimal(minimum)


def compute_meter_consumption(
    utility: UtilityType,
    building: Building,
    previous_index: Decimal,
    current_index: Decimal,
    multiplier: Decimal,
) -> Decimal:
    """Consumption using the building's (or the fixed LPG) minimum for the utility."""
    return compute_consumption(
        previous_index,
        current_index,
        multiplier,
        minimum_consumption(utility, building),
    )
