"""Output rounding helpers.

Formulas work on unrounded ``Decimal`` values; these helpers are applied only
when a figure leaves the engine.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal


def quantize(value: Decimal | None, places: int = 2) -> Decimal | None:
    """Round half-up to ``places`` decimals, passing ``None`` through."""
    if value is None:
        return None
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def ceil_percent_change(current: Decimal, previous: Decimal | None) -> int | None:
    """Percentage change from ``previous`` to ``current``, rounded toward +infinity.

    Returns None when there is no positive previous figure to compare against.
    """
    if previous is None or previous <= 0:
        return None
    change = (current - previous) / previous * 100
    return int(change.to_integral_value(rounding=ROUND_CEILING))
