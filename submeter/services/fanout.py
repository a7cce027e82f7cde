"""Per-meter fan-out for tenant and building aggregates.

Each meter is computed independently. Engine errors (``HTTPException``) are
captured as a failure entry for that meter; any other exception propagates.
"""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from fastapi import HTTPException

from submeter.models.meter import Meter

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")
FailureT = TypeVar("FailureT")


def compute_per_meter(
    meters: Iterable[Meter],
    compute: Callable[[Meter], ResultT],
    on_failure: Callable[[Meter, HTTPException], FailureT],
) -> list[ResultT | FailureT]:
    """Run ``compute`` for every meter, keeping input order."""
    results: list[ResultT | FailureT] = []
    for meter in meters:
        try:
            results.append(compute(meter))
        except HTTPException as exc:
            logger.warning("Meter %s skipped: %s", meter.id, exc.detail)
            results.append(on_failure(meter, exc))
    return results
