"""Engine error taxonomy.

Every error is an ``HTTPException`` so route handlers can let it propagate
and FastAPI renders ``{"detail": ...}`` with the right status code. Aggregate
computations catch these per meter and report them inline.
"""

from fastapi import HTTPException, status


class InvalidInputError(HTTPException):
    """Malformed end date, unsupported meter type or similar bad input."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    """A directory entity (meter, stall, building, tenant, tax code) is missing."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InsufficientDataError(HTTPException):
    """No reading exists in a window the computation requires."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class ScopeError(HTTPException):
    """The caller's building scope leaves nothing to compute."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    """A reading already exists for the meter and date."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
