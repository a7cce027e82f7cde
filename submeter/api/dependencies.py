"""API dependencies."""

from fastapi import Header


def get_building_scope(
    x_building_scope: str | None = Header(
        None,
        description="Comma-separated building ids the caller may see; omit for full access",
    ),
) -> set[str] | None:
    """Building scope resolved by the authorization layer in front of the API.

    Returns None when the caller is unrestricted.
    """
    if x_building_scope is None:
        return None
    return {b.strip() for b in x_building_scope.split(",") if b.strip()}
