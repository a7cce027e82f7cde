"""Enum definitions for meters and stalls."""

from enum import Enum


class UtilityType(str, Enum):
    """Utility measured by a meter."""

    ELECTRIC = "electric"
    WATER = "water"
    LPG = "lpg"


class StallStatus(str, Enum):
    """Occupancy state of a stall."""

    OCCUPIED = "occupied"
    AVAILABLE = "available"
    UNDER_MAINTENANCE = "under_maintenance"
