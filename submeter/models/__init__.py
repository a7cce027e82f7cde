"""Database models."""

from submeter.models.building import Building
from submeter.models.enums import StallStatus, UtilityType
from submeter.models.meter import Meter
from submeter.models.meter_reading import MeterReading
from submeter.models.stall import Stall
from submeter.models.tax_code import VatCode, WtCode
from submeter.models.tenant import Tenant

__all__ = [
    "Building",
    "Meter",
    "MeterReading",
    "Stall",
    "StallStatus",
    "Tenant",
    "UtilityType",
    "VatCode",
    "WtCode",
]
