"""Thermal column of lakes: snow on top, lake water in the middle and sediment below."""

from .layout import ColumnLayout
from .state import LakeDiagnostics, LakeForcing, LakeState
from .temperature import update_lake_column_temperature, update_lake_temperature

__all__ = [
    "ColumnLayout",
    "LakeDiagnostics",
    "LakeForcing",
    "LakeState",
    "update_lake_column_temperature",
    "update_lake_temperature",
]
