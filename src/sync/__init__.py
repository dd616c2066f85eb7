"""
Beach Sync Module

Coordinates fetching, selection and persistence of beach water temperatures.
"""

from .coordinator import BeachSync, SyncReport, DEFAULT_SENSOR_SOURCE, temperature_source
from .formatting import format_swedish_date_and_time
from .repository import BeachRepository

__all__ = [
    'BeachSync',
    'SyncReport',
    'DEFAULT_SENSOR_SOURCE',
    'temperature_source',
    'format_swedish_date_and_time',
    'BeachRepository',
]
