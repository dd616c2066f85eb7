"""
Observation Module

Canonical observation schemas and the normalizer that maps raw context
broker readings onto them.
"""

from .schemas import (
    Beach,
    GeoLocation,
    Observation,
    RawObservation,
    SelectedTemperature,
    SourceCategory,
    CATEGORY_PRIORITY,
    UNKNOWN_OBSERVED_AT,
)
from .normalizer import classify_source, parse_observed_at, normalize

__all__ = [
    'Beach',
    'GeoLocation',
    'Observation',
    'RawObservation',
    'SelectedTemperature',
    'SourceCategory',
    'CATEGORY_PRIORITY',
    'UNKNOWN_OBSERVED_AT',
    'classify_source',
    'parse_observed_at',
    'normalize',
]
