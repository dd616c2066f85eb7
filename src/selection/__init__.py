"""Temperature selection: staleness policy and priority cascade."""

from .staleness import (
    DEFAULT_MAX_AGE_HOURS,
    DEFAULT_POLICY,
    StalenessPolicy,
    is_stale,
    load_policy,
)
from .selector import latest, select_current, select_current_temperatures

__all__ = [
    'DEFAULT_MAX_AGE_HOURS',
    'DEFAULT_POLICY',
    'StalenessPolicy',
    'is_stale',
    'load_policy',
    'latest',
    'select_current',
    'select_current_temperatures',
]
