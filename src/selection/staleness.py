"""
Staleness Policy

Decides whether an observation is still usable given its source category
and age.

Design Principles:
- Deterministic: the caller supplies "now"
- Each source category has its own maximum age
- An age exactly equal to the threshold is still fresh
- Thresholds are configurable via YAML (config/staleness.yaml)
"""

import math
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from src.observations.schemas import SourceCategory, UNKNOWN_OBSERVED_AT

# Maximum observation age per category (hours).
# Manual samples: 24h. An earlier revision used 12h; pending product-owner
# confirmation the later, more permissive value is the default.
DEFAULT_MAX_AGE_HOURS: Dict[SourceCategory, float] = {
    SourceCategory.SENSOR: 4,
    SourceCategory.SATELLITE_MODEL: 12,
    SourceCategory.MANUAL_SAMPLE: 24,
}

# Largest age a timedelta can hold
MAX_AGE_LIMIT_HOURS = timedelta.max.total_seconds() / 3600

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'staleness.yaml'


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class StalenessPolicy:
    """
    Per-category freshness thresholds.

    Attributes:
        max_age: Mapping of SourceCategory to maximum acceptable age
    """

    def __init__(self, max_age_hours: Optional[Mapping[SourceCategory, float]] = None):
        """
        Initialize policy.

        Args:
            max_age_hours: Overrides per category; unspecified categories
                keep DEFAULT_MAX_AGE_HOURS
        """
        hours = dict(DEFAULT_MAX_AGE_HOURS)
        for category, value in (max_age_hours or {}).items():
            category = SourceCategory(category)
            try:
                h = float(value)
            except (TypeError, ValueError):
                h = math.nan
            if not math.isfinite(h) or h <= 0 or h >= MAX_AGE_LIMIT_HOURS:
                raise ValueError(f"Max age for {category.value} must be a positive finite number of hours, got {value}")
            hours[category] = h

        self.max_age: Dict[SourceCategory, timedelta] = {
            category: timedelta(hours=h) for category, h in hours.items()
        }

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> 'StalenessPolicy':
        """
        Load thresholds from a YAML file.

        Expected layout:

            max_age_hours:
              sensor: 4
              satellite_model: 12
              manual_sample: 24

        Args:
            config_path: Path to YAML file

        Returns:
            StalenessPolicy instance
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Staleness config not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        raw = config.get('max_age_hours') or {}
        if not isinstance(raw, dict):
            raise ValueError(f"max_age_hours must be a mapping in {config_path}")

        try:
            overrides = {SourceCategory(key): value for key, value in raw.items()}
        except ValueError as e:
            raise ValueError(f"Unknown source category in {config_path}: {e}") from e

        return cls(overrides)

    def threshold(self, category: SourceCategory) -> timedelta:
        return self.max_age[SourceCategory(category)]

    def is_stale(
        self,
        category: SourceCategory,
        observed_at: datetime,
        now: datetime
    ) -> bool:
        """
        Check whether an observation is too old to be used.

        Args:
            category: Source category of the observation
            observed_at: When the observation was made
            now: Reference time

        Returns:
            True if now - observed_at exceeds the category threshold

        Examples:
            >>> now = datetime(2024, 7, 1, 12, tzinfo=timezone.utc)
            >>> policy = StalenessPolicy()
            >>> policy.is_stale(SourceCategory.SENSOR, now - timedelta(hours=4), now)
            False
            >>> policy.is_stale(SourceCategory.SENSOR, now - timedelta(hours=5), now)
            True
        """
        observed_at = _as_utc(observed_at)
        if observed_at == UNKNOWN_OBSERVED_AT:
            return True

        return _as_utc(now) - observed_at > self.threshold(category)


DEFAULT_POLICY = StalenessPolicy()


def is_stale(category: SourceCategory, observed_at: datetime, now: datetime) -> bool:
    """Check staleness against the default thresholds."""
    return DEFAULT_POLICY.is_stale(category, observed_at, now)


def load_policy(config_path: Optional[Union[str, Path]] = None) -> StalenessPolicy:
    """
    Load the staleness policy.

    Uses config/staleness.yaml when no path is given and it exists,
    otherwise the built-in defaults.
    """
    if config_path is not None:
        return StalenessPolicy.from_yaml(config_path)

    if DEFAULT_CONFIG_PATH.exists():
        return StalenessPolicy.from_yaml(DEFAULT_CONFIG_PATH)

    return StalenessPolicy()
