"""
Current Temperature Selector

Picks the single authoritative water temperature for a beach from a set of
possibly conflicting, possibly stale observations.

Decision logic (short-circuits at the first satisfied tier):
1. Latest sensor observation, if not stale
2. Latest satellite/model observation, if not stale
3. Latest manual sample, if not stale
4. Nothing (the stored temperature should be cleared)

A fresh sensor reading always wins, even if a lower tier is more recent.

Design Principles:
- Total: never raises, absence is None
- Never fabricates: the result is copied from exactly one input
- Ties on timestamp resolve to the first observation encountered
"""

from datetime import datetime
from typing import Dict, Iterable, Mapping, Optional, Sequence

from src.observations.normalizer import normalize
from src.observations.schemas import (
    CATEGORY_PRIORITY,
    Observation,
    RawObservation,
    SelectedTemperature,
    SourceCategory,
)
from .staleness import DEFAULT_POLICY, StalenessPolicy


def latest(
    observations: Iterable[Observation],
    category: SourceCategory
) -> Optional[Observation]:
    """
    Return the most recent observation of a category.

    Args:
        observations: Candidate observations
        category: Category to filter on

    Returns:
        Observation with the maximum observed_at, or None if the category is
        empty. On equal timestamps the earliest in sequence order is kept.
    """
    best = None
    for observation in observations:
        if observation.category != category:
            continue
        if best is None or observation.observed_at > best.observed_at:
            best = observation
    return best


def select_current(
    observations: Sequence[Observation],
    now: datetime,
    policy: Optional[StalenessPolicy] = None
) -> Optional[SelectedTemperature]:
    """
    Select the current temperature for one beach.

    Args:
        observations: Normalized observations near the beach
        now: Reference time for staleness checks
        policy: Staleness thresholds (defaults to DEFAULT_POLICY)

    Returns:
        SelectedTemperature, or None if no tier has a fresh observation

    Examples:
        >>> from datetime import timedelta, timezone
        >>> now = datetime(2024, 7, 1, 12, tzinfo=timezone.utc)
        >>> obs = Observation(value=18.2, observed_at=now - timedelta(hours=1),
        ...                   source_tag="sensor-1", category=SourceCategory.SENSOR)
        >>> select_current([obs], now).value
        18.2
        >>> select_current([], now) is None
        True
    """
    policy = policy or DEFAULT_POLICY

    for category in CATEGORY_PRIORITY:
        candidate = latest(observations, category)
        if candidate is None:
            continue

        if not policy.is_stale(category, candidate.observed_at, now):
            return SelectedTemperature.from_observation(candidate)

    return None


def select_current_temperatures(
    raw_by_beach: Mapping[str, Sequence[RawObservation]],
    now: datetime,
    policy: Optional[StalenessPolicy] = None
) -> Dict[str, Optional[SelectedTemperature]]:
    """
    Normalize and select for many beaches at once.

    Args:
        raw_by_beach: Beach id mapped to raw observations fetched near it
        now: Reference time for staleness checks
        policy: Staleness thresholds

    Returns:
        Beach id mapped to its SelectedTemperature, or None meaning the
        stored temperature for that beach must be cleared
    """
    return {
        beach_id: select_current(normalize(raw), now, policy)
        for beach_id, raw in raw_by_beach.items()
    }
