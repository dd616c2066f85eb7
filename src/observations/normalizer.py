"""
Observation Normalizer

Maps raw upstream readings into the canonical Observation shape.

Design Principles:
- Pure and total: one Observation per raw record, never raises
- Unparseable timestamps become UNKNOWN_OBSERVED_AT instead of being dropped
- Source category is decided here once; downstream code only sees the enum
"""

import re
from datetime import datetime, timezone
from typing import Iterable, List

from .schemas import (
    Observation,
    RawObservation,
    SourceCategory,
    UNKNOWN_OBSERVED_AT,
)

# Substring markers, matched against the lower-cased source tag
SATELLITE_MODEL_MARKERS = ("smhi",)
MANUAL_SAMPLE_MARKERS = ("havochvatten",)

# Fractional seconds of any length, as RFC 3339 allows
FRACTION_PATTERN = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def classify_source(source_tag: str) -> SourceCategory:
    """
    Classify an observation source into its trust tier.

    Satellite/model markers are checked before manual-sampling markers;
    anything unrecognized is a sensor.

    Examples:
        >>> classify_source("https://www.smhi.se/")
        <SourceCategory.SATELLITE_MODEL: 'satellite_model'>
        >>> classify_source("https://badplatsen.havochvatten.se/badplatsen/api")
        <SourceCategory.MANUAL_SAMPLE: 'manual_sample'>
        >>> classify_source("")
        <SourceCategory.SENSOR: 'sensor'>
    """
    tag = (source_tag or "").lower()

    if any(marker in tag for marker in SATELLITE_MODEL_MARKERS):
        return SourceCategory.SATELLITE_MODEL

    if any(marker in tag for marker in MANUAL_SAMPLE_MARKERS):
        return SourceCategory.MANUAL_SAMPLE

    return SourceCategory.SENSOR


def _pad_fraction(match) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_observed_at(value: str) -> datetime:
    """
    Parse an RFC 3339 date-time with offset into an aware UTC datetime.

    Returns UNKNOWN_OBSERVED_AT for empty, malformed or offset-less input.
    """
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_OBSERVED_AT

    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    text = FRACTION_PATTERN.sub(_pad_fraction, text, count=1)

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return UNKNOWN_OBSERVED_AT

    if dt.tzinfo is None:
        return UNKNOWN_OBSERVED_AT

    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        return UNKNOWN_OBSERVED_AT


def normalize_one(raw: RawObservation) -> Observation:
    return Observation(
        value=raw.value,
        observed_at=parse_observed_at(raw.observed_at),
        source_tag=raw.source,
        category=classify_source(raw.source),
    )


def normalize(raw_records: Iterable[RawObservation]) -> List[Observation]:
    """
    Normalize raw records, preserving input order.

    Args:
        raw_records: Readings as delivered by the fetch layer

    Returns:
        One Observation per input record
    """
    return [normalize_one(raw) for raw in raw_records]
