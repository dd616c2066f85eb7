"""Shared fixtures for beach temperature sync tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path so tests can import the src package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.observations.schemas import Observation, SourceCategory  # noqa: E402

SMHI = "https://www.smhi.se/"
HAVOCHVATTEN = "https://badplatsen.havochvatten.se/badplatsen/api"
SENSOR = "https://iot.goteborg.se/sensor/1"


@pytest.fixture
def now():
    """Fixed reference time"""
    return datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_observation(now):
    """Factory for observations aged relative to `now`"""
    def _make(value, hours_ago, category=SourceCategory.SENSOR, source_tag=None):
        if source_tag is None:
            source_tag = {
                SourceCategory.SENSOR: SENSOR,
                SourceCategory.SATELLITE_MODEL: SMHI,
                SourceCategory.MANUAL_SAMPLE: HAVOCHVATTEN,
            }[category]
        return Observation(
            value=value,
            observed_at=now - timedelta(hours=hours_ago),
            source_tag=source_tag,
            category=category,
        )
    return _make
