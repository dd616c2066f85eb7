"""
Unit tests for the Staleness Policy

Tests verify:
1. Default per-category thresholds
2. Strict boundary (age == threshold is fresh)
3. Monotonicity in age
4. YAML configuration loading
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.observations.schemas import SourceCategory, UNKNOWN_OBSERVED_AT
from src.selection.staleness import (
    DEFAULT_MAX_AGE_HOURS,
    StalenessPolicy,
    is_stale,
    load_policy,
)


class TestDefaultThresholds:
    """Test built-in thresholds."""

    def test_values(self):
        assert DEFAULT_MAX_AGE_HOURS[SourceCategory.SENSOR] == 4
        assert DEFAULT_MAX_AGE_HOURS[SourceCategory.SATELLITE_MODEL] == 12
        assert DEFAULT_MAX_AGE_HOURS[SourceCategory.MANUAL_SAMPLE] == 24

    @pytest.mark.parametrize("category,hours", [
        (SourceCategory.SENSOR, 4),
        (SourceCategory.SATELLITE_MODEL, 12),
        (SourceCategory.MANUAL_SAMPLE, 24),
    ])
    def test_boundary_is_not_stale(self, now, category, hours):
        """Exactly at the threshold is still fresh."""
        assert is_stale(category, now - timedelta(hours=hours), now) is False

    @pytest.mark.parametrize("category,hours", [
        (SourceCategory.SENSOR, 4),
        (SourceCategory.SATELLITE_MODEL, 12),
        (SourceCategory.MANUAL_SAMPLE, 24),
    ])
    def test_just_past_boundary_is_stale(self, now, category, hours):
        observed_at = now - timedelta(hours=hours, seconds=1)
        assert is_stale(category, observed_at, now) is True

    def test_sensor_five_hours_stale(self, now):
        assert is_stale(SourceCategory.SENSOR, now - timedelta(hours=5), now)

    def test_satellite_ten_hours_fresh(self, now):
        assert not is_stale(SourceCategory.SATELLITE_MODEL, now - timedelta(hours=10), now)


class TestStalenessEdgeCases:
    """Test degenerate inputs."""

    def test_unknown_timestamp_always_stale(self, now):
        policy = StalenessPolicy({SourceCategory.SENSOR: 10 ** 9})
        assert policy.is_stale(SourceCategory.SENSOR, UNKNOWN_OBSERVED_AT, now)

    def test_future_observation_is_fresh(self, now):
        assert not is_stale(SourceCategory.SENSOR, now + timedelta(hours=1), now)

    def test_naive_now_treated_as_utc(self, now):
        naive_now = now.replace(tzinfo=None)
        assert not is_stale(SourceCategory.SENSOR, now - timedelta(hours=1), naive_now)
        assert is_stale(SourceCategory.SENSOR, now - timedelta(hours=5), naive_now)

    def test_other_offset_compared_in_absolute_time(self, now):
        cest = timezone(timedelta(hours=2))
        observed_at = (now - timedelta(hours=3)).astimezone(cest)
        assert not is_stale(SourceCategory.SENSOR, observed_at, now)

    def test_monotonic_in_age(self, now):
        """If a newer observation is stale, every older one is too."""
        for category in SourceCategory:
            ages = [0, 1, 3.99, 4, 4.01, 11, 12, 12.5, 23, 24, 25, 100]
            results = [
                is_stale(category, now - timedelta(hours=h), now) for h in ages
            ]
            first_stale = results.index(True) if True in results else len(results)
            assert all(results[first_stale:])


class TestStalenessPolicyConfig:
    """Test custom thresholds and YAML loading."""

    def test_override_manual_sample_to_12h(self, now):
        policy = StalenessPolicy({SourceCategory.MANUAL_SAMPLE: 12})

        assert policy.threshold(SourceCategory.MANUAL_SAMPLE) == timedelta(hours=12)
        assert policy.threshold(SourceCategory.SENSOR) == timedelta(hours=4)
        assert policy.is_stale(SourceCategory.MANUAL_SAMPLE, now - timedelta(hours=13), now)

    def test_string_keys_accepted(self):
        policy = StalenessPolicy({"satellite_model": 6})
        assert policy.threshold(SourceCategory.SATELLITE_MODEL) == timedelta(hours=6)

    @pytest.mark.parametrize("value", [0, -1, None])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValueError):
            StalenessPolicy({SourceCategory.SENSOR: value})

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), 1e12, "four", [4]])
    def test_non_finite_or_unusable_rejected(self, value):
        with pytest.raises(ValueError, match="sensor"):
            StalenessPolicy({SourceCategory.SENSOR: value})

    def test_from_yaml_infinite_threshold_rejected(self, tmp_path):
        config_path = tmp_path / "staleness.yaml"
        config_path.write_text("max_age_hours:\n  sensor: .inf\n")

        with pytest.raises(ValueError):
            StalenessPolicy.from_yaml(config_path)

    def test_from_yaml(self, tmp_path):
        config_path = tmp_path / "staleness.yaml"
        config_path.write_text("max_age_hours:\n  manual_sample: 12\n  sensor: 2\n")

        policy = StalenessPolicy.from_yaml(config_path)

        assert policy.threshold(SourceCategory.SENSOR) == timedelta(hours=2)
        assert policy.threshold(SourceCategory.SATELLITE_MODEL) == timedelta(hours=12)
        assert policy.threshold(SourceCategory.MANUAL_SAMPLE) == timedelta(hours=12)

    def test_from_yaml_unknown_category(self, tmp_path):
        config_path = tmp_path / "staleness.yaml"
        config_path.write_text("max_age_hours:\n  drone: 3\n")

        with pytest.raises(ValueError):
            StalenessPolicy.from_yaml(config_path)

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StalenessPolicy.from_yaml(tmp_path / "missing.yaml")

    def test_load_policy_uses_bundled_config(self):
        policy = load_policy()
        assert policy.threshold(SourceCategory.MANUAL_SAMPLE) == timedelta(hours=24)
