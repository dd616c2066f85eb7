"""
Beach Temperature Sync

Orchestrates one synchronization run:
fetch beaches + nearby observations -> normalize -> select -> persist.

Design Principles:
- One beach failing never aborts the run; failures are collected
- A beach whose observation lookup failed keeps its stored temperature
- No usable observation clears the stored temperature
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from src.contextbroker.client import ContextBrokerClient
from src.observations.normalizer import normalize
from src.observations.schemas import Beach, SelectedTemperature, SourceCategory
from src.selection.selector import select_current
from src.selection.staleness import DEFAULT_POLICY, StalenessPolicy
from .formatting import format_swedish_date_and_time
from .repository import BeachRepository

logger = logging.getLogger(__name__)

# Stored as temperatureSource for sensor readings that carry no source tag
DEFAULT_SENSOR_SOURCE = "Göteborgs Stad"


class SyncReport(BaseModel):
    """Result of a synchronization run."""

    total_beaches: int = 0
    updated: int = 0
    cleared: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def has_errors(self) -> bool:
        """Check if any errors occurred."""
        return len(self.errors) > 0

    @property
    def success_rate(self) -> float:
        """Share of beaches written without error, as a percentage."""
        if self.total_beaches == 0:
            return 0.0
        return ((self.updated + self.cleared) / self.total_beaches) * 100


def temperature_source(selected: SelectedTemperature) -> str:
    if selected.category == SourceCategory.SENSOR and not selected.source_tag:
        return DEFAULT_SENSOR_SOURCE
    return selected.source_tag


class BeachSync:
    """Synchronizes current beach temperatures into the map database."""

    def __init__(
        self,
        client: ContextBrokerClient,
        repository: BeachRepository,
        policy: Optional[StalenessPolicy] = None,
        beach_limit: int = ContextBrokerClient.BEACH_LIMIT
    ):
        """
        Initialize sync.

        Args:
            client: Context broker client
            repository: Destination table
            policy: Staleness thresholds (defaults to DEFAULT_POLICY)
            beach_limit: Maximum number of beaches to fetch
        """
        self.client = client
        self.repository = repository
        self.policy = policy or DEFAULT_POLICY
        self.beach_limit = beach_limit

    def sync_beach(self, beach: Beach, now: datetime) -> Optional[SelectedTemperature]:
        """
        Select and persist the current temperature for one beach.

        Returns:
            The stored temperature, or None if it was cleared
        """
        log_prefix = f"[{beach.source}] {beach.name}"

        observations = normalize(beach.raw_observations)
        selected = select_current(observations, now, self.policy)

        if selected is None:
            self.repository.save(beach, None)
            logger.debug(f"{log_prefix}: cleared temperature, no valid observation among {len(observations)}")
            return None

        self.repository.save(beach, selected, source=temperature_source(selected))

        date_str, time_str = format_swedish_date_and_time(selected.observed_at)
        logger.debug(
            f"{log_prefix}: temperature updated to {selected.value}°C "
            f"({selected.category.value}, {date_str} kl {time_str})"
        )
        return selected

    def run(self, now: Optional[datetime] = None) -> SyncReport:
        """
        Run one synchronization.

        Args:
            now: Reference time for staleness checks (defaults to current UTC time)

        Returns:
            SyncReport with counts and per-beach errors
        """
        start_time = time.time()
        now = now or datetime.now(timezone.utc)

        logger.info("=" * 60)
        logger.info(f"Starting beach temperature sync at {now.isoformat()}")
        logger.info("=" * 60)

        self.repository.create_table_if_not_exists()
        beaches = self.client.get_beaches_with_observations(limit=self.beach_limit)

        report = SyncReport(total_beaches=len(beaches))

        for beach in beaches:
            if not beach.observations_fetched:
                report.skipped += 1
                report.errors.append(f"{beach.source}: observations could not be fetched")
                continue

            try:
                selected = self.sync_beach(beach, now)
            except SQLAlchemyError as e:
                logger.error(f"Failed to store beach {beach.name} ({beach.source}): {e}")
                report.errors.append(f"{beach.source}: {e}")
                continue
            except Exception as e:
                logger.error(f"Unexpected error for beach {beach.name} ({beach.source}): {e}")
                report.errors.append(f"{beach.source}: {e}")
                continue

            if selected is None:
                report.cleared += 1
            else:
                report.updated += 1

        report.duration_seconds = time.time() - start_time

        logger.info(
            f"Sync complete: {report.updated} updated, {report.cleared} cleared, "
            f"{report.skipped} skipped of {report.total_beaches} beaches "
            f"in {report.duration_seconds:.1f}s"
        )
        if report.has_errors:
            logger.warning(f"{len(report.errors)} beaches had errors")

        return report
