"""
Observation Data Models

Pydantic schemas for water temperature observations and the beaches they
are attributed to.

Design Principles:
- Raw upstream shape (RawObservation) is kept separate from the
  normalized shape (Observation)
- Source provenance is classified once, into a closed enum
- Timestamps are timezone-aware UTC after normalization
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, validator

# Sentinel for missing or unparseable timestamps; older than any real reading
UNKNOWN_OBSERVED_AT = datetime.min.replace(tzinfo=timezone.utc)

GOTEBORG_WEB_PREFIX = "https://goteborg.se/"


class SourceCategory(str, Enum):
    """
    Trust tier of an observation source.

    Ordered from most to least trusted.
    """
    SENSOR = "sensor"
    SATELLITE_MODEL = "satellite_model"
    MANUAL_SAMPLE = "manual_sample"


# Selection order, most trusted first
CATEGORY_PRIORITY = (
    SourceCategory.SENSOR,
    SourceCategory.SATELLITE_MODEL,
    SourceCategory.MANUAL_SAMPLE,
)


class RawObservation(BaseModel):
    """Temperature reading as handed over by the fetch layer."""
    value: float = Field(..., description="Water temperature (°C)")
    observed_at: str = Field("", description="ISO-8601 date-time with offset")
    source: str = Field("", description="Free-text provenance (URL or name)")


class Observation(BaseModel):
    """Normalized temperature reading with its source category."""

    value: float = Field(..., description="Water temperature (°C)")
    observed_at: datetime = Field(..., description="Observation time (UTC, timezone-aware)")
    source_tag: str = Field("", description="Upstream provenance identifier")
    category: SourceCategory

    @validator('observed_at')
    def observed_at_must_be_utc(cls, v):
        """Ensure observed_at is timezone-aware"""
        if v.tzinfo is None:
            raise ValueError("observed_at must be timezone-aware (UTC)")
        return v

    class Config:
        frozen = True


class SelectedTemperature(BaseModel):
    """The observation chosen as a beach's current temperature."""

    value: float
    observed_at: datetime
    source_tag: str
    category: SourceCategory

    @classmethod
    def from_observation(cls, observation: Observation) -> 'SelectedTemperature':
        return cls(
            value=observation.value,
            observed_at=observation.observed_at,
            source_tag=observation.source_tag,
            category=observation.category,
        )

    class Config:
        frozen = True


class GeoLocation(BaseModel):
    """GeoJSON geometry as delivered by the context broker."""
    type: str = "Point"
    coordinates: Any = None

    def as_point(self) -> Optional[Tuple[float, float]]:
        """
        Return the first (longitude, latitude) pair of the geometry.

        Works for Point, Polygon and MultiPolygon coordinate nesting.
        Returns None if the geometry carries no coordinates.
        """
        coords = self.coordinates
        while isinstance(coords, list) and coords and isinstance(coords[0], list):
            coords = coords[0]

        if not isinstance(coords, list) or len(coords) < 2:
            return None

        return float(coords[0]), float(coords[1])


class Beach(BaseModel):
    """
    A bathing site and the raw observations fetched near it.

    Attributes:
        id: Context broker entity id
        source: Service guide id, the stable key in the map database
        observations_fetched: False if the nearby-observation lookup failed
    """
    id: str
    name: str = ""
    source: str = ""
    beach_types: List[str] = Field(default_factory=list)
    see_also: List[str] = Field(default_factory=list)
    location: GeoLocation = Field(default_factory=GeoLocation)
    raw_observations: List[RawObservation] = Field(default_factory=list)
    observations_fetched: bool = True

    @property
    def service_types(self) -> str:
        return ", ".join(self.beach_types)

    @property
    def web_page(self) -> str:
        for url in self.see_also:
            if url.startswith(GOTEBORG_WEB_PREFIX):
                return url
        return ""
