"""
Context Broker Entity Schemas

Pydantic models for NGSI-LD entities returned with options=keyValues.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, validator

from src.observations.schemas import Beach, GeoLocation, RawObservation

DEFAULT_CONTEXT_URL = (
    "https://raw.githubusercontent.com/diwise/context-broker/main/"
    "assets/jsonldcontexts/default-context.jsonld"
)


def _as_string_list(v: Any) -> List[str]:
    """Accept a list of strings or a single string; anything else is empty."""
    if isinstance(v, str):
        return [v]
    if isinstance(v, list) and all(isinstance(s, str) for s in v):
        return v
    return []


class BeachEntity(BaseModel):
    """Beach entity from the context broker."""
    id: str
    type: str = "Beach"
    name: str = ""
    source: str = ""
    area_served: Optional[str] = Field(None, alias='areaServed')
    data_provider: Optional[str] = Field(None, alias='dataProvider')
    description: Optional[str] = None
    beach_type: List[str] = Field(default_factory=list, alias='beachType')
    see_also: List[str] = Field(default_factory=list, alias='seeAlso')
    location: GeoLocation = Field(default_factory=GeoLocation)

    @validator('beach_type', 'see_also', pre=True)
    def string_or_list(cls, v):
        return _as_string_list(v)

    @validator('location', pre=True)
    def location_or_empty(cls, v):
        return v if isinstance(v, (dict, GeoLocation)) else {}

    class Config:
        populate_by_name = True

    def to_beach(self) -> Beach:
        return Beach(
            id=self.id,
            name=self.name,
            source=self.source,
            beach_types=self.beach_type,
            see_also=self.see_also,
            location=self.location,
        )


class WaterQualityObservedEntity(BaseModel):
    """WaterQualityObserved entity from the context broker."""
    id: str
    type: str = "WaterQualityObserved"
    date_observed: str = Field("", alias='dateObserved')
    source: str = ""
    temperature: Optional[float] = None
    location: Optional[GeoLocation] = None

    @validator('date_observed', pre=True)
    def unwrap_date(cls, v):
        """dateObserved is either {"@type": "DateTime", "@value": ...} or a plain string"""
        if isinstance(v, dict):
            v = v.get('@value', '')
        return v if isinstance(v, str) else ""

    @validator('source', pre=True)
    def source_or_empty(cls, v):
        return v if isinstance(v, str) else ""

    class Config:
        populate_by_name = True

    def to_raw_observation(self) -> Optional[RawObservation]:
        """Return None for entities that carry no temperature."""
        if self.temperature is None:
            return None

        return RawObservation(
            value=self.temperature,
            observed_at=self.date_observed,
            source=self.source,
        )
