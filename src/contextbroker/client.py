"""
NGSI-LD Context Broker Client

Fetches beaches and nearby water quality observations from a context broker.

API Documentation: https://www.etsi.org/deliver/etsi_gs/CIM/001_099/009/
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.observations.schemas import Beach, RawObservation
from .schemas import (
    DEFAULT_CONTEXT_URL,
    BeachEntity,
    WaterQualityObservedEntity,
)

logger = logging.getLogger(__name__)


class ContextBrokerError(RuntimeError):
    """Raised when the context broker cannot be queried."""


class ContextBrokerClient:
    """
    Client for querying entities from an NGSI-LD context broker.

    All queries use options=keyValues, so entity attributes arrive as
    plain values rather than NGSI-LD property objects.
    """

    ENTITIES_PATH = "ngsi-ld/v1/entities"
    TIMEOUT = 30  # seconds
    BEACH_LIMIT = 50
    OBSERVATION_LIMIT = 1000

    def __init__(
        self,
        base_url: str,
        max_distance: int = 500,
        timeout: int = TIMEOUT,
        max_retries: int = 3,
        context_url: str = DEFAULT_CONTEXT_URL,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize context broker client.

        Args:
            base_url: Context broker root URL (e.g. http://localhost:8082)
            max_distance: Search radius around a beach, in meters
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            context_url: JSON-LD context sent in the Link header
            session: Pre-configured session (created if not provided)
        """
        self.base_url = base_url.rstrip('/')
        self.max_distance = max_distance
        self.timeout = timeout
        self.context_url = context_url
        self.session = session or self._create_session(max_retries)
        logger.info(f"Context broker client initialized for {self.base_url}")

    def _create_session(self, max_retries: int) -> requests.Session:
        """Create requests session with retry logic."""
        session = requests.Session()

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/ld+json",
            "Link": (
                f'<{self.context_url}>; rel="http://www.w3.org/ns/json-ld#context"; '
                'type="application/ld+json"'
            ),
        }

    def query_entities(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Query the entities endpoint.

        Args:
            params: NGSI-LD query parameters (type, georel, limit, ...)

        Returns:
            List of entity dictionaries

        Raises:
            ContextBrokerError: On transport errors, non-200 responses or
                a body that is not a JSON list
        """
        url = f"{self.base_url}/{self.ENTITIES_PATH}"
        params = {**params, 'options': 'keyValues'}

        logger.debug(f"Querying {url} with {params}")

        try:
            response = self.session.get(
                url,
                params=params,
                headers=self.headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ContextBrokerError(f"failed to retrieve data from context broker: {e}") from e

        if response.status_code != 200:
            raise ContextBrokerError(
                f"expected status code 200, but got {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ContextBrokerError(f"failed to decode response body: {e}") from e

        if not isinstance(data, list):
            raise ContextBrokerError(f"expected a list of entities, got {type(data).__name__}")

        return data

    def get_beaches(self, limit: int = BEACH_LIMIT) -> List[Beach]:
        """
        Fetch all Beach entities.

        Entities that fail validation are skipped with a warning.
        """
        entities = self.query_entities({'type': 'Beach', 'limit': limit})

        beaches = []
        for entity in entities:
            try:
                beaches.append(BeachEntity.model_validate(entity).to_beach())
            except ValidationError as e:
                logger.warning(f"Skipping invalid beach entity: {e}")

        logger.info(f"Fetched {len(beaches)} beaches")
        return beaches

    def get_water_quality_observed(
        self,
        latitude: float,
        longitude: float,
        limit: int = OBSERVATION_LIMIT
    ) -> List[RawObservation]:
        """
        Fetch water quality observations near a point.

        Args:
            latitude: Point latitude
            longitude: Point longitude
            limit: Maximum number of entities

        Returns:
            Raw temperature observations (entities without temperature are dropped)
        """
        params = {
            'type': 'WaterQualityObserved',
            'geoproperty': 'location',
            'georel': f"near;maxDistance=={self.max_distance}",
            'geometry': 'Point',
            'coordinates': f"[{longitude},{latitude}]",
            'limit': limit,
        }

        observations = []
        for entity in self.query_entities(params):
            try:
                raw = WaterQualityObservedEntity.model_validate(entity).to_raw_observation()
            except ValidationError as e:
                logger.debug(f"Skipping invalid observation entity: {e}")
                continue

            if raw is not None:
                observations.append(raw)

        return observations

    def get_beaches_with_observations(self, limit: int = BEACH_LIMIT) -> List[Beach]:
        """
        Fetch beaches and attach the observations found near each one.

        A failed lookup for one beach does not abort the others; that beach
        is returned with observations_fetched=False.
        """
        beaches = self.get_beaches(limit=limit)

        for beach in beaches:
            point = beach.location.as_point()
            if point is None:
                logger.warning(f"Beach {beach.name} ({beach.id}) has no location")
                beach.observations_fetched = False
                continue

            lon, lat = point
            try:
                beach.raw_observations = self.get_water_quality_observed(lat, lon)
            except ContextBrokerError as e:
                logger.error(f"Failed to fetch observations near beach {beach.name}: {e}")
                beach.observations_fetched = False
                continue

            logger.debug(f"Found {len(beach.raw_observations)} observations near beach {beach.name}")

        return beaches
