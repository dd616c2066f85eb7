"""
Beach Map Repository

Persists beaches and their selected temperatures to the PostGIS table
read by the map UI (geodata_cip.beaches).

Each beach is written in its own transaction: insert-if-missing guarded by
the unique serviceGuideId index, then update or clear the temperature.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Engine, text

from src.observations.schemas import Beach, SelectedTemperature

logger = logging.getLogger(__name__)

CREATE_BEACHES_TABLE = """
    CREATE SCHEMA IF NOT EXISTS geodata_cip;

    CREATE TABLE IF NOT EXISTS geodata_cip.beaches
    (
        "id" SERIAL,
        "serviceGuideId" text COLLATE pg_catalog."default",
        "name" text COLLATE pg_catalog."default",
        "serviceTypes" text COLLATE pg_catalog."default",
        "webPage" text COLLATE pg_catalog."default",
        "visitingAddress" text COLLATE pg_catalog."default",
        "temperature" numeric,
        "timestampObservered" timestamp,
        "temperatureSource" text COLLATE pg_catalog."default",
        "geom" geometry(Geometry,3007),
        CONSTRAINT beaches_pkey PRIMARY KEY ("id")
    );

    CREATE UNIQUE INDEX IF NOT EXISTS beaches_sgid_idx ON geodata_cip.beaches ("serviceGuideId");
"""

INSERT_BEACH = text("""
    INSERT INTO geodata_cip.beaches ("serviceGuideId", "name", "serviceTypes", "webPage", "geom")
    VALUES (
        :service_guide_id, :name, :service_types, :web_page,
        ST_Transform(ST_SetSRID(ST_MakePoint(:longitude, :latitude), 4326), 3007)
    )
    ON CONFLICT ("serviceGuideId") DO NOTHING
""")

UPDATE_TEMPERATURE = text("""
    UPDATE geodata_cip.beaches
    SET
        "temperature" = :temperature,
        "timestampObservered" = :observed_at,
        "temperatureSource" = :temperature_source,
        "name" = :name,
        "serviceTypes" = :service_types,
        "webPage" = :web_page
    WHERE "serviceGuideId" = :service_guide_id
""")

CLEAR_TEMPERATURE = text("""
    UPDATE geodata_cip.beaches
    SET
        "temperature" = NULL,
        "timestampObservered" = NULL,
        "temperatureSource" = NULL
    WHERE "serviceGuideId" = :service_guide_id
""")


def stored_observed_at(observed_at: datetime) -> datetime:
    """
    Value written to "timestampObservered", a timestamp column without zone.

    Stored as naive UTC. Earlier deployments passed the offset string and
    Postgres kept the local wall time, so +02:00 readings now show two hours
    earlier in the map UI. Awaiting product-owner confirmation.
    """
    return observed_at.astimezone(timezone.utc).replace(tzinfo=None)


class BeachRepository:
    """Reads and writes rows of geodata_cip.beaches."""

    def __init__(self, engine: Engine):
        """
        Args:
            engine: SQLAlchemy engine for the PostGIS database
        """
        self.engine = engine

    def create_table_if_not_exists(self):
        with self.engine.begin() as conn:
            conn.execute(text(CREATE_BEACHES_TABLE))
        logger.debug("Ensured geodata_cip.beaches exists")

    def save(self, beach: Beach, selected: Optional[SelectedTemperature], source: str = ""):
        """
        Insert the beach if new, then store or clear its temperature.

        Args:
            beach: Beach to persist
            selected: Current temperature, or None to clear stored values
            source: Temperature source to store (defaults to selected.source_tag)

        Raises:
            sqlalchemy.exc.SQLAlchemyError: On any database failure; the
                beach's transaction is rolled back
        """
        point = beach.location.as_point()
        longitude, latitude = point if point is not None else (None, None)

        with self.engine.begin() as conn:
            result = conn.execute(INSERT_BEACH, {
                'service_guide_id': beach.source,
                'name': beach.name,
                'service_types': beach.service_types,
                'web_page': beach.web_page,
                'longitude': longitude,
                'latitude': latitude,
            })
            if result.rowcount:
                logger.debug(f"New beach inserted: {beach.name}")

            if selected is None:
                conn.execute(CLEAR_TEMPERATURE, {'service_guide_id': beach.source})
                return

            conn.execute(UPDATE_TEMPERATURE, {
                'temperature': selected.value,
                'observed_at': stored_observed_at(selected.observed_at),
                'temperature_source': source or selected.source_tag,
                'name': beach.name,
                'service_types': beach.service_types,
                'web_page': beach.web_page,
                'service_guide_id': beach.source,
            })
