"""
Beach Temperature Sync CLI

Fetches beaches and water temperatures from the context broker and writes
the current temperature of each beach to geodata_cip.beaches.

Usage:
    python -m src.sync.cli [--distance METERS] [--limit N] [--log-level LEVEL]

Options:
    --distance METERS    Max distance between beach and measurement (default: MAX_DISTANCE or 500)
    --limit N            Max number of beaches to fetch (default: 50)
    --log-level LEVEL    Logging level (default: INFO)

Exit codes:
    0  all beaches synchronized
    1  one or more beaches failed
    2  invalid configuration
"""

import argparse
import logging
import sys
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from src.common.config import load_settings
from src.contextbroker.client import ContextBrokerClient, ContextBrokerError
from src.selection.staleness import load_policy
from .coordinator import BeachSync
from .repository import BeachRepository

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Synchronize beach water temperatures into the map database"
    )
    parser.add_argument(
        '--distance',
        type=int,
        default=None,
        help='Max distance in meters between beach and temperature measurement (default: 500)'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=ContextBrokerClient.BEACH_LIMIT,
        help='Max number of beaches to fetch (default: %(default)s)'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: %(default)s)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings(max_distance=args.distance)
        policy = load_policy(settings.staleness_config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    engine = create_engine(settings.database_url)
    client = ContextBrokerClient(settings.context_broker_url, max_distance=settings.max_distance)
    sync = BeachSync(client, BeachRepository(engine), policy=policy, beach_limit=args.limit)

    try:
        report = sync.run()
    except ContextBrokerError as e:
        logger.error(f"Could not fetch beaches: {e}")
        return 1
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        return 1
    finally:
        engine.dispose()

    logger.info("done")
    return 1 if report.has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
