"""Swedish date and time rendering for sync log lines."""

from datetime import datetime, timezone
from typing import Tuple

import pytz

STOCKHOLM = pytz.timezone("Europe/Stockholm")

SWEDISH_MONTHS = [
    "januari", "februari", "mars", "april", "maj", "juni",
    "juli", "augusti", "september", "oktober", "november", "december",
]


def format_swedish_date_and_time(dt: datetime) -> Tuple[str, str]:
    """
    Render a timestamp as Swedish local date and time.

    Args:
        dt: Timestamp (naive values are taken as UTC)

    Returns:
        (date_str, time_str), e.g. ("3 juli 2022", "14.14").
        Timestamps outside the representable local range fall back to
        their ISO date and time.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    try:
        local = dt.astimezone(STOCKHOLM)
    except (OverflowError, ValueError):
        return dt.date().isoformat(), dt.timetz().isoformat()

    date_str = f"{local.day} {SWEDISH_MONTHS[local.month - 1]} {local.year}"
    return date_str, local.strftime("%H.%M")
