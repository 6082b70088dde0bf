"""Conversions between absolute instants and the operator's civil calendar.

The search endpoint is date-granular and expects the departure date as the
operator sees it (Europe/Berlin for FlixBus), whatever the caller's or the
server's clock zone is. Event timestamps come back as seconds since epoch.
"""

from datetime import UTC, datetime, time, timedelta
from functools import lru_cache
from zoneinfo import ZoneInfo

SEARCH_DATE_FORMAT = "%d.%m.%Y"


@lru_cache(maxsize=32)
def operator_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def to_utc(instant: datetime) -> datetime:
    """Return the instant as an aware UTC datetime. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def encode_search_date(instant: datetime, operator_timezone: str) -> str:
    """Format the operator-local calendar date of an instant as dd.mm.yyyy.

    Example: 2025-03-09T23:30Z in Europe/Berlin -> "10.03.2025"
    """
    local = to_utc(instant).astimezone(operator_zone(operator_timezone))
    return local.strftime(SEARCH_DATE_FORMAT)


def decode_event_timestamp(seconds: int) -> datetime:
    """Convert upstream epoch seconds into an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, UTC)


def start_of_civil_day(instant: datetime, operator_timezone: str) -> datetime:
    """Return operator-local midnight of the instant's civil day, in UTC."""
    zone = operator_zone(operator_timezone)
    local_date = to_utc(instant).astimezone(zone).date()
    return datetime.combine(local_date, time.min, tzinfo=zone).astimezone(UTC)


def one_second_after(instant: datetime) -> datetime:
    """Smallest anchor strictly after an epoch-second granular instant."""
    return instant + timedelta(seconds=1)
