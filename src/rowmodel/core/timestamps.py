"""Fixed timestamp serialization for created/updated stamps.

Both stamps use RFC 3339 on a UTC-aware datetime, e.g.
"2026-01-02T03:04:05+00:00".
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

type Timespec = Literal["seconds", "milliseconds", "microseconds"]

DEFAULT_TIMESPEC: Timespec = "seconds"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def format_timestamp(moment: datetime, timespec: Timespec = DEFAULT_TIMESPEC) -> str:
    """Serialize a datetime in the stamp format.

    Args:
        moment: Datetime to format. Naive values are taken as UTC.
        timespec: Precision of the time component.

    Returns:
        RFC 3339 string with an explicit UTC offset.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec=timespec)
