"""Helpers for parsing maintenance dates."""

from datetime import date, datetime, time
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

DateLike = Union[str, date, datetime]


def parse_instant(value: Optional[DateLike]) -> Optional[datetime]:
    """
    Parse a stored date into a naive local datetime.

    Accepts ISO-8601 strings ("2025-06-01" or "2025-06-01T10:00"), dates and
    datetimes. Timezone-aware values are converted to local time. Returns
    None when the value cannot be parsed.
    """
    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime.combine(value, time())
        elif isinstance(value, str) and value.strip():
            parsed = isoparse(value.strip())
        else:
            return None
        if parsed.tzinfo is not None:
            # Offsets at the edges of the calendar overflow on conversion
            parsed = parsed.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError, TypeError):
        return None
    return parsed


def to_date_string(value: DateLike) -> str:
    """Storage form of a date: strings are kept as given, others use ISO format."""
    if isinstance(value, str):
        return value.strip()
    return value.isoformat()


def end_of_day(moment: datetime, days_ahead: int = 0) -> datetime:
    """Last microsecond of the calendar day ``days_ahead`` days after ``moment``."""
    day = moment + relativedelta(days=days_ahead)
    return datetime.combine(day.date(), time.max)
