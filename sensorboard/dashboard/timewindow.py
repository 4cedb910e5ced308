"""
Local-time <-> UTC conversion at the query boundary.

The stores keep UTC; users type and read local wall-clock time in the
configured timezone.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

# Accepted user input formats, tried in order
INPUT_FORMATS = (
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
)
DISPLAY_FORMAT = "%d.%m.%Y %H:%M"


class InvalidPeriod(ValueError):
    """User-supplied date/time could not be interpreted."""


def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def parse_local_datetime(value: Union[str, int, float, datetime], tz: ZoneInfo) -> datetime:
    """
    Parse a user-entered local date/time into naive UTC.

    Accepts 'd.m.Y H:i' (the form format), a few ISO-ish variants,
    ISO 8601 with offset, and epoch seconds.
    """
    if isinstance(value, datetime):
        local = value if value.tzinfo else value.replace(tzinfo=tz)
        return local.astimezone(timezone.utc).replace(tzinfo=None, microsecond=0)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None, microsecond=0)

    text = str(value).strip()
    if not text:
        raise InvalidPeriod("empty date")
    if text.isdigit():
        return parse_local_datetime(int(text), tz)

    for fmt in INPUT_FORMATS:
        try:
            return parse_local_datetime(datetime.strptime(text, fmt), tz)
        except ValueError:
            continue
    try:
        return parse_local_datetime(datetime.fromisoformat(text), tz)
    except ValueError:
        raise InvalidPeriod(f"unrecognized date: {text!r}") from None


def utc_to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Naive UTC -> aware local."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def format_local(value: Optional[datetime], tz: ZoneInfo, fmt: str = DISPLAY_FORMAT) -> str:
    if value is None:
        return ""
    return utc_to_local(value, tz).strftime(fmt)


def parse_period(date_from, date_to, tz: ZoneInfo) -> Tuple[datetime, datetime]:
    """Both bounds as naive UTC; raises InvalidPeriod on bad input or reversed bounds."""
    start = parse_local_datetime(date_from, tz)
    end = parse_local_datetime(date_to, tz)
    if end <= start:
        raise InvalidPeriod("end of period must be after its start")
    return start, end


def default_window(days: int = 1, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Naive UTC [start, end) for the last `days` days.

    end is the start of the second after `now`, so entries written during
    the current second are inside the window.
    """
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    end = now.replace(microsecond=0) + timedelta(seconds=1)
    return end - timedelta(days=days), end


def default_period(tz: ZoneInfo, days: int = 1, now: Optional[datetime] = None) -> Tuple[str, str]:
    """
    (from, to) display strings for the last `days` days ending now.

    The end is rounded up to the next whole minute so that submitting the
    strings unchanged still covers the current minute.
    """
    end = now or datetime.now(timezone.utc).replace(tzinfo=None)
    if end.second or end.microsecond:
        end = end.replace(second=0, microsecond=0) + timedelta(minutes=1)
    start = end - timedelta(days=days)
    return format_local(start, tz), format_local(end, tz)
