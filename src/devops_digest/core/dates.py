"""Date helpers shared by the pipeline stages."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from dateutil import parser as date_parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def try_parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a feed or ISO timestamp into an aware UTC datetime, or None."""
    if isinstance(value, datetime):
        return _to_utc(value)
    if not value or not isinstance(value, str):
        return None
    try:
        return _to_utc(date_parser.parse(value.strip()))
    except (ValueError, OverflowError):
        return None


def parse_timestamp(value: Union[str, datetime, None], now: Optional[datetime] = None) -> datetime:
    """Parse a timestamp, substituting the current time when unparsable."""
    parsed = try_parse_timestamp(value)
    if parsed is None:
        return _to_utc(now) if now else utc_now()
    return parsed


def to_iso(value: datetime) -> str:
    return _to_utc(value).isoformat(timespec="seconds")


def is_within_last_days(value: Union[str, datetime], days: int = 7, now: Optional[datetime] = None) -> bool:
    """True when value is strictly after ``now - days``."""
    reference = _to_utc(now) if now else utc_now()
    parsed = try_parse_timestamp(value)
    if parsed is None:
        return False
    return parsed > reference - timedelta(days=days)


def digest_week(day: Optional[date] = None) -> int:
    """ISO week number used to address a digest."""
    return (day or utc_now().date()).isocalendar()[1]


def digest_year(day: Optional[date] = None) -> int:
    """ISO year matching ``digest_week``."""
    return (day or utc_now().date()).isocalendar()[0]


def format_iso_date(day: Optional[date] = None) -> str:
    return (day or utc_now().date()).strftime("%Y-%m-%d")


def format_display_date(value: Union[str, datetime]) -> str:
    """Format a timestamp for display, e.g. ``Nov 16, 2025``."""
    parsed = parse_timestamp(value)
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
