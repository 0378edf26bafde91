"""
Calendar-day helpers.

Date keys are zero-padded ``YYYY-MM-DD`` local calendar days.  They are
stored and compared as strings elsewhere in the app, but window
membership is always decided here with real date arithmetic.
"""

import re
from datetime import date, datetime, timedelta

from .config import DATE_KEY_FORMAT

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date_key(date_key: str) -> str:
    """
    Check that a date key is a real ``YYYY-MM-DD`` calendar day.

    Raises:
        ValueError: If the format or the date itself is invalid
    """
    if not isinstance(date_key, str) or not _DATE_KEY_RE.match(date_key):
        raise ValueError(f"Invalid date format: {date_key!r}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_key, DATE_KEY_FORMAT)
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_key}") from e
    return date_key


def parse_date_key(date_key: str) -> date:
    """Parse a validated date key into a ``date``."""
    return datetime.strptime(validate_date_key(date_key), DATE_KEY_FORMAT).date()


def to_date_key(day: date | datetime) -> str:
    """Format a date (or the local day of a datetime) as a date key."""
    if isinstance(day, datetime):
        day = day.date()
    return day.strftime(DATE_KEY_FORMAT)


def today_key(now: datetime | None = None) -> str:
    """Return the local calendar day of ``now`` (default: wall clock)."""
    return to_date_key(now or datetime.now())


def window_start(today: date, window_days: int) -> date:
    """First calendar day included in a trailing window ending on ``today``."""
    return today - timedelta(days=window_days)


def in_window(date_key: str, today: date, window_days: int) -> bool:
    """
    True if ``date_key`` falls within ``[today - window_days, today]``.

    Both boundary days are included.  Unparseable keys are never inside
    the window.
    """
    try:
        day = parse_date_key(date_key)
    except ValueError:
        return False
    return window_start(today, window_days) <= day <= today


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later``."""
    return (later - earlier).days


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp or a bare date key.

    A trailing ``Z`` is accepted.  Timezone-aware values are converted to
    local naive time so they compare against local calendar days.
    """
    text = value.strip()
    if _DATE_KEY_RE.match(text):
        return datetime.strptime(text, DATE_KEY_FORMAT)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
