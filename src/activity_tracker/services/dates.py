"""Calendar helpers working on local calendar fields."""

import re
from datetime import date, datetime, time, timedelta, tzinfo

from activity_tracker.domain.stats import WeekWindow

_END_OF_DAY = time(23, 59, 59, 999000)
_MAX_HOUR = 23
_MAX_MINUTE = 59
_DEFAULT_MEAL_TIME = "12:00"


def date_key(value: date | datetime, tz: tzinfo | None = None) -> str:
    """Format a date as ``YYYY-MM-DD`` using local calendar fields.

    Aware datetimes are converted into ``tz`` first when it is given; naive
    datetimes and plain dates are taken as already local.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key back into a date."""
    return date.fromisoformat(key)


def monday_of(value: date | datetime) -> datetime:
    """Return local midnight of the Monday on or before the value."""
    tz = value.tzinfo if isinstance(value, datetime) else None
    day = value.date() if isinstance(value, datetime) else value
    monday = day - timedelta(days=day.weekday())
    return datetime.combine(monday, time.min, tzinfo=tz)


def sunday_of(value: date | datetime) -> datetime:
    """Return the last instant of the Sunday ending the value's week."""
    monday = monday_of(value)
    sunday = monday.date() + timedelta(days=6)
    return datetime.combine(sunday, _END_OF_DAY, tzinfo=monday.tzinfo)


def week_window(value: date | datetime) -> WeekWindow:
    """Return the Monday-to-Sunday window containing the value."""
    return WeekWindow(start=monday_of(value), end=sunday_of(value))


def week_days(value: date | datetime | WeekWindow) -> list[date]:
    """Return the seven dates of the week."""
    start = value.start if isinstance(value, WeekWindow) else monday_of(value)
    return [start.date() + timedelta(days=offset) for offset in range(7)]


def iso_week_number(value: date | datetime) -> int:
    """Return the ISO-8601 week number of the value's local date."""
    day = value.date() if isinstance(value, datetime) else value
    return day.isocalendar().week


def local_today(tz: tzinfo) -> date:
    """Return today's date in the given timezone."""
    return datetime.now(tz=tz).date()


def week_range_label(window: WeekWindow) -> str:
    """Return a short label such as ``Oct 12 - Oct 18, 2026``."""
    start, end = window.start, window.end
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def normalize_time_of_day(text: str | None) -> str:
    """Best-effort parse of free-form time input into 24-hour ``HH:MM``."""
    if not text:
        return "00:00"
    sanitized = re.sub(r"[^0-9:]", "", text.replace(".", ":", 1))
    if ":" not in sanitized:
        if len(sanitized) >= 3:  # noqa: PLR2004
            return _format_time(sanitized[:-2], sanitized[-2:])
        if len(sanitized) == 2:  # noqa: PLR2004
            return _format_time(sanitized, "0")
        if len(sanitized) == 1:
            return f"0{sanitized}:00"
        return "00:00"
    hours_raw, _, rest = sanitized.partition(":")
    minutes_raw = rest.split(":", 1)[0]
    return _format_time(hours_raw, minutes_raw)


def combine_date_and_time(day: date, text: str | None, tz: tzinfo) -> datetime:
    """Combine a calendar date and free-form time into an aware datetime."""
    normalized = normalize_time_of_day(text or _DEFAULT_MEAL_TIME)
    hours, minutes = (int(part) for part in normalized.split(":"))
    return datetime.combine(day, time(hours, minutes), tzinfo=tz)


def _format_time(hours_raw: str, minutes_raw: str) -> str:
    hours = min(max(int(hours_raw or 0), 0), _MAX_HOUR)
    minutes = min(max(int(minutes_raw or 0), 0), _MAX_MINUTE)
    return f"{hours:02d}:{minutes:02d}"
