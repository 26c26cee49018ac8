"""
Date coercion and calendar formatting.

Date-like inputs are datetime/date objects, numbers (epoch milliseconds, UTC)
and strings understood by dateutil. Calendar patterns come from the locale
table; relative phrases are coarse ("3 days ago") and depend on "now".
"""

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from dateutil import parser as dtparser

from .locales import LocaleSpec, resolve_locale


def coerce_datetime(value: Any) -> datetime | None:
    """
    Coerce a date-like value to a datetime.

    Args:
        value: datetime, date, epoch milliseconds, or date string

    Returns:
        datetime (naive or aware as given), or None when not date-like
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            millis = float(value)
            if not math.isfinite(millis):
                return None
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return dtparser.parse(text)
        except (ValueError, OverflowError):
            # dateutil's ParserError is a ValueError subclass
            return None
    return None


def _date_fields(moment: datetime, spec: LocaleSpec) -> dict[str, str]:
    hour12 = moment.hour % 12 or 12
    return {
        "d": str(moment.day),
        "dd": f"{moment.day:02d}",
        "m": str(moment.month),
        "mm": f"{moment.month:02d}",
        "yy": f"{moment.year % 100:02d}",
        "yyyy": str(moment.year),
        "month": spec.months[moment.month - 1],
        "h": str(hour12),
        "hh": f"{hour12:02d}",
        "HH": f"{moment.hour:02d}",
        "MM": f"{moment.minute:02d}",
        "SS": f"{moment.second:02d}",
        "ampm": "AM" if moment.hour < 12 else "PM",
    }


def format_date(moment: datetime, pattern: str, locale: str | None = None) -> str:
    """
    Format a datetime with one of the locale's named patterns.

    Args:
        moment: Datetime to format
        pattern: One of "date_short", "date_long", "time_short", "datetime"
        locale: Locale tag

    Examples:
        >>> format_date(datetime(2024, 1, 5, 15, 7, 9), "date_long")
        'January 5, 2024'
        >>> format_date(datetime(2024, 1, 5, 15, 7, 9), "time_short", "de-DE")
        '15:07'
    """
    spec = resolve_locale(locale)
    template: str = getattr(spec, pattern)
    return template.format(**_date_fields(moment, spec))


def _align(moment: datetime, now: datetime | None) -> tuple[datetime, datetime]:
    """
    Bring value and reference time to the same awareness.

    A naive side adopts the other side's tzinfo. Nothing is converted, so
    dates at the edges of the calendar stay in range.
    """
    if now is None:
        now = datetime.now(moment.tzinfo) if moment.tzinfo else datetime.now()
    if moment.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=moment.tzinfo)
    elif moment.tzinfo is None and now.tzinfo is not None:
        moment = moment.replace(tzinfo=now.tzinfo)
    return moment, now


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_relative(moment: datetime, now: datetime | None = None) -> str:
    """
    Coarse human phrase for the distance between a moment and now.

    Whole days are counted, truncated toward zero; weeks, 30-day months and
    365-day years take over at 7, 30 and 365 days.

    Examples:
        >>> now = datetime(2024, 3, 10, 12, 0)
        >>> format_relative(datetime(2024, 3, 8, 9, 0), now)
        '2 days ago'
        >>> format_relative(datetime(2024, 3, 9, 9, 0), now)
        'Yesterday'
    """
    moment, now = _align(moment, now)
    diff_days = int((now - moment) / timedelta(days=1))

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days == -1:
        return "Tomorrow"

    days = abs(diff_days)
    if days < 7:
        phrase = _plural(days, "day")
    elif days < 30:
        phrase = _plural(days // 7, "week")
    elif days < 365:
        phrase = _plural(days // 30, "month")
    else:
        phrase = _plural(days // 365, "year")

    return f"{phrase} ago" if diff_days > 0 else f"in {phrase}"


__all__ = [
    "coerce_datetime",
    "format_date",
    "format_relative",
]
