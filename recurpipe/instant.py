"""
Instant encoding

An instant is a plain ``int`` packing a calendar point: year, month, day,
hour, minute, second and an all-day flag. Comparing two instants of the same
kind (both all-day or both timed) compares them chronologically, so sets of
instants can be sorted and bounded with ordinary integer operations.

Layout (least significant bit first)::

    bit  0       all-day flag
    bits 1-6     second (0-60)
    bits 7-12    minute
    bits 13-17   hour
    bits 18-22   day of month (1-31)
    bits 23-26   month (1-12)
    bits 27-     year

Fields are not range-checked on construction. An instant may hold a date that
does not exist (e.g. February 30); ``CalendarMetrics.is_valid`` tells them
apart.
"""

from datetime import date, datetime
from typing import Union

ALL_DAY_FLAG = 1

SECOND_SHIFT = 1
MINUTE_SHIFT = 7
HOUR_SHIFT = 13
DAY_SHIFT = 18
MONTH_SHIFT = 23
YEAR_SHIFT = 27

_SIX_BITS = 0x3F
_FIVE_BITS = 0x1F
_FOUR_BITS = 0x0F

_TIME_MASK = (1 << DAY_SHIFT) - 1 - ALL_DAY_FLAG
_DATE_MASK = ~((1 << DAY_SHIFT) - 1)


# =============================================================================
# Construction
# =============================================================================

def make(year: int, month: int, day: int, hour: int = 0, minute: int = 0,
         second: int = 0, all_day: bool = False) -> int:
    """Pack the given fields into an instant."""
    return ((year << YEAR_SHIFT)
            | (month << MONTH_SHIFT)
            | (day << DAY_SHIFT)
            | (hour << HOUR_SHIFT)
            | (minute << MINUTE_SHIFT)
            | (second << SECOND_SHIFT)
            | (ALL_DAY_FLAG if all_day else 0))


def make_date(year: int, month: int, day: int) -> int:
    """Pack an all-day instant."""
    return make(year, month, day, all_day=True)


def from_datetime(value: Union[date, datetime], all_day: bool = None) -> int:
    """
    Convert a ``date`` or ``datetime`` into an instant.

    Args:
        value: The date or datetime. Timezone information is ignored.
        all_day: Force the all-day flag. Defaults to ``True`` for plain dates
            and ``False`` for datetimes. Forcing it on a datetime drops the time.

    Returns:
        The packed instant.
    """
    if isinstance(value, datetime):
        if all_day:
            return make_date(value.year, value.month, value.day)
        return make(value.year, value.month, value.day, value.hour, value.minute, value.second)
    if isinstance(value, date):
        if all_day is None or all_day:
            return make_date(value.year, value.month, value.day)
        return make(value.year, value.month, value.day)
    raise TypeError("Expected date or datetime (%r given)" % type(value))


# =============================================================================
# Accessors
# =============================================================================

def year(instant: int) -> int:
    return instant >> YEAR_SHIFT


def month(instant: int) -> int:
    return (instant >> MONTH_SHIFT) & _FOUR_BITS


def day_of_month(instant: int) -> int:
    return (instant >> DAY_SHIFT) & _FIVE_BITS


def hour(instant: int) -> int:
    return (instant >> HOUR_SHIFT) & _FIVE_BITS


def minute(instant: int) -> int:
    return (instant >> MINUTE_SHIFT) & _SIX_BITS


def second(instant: int) -> int:
    return (instant >> SECOND_SHIFT) & _SIX_BITS


def is_all_day(instant: int) -> bool:
    return bool(instant & ALL_DAY_FLAG)


# =============================================================================
# Derivation
# =============================================================================

def with_date(instant: int, year: int, month: int, day: int) -> int:
    """Replace the date of an instant, keeping its time and all-day flag."""
    return (instant & ~_DATE_MASK) | (year << YEAR_SHIFT) | (month << MONTH_SHIFT) | (day << DAY_SHIFT)


def with_month(instant: int, month: int) -> int:
    return (instant & ~(_FOUR_BITS << MONTH_SHIFT)) | (month << MONTH_SHIFT)


def with_day(instant: int, day: int) -> int:
    return (instant & ~(_FIVE_BITS << DAY_SHIFT)) | (day << DAY_SHIFT)


def with_time(instant: int, hour: int, minute: int, second: int) -> int:
    """Replace the time of a timed instant."""
    return ((instant & ~_TIME_MASK)
            | (hour << HOUR_SHIFT)
            | (minute << MINUTE_SHIFT)
            | (second << SECOND_SHIFT))


def with_hour(instant: int, hour: int) -> int:
    return (instant & ~(_FIVE_BITS << HOUR_SHIFT)) | (hour << HOUR_SHIFT)


def with_minute(instant: int, minute: int) -> int:
    return (instant & ~(_SIX_BITS << MINUTE_SHIFT)) | (minute << MINUTE_SHIFT)


def with_second(instant: int, second: int) -> int:
    return (instant & ~(_SIX_BITS << SECOND_SHIFT)) | (second << SECOND_SHIFT)


# =============================================================================
# Conversion
# =============================================================================

def to_datetime(instant: int) -> Union[date, datetime]:
    """Return a ``date`` for all-day instants and a naive ``datetime`` otherwise."""
    if is_all_day(instant):
        return date(year(instant), month(instant), day_of_month(instant))
    # datetime has no room for leap seconds
    return datetime(year(instant), month(instant), day_of_month(instant),
                    hour(instant), minute(instant), min(second(instant), 59))


def to_string(instant: int) -> str:
    """Format an instant like ISO 8601 without validating the date."""
    text = f"{year(instant):04d}-{month(instant):02d}-{day_of_month(instant):02d}"
    if is_all_day(instant):
        return text
    return f"{text}T{hour(instant):02d}:{minute(instant):02d}:{second(instant):02d}"
