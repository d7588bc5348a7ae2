"""
Recurrence rules

``RecurrenceRule`` holds the already-structured parts of an RFC 5545 RRULE:
a frequency, an interval, an optional COUNT or UNTIL bound, the week start and
the BYxxx parts. Every BYxxx part is a list of integer selectors; BYDAY
selectors pack a weekday and an optional position (see :func:`weekday_num`).

The rule validates its parts on construction. Filters and expanders read them
once, when a chain is built.
"""

from datetime import date
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

import regex as re
from dateutil.relativedelta import weekday

from recurpipe import instant
from recurpipe.calendars import CalendarMetrics, get_calendar_metrics, weekday_index
from recurpipe.conf import WEEKDAY_NAMES, apply_settings

BYDAY_TOKEN = re.compile(r"^([+-]?\d{1,2})?(MO|TU|WE|TH|FR|SA|SU)$", re.I)


# =============================================================================
# Enums
# =============================================================================

class Freq(Enum):
    """Recurrence frequencies, ordered from the finest to the coarsest."""
    SECONDLY = 1
    MINUTELY = 2
    HOURLY = 3
    DAILY = 4
    WEEKLY = 5
    MONTHLY = 6
    YEARLY = 7


class Part(Enum):
    """Rule parts, in the order their stages appear in a chain."""
    BYMONTH = "bymonth"
    BYWEEKNO = "byweekno"
    BYYEARDAY = "byyearday"
    BYMONTHDAY = "bymonthday"
    BYDAY = "byday"
    BYHOUR = "byhour"
    BYMINUTE = "byminute"
    BYSECOND = "bysecond"
    BYSETPOS = "bysetpos"


class Scope(Enum):
    """The period a stage reasons about when expanding or filtering."""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    WEEKLY_AND_MONTHLY = "WEEKLY_AND_MONTHLY"
    YEARLY = "YEARLY"


# Allowed selector ranges, zero is never allowed where negatives are
PART_RANGES = {
    Part.BYMONTH: (1, 12, False),
    Part.BYWEEKNO: (1, 53, True),
    Part.BYYEARDAY: (1, 366, True),
    Part.BYMONTHDAY: (1, 31, True),
    Part.BYHOUR: (0, 23, False),
    Part.BYMINUTE: (0, 59, False),
    Part.BYSECOND: (0, 60, False),
    Part.BYSETPOS: (1, 366, True),
}


# =============================================================================
# BYDAY selectors
# =============================================================================

def weekday_num(day: int, position: int = 0) -> int:
    """
    Pack a weekday (0=Monday) and a position into one BYDAY selector.

    ``position`` 0 means every such weekday, ``2`` the second one and ``-1``
    the last one of the period. A selector without position equals the
    weekday itself.
    """
    return (position << 3) | day


def weekday_of(selector: int) -> int:
    return selector & 7


def position_of(selector: int) -> int:
    return selector >> 3


def parse_byday(value) -> int:
    """Convert an int, a dateutil weekday or a token such as "-1FR" into a selector."""
    if isinstance(value, weekday):
        return weekday_num(value.weekday, value.n or 0)
    if isinstance(value, str):
        match = BYDAY_TOKEN.match(value.strip())
        if not match:
            raise ValueError("Invalid BYDAY value: %r" % value)
        position = int(match.group(1)) if match.group(1) else 0
        return weekday_num(WEEKDAY_NAMES.index(match.group(2).upper()), position)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError("Invalid BYDAY value type: %r" % type(value))


def format_byday(selector: int) -> str:
    position = position_of(selector)
    name = WEEKDAY_NAMES[weekday_of(selector)]
    return f"{position}{name}" if position else name


# =============================================================================
# RecurrenceRule
# =============================================================================

class RecurrenceRule:
    """
    A structured recurrence rule.

    Args:
        freq: A ``Freq`` member or its name.
        interval: Number of frequency periods between recurrence sets.
        count: Maximum number of instances, mutually exclusive with ``until``.
        until: Last date or datetime an instance may fall on.
        week_start: Weekday starting a week. Defaults to the ``WEEK_START`` setting.
        bymonth, byweekno, byyearday, bymonthday, byday, byhour, byminute,
        bysecond, bysetpos: Sequences of selectors for the matching part.
        settings: Configure customized behavior using settings defined in
            :mod:`recurpipe.conf.Settings`.

    Raises:
        ``ValueError`` for invalid or conflicting parts, ``TypeError`` for
        arguments of the wrong type, ``SettingValidationError`` for invalid
        settings.
    """

    @apply_settings
    def __init__(
        self,
        freq,
        interval=1,
        count=None,
        until=None,
        week_start=None,
        bymonth=None,
        byweekno=None,
        byyearday=None,
        bymonthday=None,
        byday=None,
        byhour=None,
        byminute=None,
        bysecond=None,
        bysetpos=None,
        settings=None,
    ):
        self.freq = self._parse_freq(freq)

        if not isinstance(interval, int) or isinstance(interval, bool) or interval < 1:
            raise ValueError("interval must be a positive integer (%r given)" % (interval,))
        if count is not None and until is not None:
            raise ValueError("count and until must not be given together")
        if count is not None and (not isinstance(count, int) or isinstance(count, bool) or count < 1):
            raise ValueError("count must be a positive integer (%r given)" % (count,))
        if until is not None and not isinstance(until, date):
            raise TypeError("until must be a date or datetime (%r given)" % type(until))

        self.interval = interval
        self.count = count
        self.until = until
        self.week_start = weekday_index(week_start if week_start is not None else settings.WEEK_START)
        self._settings = settings

        given = {
            Part.BYMONTH: bymonth,
            Part.BYWEEKNO: byweekno,
            Part.BYYEARDAY: byyearday,
            Part.BYMONTHDAY: bymonthday,
            Part.BYHOUR: byhour,
            Part.BYMINUTE: byminute,
            Part.BYSECOND: bysecond,
            Part.BYSETPOS: bysetpos,
        }
        self._parts: Dict[Part, List[int]] = {}
        for part, values in given.items():
            if values:
                self._parts[part] = self._check_selectors(part, values)
        if byday:
            self._parts[Part.BYDAY] = [parse_byday(v) for v in self._as_list(Part.BYDAY, byday)]

        self._check_combinations()

    @property
    def settings(self):
        return self._settings

    @staticmethod
    def _parse_freq(freq) -> Freq:
        if isinstance(freq, Freq):
            return freq
        if isinstance(freq, str):
            try:
                return Freq[freq.strip().upper()]
            except KeyError:
                raise ValueError("Unknown frequency: %r" % freq)
        raise TypeError("freq must be a Freq or str (%r given)" % type(freq))

    @staticmethod
    def _as_list(part, values) -> list:
        if isinstance(values, (int, str, weekday)):
            return [values]
        if not isinstance(values, (list, tuple, set, frozenset)):
            raise TypeError("%s must be a list (%r given)" % (part.value, type(values)))
        return list(values)

    def _check_selectors(self, part, values) -> List[int]:
        low, high, signed = PART_RANGES[part]
        selectors = self._as_list(part, values)
        for value in selectors:
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("%s values must be integers (%r given)" % (part.value, value))
            magnitude = abs(value) if signed else value
            if not low <= magnitude <= high or (value < 0 and not signed):
                raise ValueError("%s value out of range: %r" % (part.value, value))
        return selectors

    def _check_combinations(self):
        freq = self.freq
        has = self.has_part

        if has(Part.BYWEEKNO):
            if freq != Freq.YEARLY:
                raise ValueError("byweekno is only allowed with YEARLY rules")
            if has(Part.BYYEARDAY) or has(Part.BYMONTHDAY):
                raise ValueError("byweekno can not be combined with byyearday or bymonthday")
        if has(Part.BYYEARDAY) and freq in (Freq.DAILY, Freq.WEEKLY, Freq.MONTHLY):
            raise ValueError("byyearday is not allowed with %s rules" % freq.name)
        if has(Part.BYMONTHDAY) and freq == Freq.WEEKLY:
            raise ValueError("bymonthday is not allowed with WEEKLY rules")
        if has(Part.BYDAY):
            for selector in self._parts[Part.BYDAY]:
                if weekday_of(selector) > 6:
                    raise ValueError("Invalid BYDAY selector: %r" % selector)
                position = position_of(selector)
                if position and freq not in (Freq.MONTHLY, Freq.YEARLY):
                    raise ValueError("BYDAY positions are only allowed with MONTHLY or YEARLY rules")
                if position and (abs(position) > 53 or (freq == Freq.MONTHLY and abs(position) > 5)):
                    raise ValueError("BYDAY position out of range: %r" % format_byday(selector))
                if position and freq == Freq.YEARLY and has(Part.BYWEEKNO):
                    raise ValueError("BYDAY positions can not be combined with byweekno")
        if has(Part.BYSETPOS) and len(self._parts) == 1:
            raise ValueError("bysetpos requires another BYxxx part")

    # -------------------------------------------------------------------------
    # Part access
    # -------------------------------------------------------------------------

    def has_part(self, part: Part) -> bool:
        return part in self._parts

    def get_by_part(self, part: Part) -> List[int]:
        """Return the selectors of a part, or an empty list if it is not set."""
        return list(self._parts.get(part, ()))

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iterator(self, start: Union[date, int], metrics: Optional[CalendarMetrics] = None):
        """
        Return a ``RecurrenceRuleIterator`` over the instances of this rule.

        Args:
            start: The first instance, a date, datetime or packed instant.
            metrics: Calendar metrics. Defaults to the ``CALENDAR`` setting with
                this rule's week start.
        """
        from recurpipe.chain import RecurrenceRuleIterator

        if metrics is None:
            metrics = get_calendar_metrics(self._settings.CALENDAR, self.week_start)
        if not isinstance(start, int):
            start = instant.from_datetime(start)
        return RecurrenceRuleIterator(self, start, metrics)

    def instants(self, start, metrics=None) -> Iterator[int]:
        return iter(self.iterator(start, metrics))

    def datetimes(self, start, metrics=None) -> Iterator[date]:
        """Yield the instances as dates (all-day starts) or naive datetimes."""
        for value in self.iterator(start, metrics):
            yield instant.to_datetime(value)

    def __repr__(self):
        parts = [f"freq={self.freq.name}"]
        if self.interval != 1:
            parts.append(f"interval={self.interval}")
        if self.count is not None:
            parts.append(f"count={self.count}")
        if self.until is not None:
            parts.append(f"until={self.until.isoformat()}")
        parts.append(f"week_start={WEEKDAY_NAMES[self.week_start]}")
        for part in Part:
            if part in self._parts:
                values = self._parts[part]
                if part == Part.BYDAY:
                    values = [format_byday(v) for v in values]
                parts.append(f"{part.value}={values}")
        return f"RecurrenceRule({', '.join(parts)})"
