__version__ = "0.3.0"

from . import instant
from .conf import Settings, SettingValidationError, apply_settings
from .errors import CalendarOverflowError, RecurrenceError, UnproducibleRuleError
from .instant_set import InstantSet
from .calendars import CalendarMetrics, get_calendar_metrics
from .calendars.gregorian import GregorianCalendarMetrics
from .rule import (
    Freq, Part, Scope, RecurrenceRule,
    weekday_num, weekday_of, position_of, parse_byday,
)
from .iterators import RuleIterator, FreqIterator
from .expander import ByExpander, ByFilter, FilterExpander, MAX_EMPTY_SETS, MAX_FILTERS
from .chain import RecurrenceRuleIterator, build_chain


@apply_settings
def expand(freq, start, settings=None, **parts):
    """Expand a recurrence rule into dates or datetimes.

    A shortcut for ``RecurrenceRule(freq, **parts).datetimes(start)``.

    :param freq:
        The frequency, a :class:`recurpipe.rule.Freq` or its name, e.g. 'WEEKLY'.
    :type freq: Freq or str

    :param start:
        The first instance of the rule. Plain dates make an all-day rule.
    :type start: date or datetime

    :param settings:
        Configure customized behavior using settings defined in :mod:`recurpipe.conf.Settings`.
    :type settings: dict

    :param parts:
        Keyword arguments of :class:`recurpipe.rule.RecurrenceRule`, e.g.
        ``interval``, ``count``, ``until``, ``bymonth`` or ``byday``.

    :return: A generator of dates or datetimes, endless unless ``count`` or
        ``until`` bound the rule.

    :raises:
        ``ValueError``: Invalid rule, ``UnproducibleRuleError``: The rule can not produce
        any more instances, ``SettingValidationError``: A provided setting is not valid.

    Example usage::

        >>> import recurpipe
        >>> from datetime import date
        >>> list(recurpipe.expand('MONTHLY', date(2024, 1, 1), count=3, byday=['-1FR']))
        [datetime.date(2024, 1, 26), datetime.date(2024, 2, 23), datetime.date(2024, 3, 29)]
    """
    rule = RecurrenceRule(freq, settings=settings, **parts)
    return rule.datetimes(start)
