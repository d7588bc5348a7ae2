"""Filters and expanders, one kind per rule part."""

from .by_day import ByDayExpander, ByDayFilter, ByDayPrefixFilter
from .by_month import ByMonthExpander, ByMonthFilter, MonthFilter
from .by_monthday import ByMonthDayExpander, ByMonthDayFilter
from .by_setpos import BySetPosFilter
from .by_time import (
    ByHourExpander, ByHourFilter,
    ByMinuteExpander, ByMinuteFilter,
    BySecondExpander, BySecondFilter,
)
from .by_weekno import ByWeekNoExpander
from .by_yearday import ByYearDayExpander, ByYearDayFilter
from .validity import ValidInstantFilter

__all__ = [
    "ByDayExpander",
    "ByDayFilter",
    "ByDayPrefixFilter",
    "ByMonthExpander",
    "ByMonthFilter",
    "MonthFilter",
    "ByMonthDayExpander",
    "ByMonthDayFilter",
    "BySetPosFilter",
    "ByHourExpander",
    "ByHourFilter",
    "ByMinuteExpander",
    "ByMinuteFilter",
    "BySecondExpander",
    "BySecondFilter",
    "ByWeekNoExpander",
    "ByYearDayExpander",
    "ByYearDayFilter",
    "ValidInstantFilter",
]
