from recurpipe import instant
from recurpipe.expander import ByExpander
from recurpipe.rule import Part


class ByWeekNoExpander(ByExpander):
    """
    Expands a yearly seed into every day of the BYWEEKNO weeks that lies in
    the seed's year.

    Week 1 is the first week with at least four days in the year, counted
    from the rule's week start. Days of week 1 of the next year that fall in
    December, and days of the previous year's last week that fall in January,
    belong to the seed's year too.
    """

    def __init__(self, previous, rule, metrics, start):
        super().__init__(previous, metrics, start)
        self._weeknos = sorted(set(rule.get_by_part(Part.BYWEEKNO)))

    def expand(self, value, start):
        metrics = self.metrics
        year = instant.year(value)
        first_day = metrics.to_day_number(year, 1, 1)
        end_day = first_day + metrics.days_per_year(year)

        day_numbers = set()
        for week_year in (year - 1, year, year + 1):
            if week_year < 1:
                continue
            week_one = metrics.week_one_start(week_year)
            weeks = metrics.weeks_per_year(week_year)
            for weekno in self._weeknos:
                number = weekno if weekno > 0 else weeks + weekno + 1
                if not 1 <= number <= weeks:
                    continue
                week_start = week_one + 7 * (number - 1)
                day_numbers.update(range(max(week_start, first_day), min(week_start + 7, end_day)))

        for day_number in sorted(day_numbers):
            y, m, d = metrics.from_day_number(day_number)
            self.add_instance(instant.with_date(value, y, m, d))
