"""
Weekly aggregation of periods into ISO-week buckets.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import timedelta
from operator import attrgetter

from models.events import Period, WeekBucket, empty_week

WEEK_TOTAL = 7


def weekday_index(period: Period) -> int:
    """Monday = 0 ... Sunday = 6, taken from the period's begin."""
    return period.begin.weekday()


def aggregate_weeks(periods: Iterable[Period]) -> list[WeekBucket]:
    """
    Group periods into ISO weeks and total their durations.

    Buckets are opened whenever the ISO (year, week) of a period's begin
    changes from the previous period's, so the input is sorted by begin
    first (stable, so equal begins keep their order). Totals are indexed
    Mon..Sun with the week total at index 7.
    """
    weeks: list[WeekBucket] = []
    current = None

    for period in sorted(periods, key=attrgetter("begin")):
        year, number, _ = period.begin.isocalendar()
        if current is None or (current.year, current.number) != (year, number):
            current = WeekBucket(year=year, number=number)
            weeks.append(current)

        current.periods.append(period)

        day = weekday_index(period)
        length = period.length
        totals = current.totals.setdefault(period.code, empty_week())
        totals[day] += length
        totals[WEEK_TOTAL] += length
        current.daily[day] += length
        current.daily[WEEK_TOTAL] += length

    return weeks


def running_totals(periods: Iterable[Period]) -> dict[str, timedelta]:
    """Total duration per code across all periods."""
    totals: dict[str, timedelta] = defaultdict(timedelta)
    for period in periods:
        totals[period.code] += period.length
    return dict(totals)
