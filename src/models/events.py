"""
Data models for time log events, periods and weekly reports.

Events are mutable records shared by reference between a log and the
range filters taken from it. Periods are frozen value records built
fresh by period derivation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

# The time/date formats used in the time log file.
TIME_FORMAT = "%Y/%m/%d %I:%M"
TIME_SHORT_FORMAT = "%I:%M"

# Mon..Sun plus the week total.
WEEK_SLOTS = 8


def format_time(at: datetime, short: bool = False) -> str:
    """Format a timestamp as 'yyyy/mm/dd hh:mmPM' (or 'hh:mmPM' when short)."""
    pattern = TIME_SHORT_FORMAT if short else TIME_FORMAT
    # %p is locale dependent, the log format is not.
    suffix = "PM" if at.hour >= 12 else "AM"
    return at.strftime(pattern) + suffix


@dataclass
class Event:
    """Marks the end of one time period and the start of another."""

    at: datetime
    code: str = ""
    desc: str = ""

    def __str__(self) -> str:
        return f"{format_time(self.at)} [{self.code}] {self.desc}"


@dataclass(frozen=True)
class Period:
    """
    A time period bracketed by two events.

    By convention the description and code are taken from the event that
    marks the beginning of the period.
    """

    begin: datetime
    end: datetime
    code: str = ""
    desc: str = ""

    @property
    def length(self) -> timedelta:
        return self.end - self.begin

    @property
    def hours(self) -> float:
        return self.length.total_seconds() / 3600

    def __str__(self) -> str:
        return (
            f"{format_time(self.begin)} - {format_time(self.end, short=True)} "
            f"{self.hours:5.1f}h [{self.code}] {self.desc}"
        )


@dataclass
class CodeTreeNode:
    """
    One segment of the code hierarchy.

    `path` is the colon-joined code from the root to this node. The root
    carries None, which never equals a parsed code.
    """

    path: str | None = None
    children: dict[str, "CodeTreeNode"] = field(default_factory=dict)


def empty_week() -> list[timedelta]:
    return [timedelta(0)] * WEEK_SLOTS


@dataclass
class WeekBucket:
    """Periods and duration totals for one ISO week."""

    year: int
    number: int
    periods: list[Period] = field(default_factory=list)
    totals: dict[str, list[timedelta]] = field(default_factory=dict)  # Mon-Sun, plus week total
    daily: list[timedelta] = field(default_factory=empty_week)  # Totals for all codes

    @property
    def label(self) -> str:
        return f"{self.year}-W{self.number:02d}"


@dataclass
class ReportData:
    """Everything a report renderer needs."""

    begin: datetime
    end: datetime | None
    periods: list[Period]
    totals: dict[str, timedelta]
    weeks: list[WeekBucket]
