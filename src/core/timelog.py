"""
Time log parsing, formatting and period derivation.

A time log is a plain text file with one event per line:

    2023/07/06 09:36AM [Project:Sub] Did a thing.

Blank lines and lines starting with '#' are ignored. The code block is
optional, and padding inside it is cosmetic.
"""

import io
from datetime import datetime
from operator import attrgetter
from typing import TextIO

from core.cursor import Cursor
from models.events import Event, Period, format_time

DIGITS = "0123456789"
DATE_SEPARATORS = "/-."
SPACE = " \t"


# =============================================================================
# ERRORS
# =============================================================================


class TimeLogError(ValueError):
    """Base class for time log parse errors. `line` is 1-based."""

    message = "Invalid time log on line"

    def __init__(self, line: int):
        self.line = line
        super().__init__(f"{self.message}: {line}")


class BadDateError(TimeLogError):
    """The parser attempted to consume an invalid date."""

    message = "Malformed event date on line"


class UnexpectedEndError(TimeLogError):
    """The end of input was found while a token was still expected."""

    message = "Unexpected end of input on line"


class MalformedError(TimeLogError):
    """A code block was opened but not closed on the same line."""

    message = "Malformed event on line"


# =============================================================================
# TIME LOG
# =============================================================================


def local_time(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Build a minute-precision timestamp in the host's local time zone."""
    return datetime(year, month, day, hour, minute).astimezone()


class TimeLog(list):
    """
    An ordered list of events, which collectively divide a stretch of
    time into smaller periods.

    File order is kept until `sort` is called.
    """

    def sort(self, *, key=attrgetter("at"), reverse=False):
        """Stable in-place sort, by event time unless told otherwise."""
        super().sort(key=key, reverse=reverse)

    def codes(self) -> list[str]:
        """All distinct non-blank codes in the log, in first-seen order."""
        seen = {}
        for event in self:
            if event.code.strip():
                seen.setdefault(event.code, None)
        return list(seen)

    def code_len(self) -> int:
        """Length of the longest code in the log."""
        return max((len(code) for code in self.codes()), default=0)

    def after(self, t: datetime) -> "TimeLog":
        """
        Events strictly after `t`.

        The returned log shares its Event objects with this one; editing
        them edits the original.
        """
        return TimeLog(event for event in self if event.at > t)

    def between(self, t1: datetime, t2: datetime) -> "TimeLog":
        """
        Events strictly between `t1` and `t2`, in either order.

        Shares Event objects with this log, like `after`.
        """
        if t1 > t2:
            t1, t2 = t2, t1
        return TimeLog(event for event in self if t1 < event.at < t2)

    def periods(self) -> list[Period]:
        """
        Assemble adjacent events into periods.

        Sorts the log in place first. Each period takes its code and
        description from the event that begins it.
        """
        self.sort()
        return [
            Period(begin=first.at, end=second.at, code=first.code, desc=first.desc)
            for first, second in zip(self, self[1:])
        ]

    def format(self, out: TextIO):
        """Write one event per line, with codes padded to a common width."""
        width = self.code_len()
        for event in self:
            out.write(f"{format_time(event.at)} [{event.code:>{width}}] {event.desc}\n")

    def __str__(self) -> str:
        out = io.StringIO()
        self.format(out)
        return out.getvalue()


# =============================================================================
# PARSER
# =============================================================================


def parse_timelog(text: str) -> TimeLog:
    """
    Parse a whole time log.

    Raises a TimeLogError subclass on the first problem; nothing is
    returned for a partially valid log.
    """
    cr = Cursor(text)
    log = TimeLog()

    while not cr.eof:
        # Leading white space, and lines that are blank.
        cr.eat(SPACE)
        if cr.eof:
            break
        if cr.char == "\n":
            cr.next()
            continue

        if cr.char == "#":
            cr.eat_until("\n")
            cr.next()
            continue

        at = _parse_date(cr)

        cr.eat(SPACE)
        if cr.eof:
            raise UnexpectedEndError(cr.line)

        code = ""
        if cr.char == "[":
            cr.next()
            code = _read_until_trimmed(cr, "]\n")
            if cr.char == "\n":
                raise MalformedError(cr.line)
            cr.next()

        cr.eat(SPACE)
        if cr.eof:
            raise UnexpectedEndError(cr.line)

        desc = _read_until_trimmed(cr, "\n")
        cr.next()

        log.append(Event(at=at, code=code, desc=desc))

    return log


def read_timelog(stream: TextIO) -> TimeLog:
    """Parse a time log from any readable text stream."""
    return parse_timelog(stream.read())


def _read_until_trimmed(cr: Cursor, chars: str) -> str:
    """Read up to one of `chars`, trimming spaces and tabs from both ends."""
    text = cr.read_until(chars)
    if cr.eof:
        raise UnexpectedEndError(cr.line)
    return text.strip(SPACE)


def _read_digits(cr: Cursor, limit: int, exact: bool = False) -> int:
    ok, digits = cr.read_match_limit(DIGITS, limit)
    if not ok or (exact and len(digits) != limit):
        raise (UnexpectedEndError if cr.eof else BadDateError)(cr.line)
    return int(digits)


def _expect(cr: Cursor, chars: str):
    if cr.eof:
        raise UnexpectedEndError(cr.line)
    if not cr.match(chars):
        raise BadDateError(cr.line)
    cr.next()


def _parse_date(cr: Cursor) -> datetime:
    """
    Read a 'yyyy/mm/dd hh:mmPM' timestamp.

    Running out of input part way through is UnexpectedEnd, anything
    else that does not fit the pattern is BadDate.
    """
    line = cr.line

    year = _read_digits(cr, 4, exact=True)
    _expect(cr, DATE_SEPARATORS)
    month = _read_digits(cr, 2)
    _expect(cr, DATE_SEPARATORS)
    day = _read_digits(cr, 2)
    _expect(cr, " ")
    hour = _read_digits(cr, 2)
    _expect(cr, ":")
    minute = _read_digits(cr, 2)

    meridiem = cr.char
    _expect(cr, "apAP")
    _expect(cr, "mM")

    if hour > 12:
        raise BadDateError(line)
    hour %= 12
    if meridiem in "pP":
        hour += 12

    try:
        return local_time(year, month, day, hour, minute)
    except ValueError:
        raise BadDateError(line) from None
