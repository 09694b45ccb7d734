"""
Recognize times and codes in command-line input.

Only a fixed set of time shapes is understood:

    now
    09:36AM / 9:36pm / 17:36       (today)
    2023/07/06 09:36AM             (date and time, any of / - . separators)
    2023-07-06                     (midnight)

Codes are words prefixed with ':' that exactly name a known code,
optionally followed by ':...' to mean the code and all its children.
"""

import re
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta

from core.config import ALL_CODES, EMPTY_CODE, ROUND_MINUTES, SUBTREE_SUFFIX
from core.timelog import local_time

DATE_RE = re.compile(r"^(\d{4})[/.-](\d{1,2})[/.-](\d{1,2})$")
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})([aApP][mM])?$")


class ClockError(ValueError):
    """Command-line input that cannot be turned into an event or report."""


@dataclass
class FoundTime:
    at: datetime
    text: str
    start: int  # Word index
    count: int  # Number of words


@dataclass
class FoundCode:
    code: str  # Known code, with the subtree suffix if one was asked for
    found: str  # The word as typed, without its leading ':'


def round_time(t: datetime, minutes: int = ROUND_MINUTES) -> datetime:
    """Round to the nearest multiple of `minutes` past the hour, halves up."""
    step = timedelta(minutes=minutes)
    base = t.replace(minute=0, second=0, microsecond=0)
    return base + step * int((t - base) / step + 0.5)


def _clock(match: re.Match) -> tuple[int, int] | None:
    hour, minute, meridiem = int(match[1]), int(match[2]), match[3]
    if minute > 59:
        return None
    if meridiem:
        if hour > 12:
            return None
        hour %= 12
        if meridiem[0] in "pP":
            hour += 12
    elif hour > 23:
        return None
    return hour, minute


def _date(match: re.Match) -> tuple[int, int, int]:
    return int(match[1]), int(match[2]), int(match[3])


def _time_at(words: list[str], i: int, now: datetime) -> tuple[datetime, int] | None:
    word = words[i]
    if word.lower() == "now":
        return now, 1

    time_match = TIME_RE.match(word)
    if time_match:
        clock = _clock(time_match)
        if clock is None:
            return None
        return local_time(now.year, now.month, now.day, *clock), 1

    date_match = DATE_RE.match(word)
    if not date_match:
        return None

    try:
        if i + 1 < len(words):
            time_match = TIME_RE.match(words[i + 1])
            clock = _clock(time_match) if time_match else None
            if clock is not None:
                return local_time(*_date(date_match), *clock), 2
        return local_time(*_date(date_match)), 1
    except ValueError:
        # Out of range date, e.g. 2023/02/30.
        return None


def find_times(words: list[str], now: datetime | None = None) -> list[FoundTime]:
    """Every time expression in `words`, in order of appearance."""
    if now is None:
        now = datetime.now().astimezone()

    found = []
    i = 0
    while i < len(words):
        hit = _time_at(words, i, now)
        if hit is None:
            i += 1
            continue
        at, count = hit
        found.append(FoundTime(at=at, text=" ".join(words[i:i + count]), start=i, count=count))
        i += count
    return found


def find_codes(words: list[str], codes: list[str]) -> list[FoundCode]:
    """Every ':code' word naming a known code, in order of appearance."""
    known = set(codes)
    found = []
    for word in words:
        if not word.startswith(":") or len(word) == 1:
            continue
        candidate = word[1:]
        base = candidate.removesuffix(SUBTREE_SUFFIX)
        if base in known:
            found.append(FoundCode(code=candidate, found=candidate))
    return found


def parse_line(words: list[str], codes: list[str], now: datetime | None = None) -> tuple[datetime, str, str]:
    """
    Turn a command line into (time, code, description).

    If the time and/or code start the line they are stripped from the
    description, otherwise the whole text is kept with the code's ':'
    removed.
    """
    whole = " ".join(words)

    times = find_times(words, now)
    if not times:
        raise ClockError('No time found. (use "now" for current time.)')
    if len(times) > 1:
        print("Multiple times found in input, using first one found.", file=sys.stderr)

    found = find_codes(words, codes)
    if len(found) > 1:
        print("Multiple possible time codes found in input, using first one found.", file=sys.stderr)
    code = found[0] if found else None

    prefixes = [times[0].text]
    if code:
        prefixes = [":" + code.found] + prefixes + [":" + code.found]
    for prefix in prefixes:
        if whole.startswith(prefix):
            whole = whole[len(prefix):].strip()

    if code:
        whole = whole.replace(":" + code.found, code.found, 1)

    return round_time(times[0].at), code.code if code else "", whole


def parse_report_request(
    words: list[str], codes: list[str], now: datetime | None = None
) -> tuple[datetime, datetime | None, list[str]]:
    """
    Pull the report range and code filters out of a command line.

    The first time is the start of the report, the second (if any) the
    end; they are swapped if given backwards.
    """
    times = find_times(words, now)
    if not times:
        raise ClockError('No time found. (use "now" for current time.)')
    if len(times) > 2:
        print("Multiple times found in input, using first two found.", file=sys.stderr)

    begin = times[0].at
    end = times[1].at if len(times) > 1 else None
    if end is not None and begin > end:
        begin, end = end, begin

    found = find_codes(words, list(codes) + [EMPTY_CODE, ALL_CODES])
    return begin, end, [f.code for f in found]
