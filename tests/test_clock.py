"""Tests for command-line time and code recognition."""

import pytest

from core.timelog import local_time
from services.clock import (
    ClockError,
    find_codes,
    find_times,
    parse_line,
    parse_report_request,
    round_time,
)

NOW = local_time(2023, 7, 6, 14, 22)


@pytest.mark.parametrize(
    "minute, expected",
    [(0, 0), (2, 0), (3, 6), (8, 6), (9, 12), (57, 60), (59, 60)],
)
def test_round_time(minute, expected):
    rounded = round_time(local_time(2023, 7, 6, 9, minute))
    assert (rounded - local_time(2023, 7, 6, 9)).total_seconds() == expected * 60


@pytest.mark.parametrize(
    "words, expected",
    [
        (["now"], NOW),
        (["9:36am"], local_time(2023, 7, 6, 9, 36)),
        (["09:36PM"], local_time(2023, 7, 6, 21, 36)),
        (["17:05"], local_time(2023, 7, 6, 17, 5)),
        (["2023/07/01", "12:00AM"], local_time(2023, 7, 1, 0, 0)),
        (["2023-07-01"], local_time(2023, 7, 1)),
    ],
)
def test_find_times(words, expected):
    found = find_times(words, NOW)
    assert found[0].at == expected


def test_find_times_skips_invalid():
    assert find_times(["25:00", "13:00pm", "2023/02/30", "hello"], NOW) == []


def test_find_times_order():
    found = find_times(["from", "2023-07-01", "to", "2023/07/02", "5:00pm"], NOW)
    assert [f.text for f in found] == ["2023-07-01", "2023/07/02 5:00pm"]
    assert found[1].start == 3
    assert found[1].count == 2


def test_find_codes(codes):
    found = find_codes([":Project:Sub", "Admin", ":Project:...", ":Nope", ":"], codes)
    assert [f.code for f in found] == ["Project:Sub", "Project:..."]


def test_parse_line_strips_prefix(codes):
    at, code, desc = parse_line(["9:37am", ":Project:Sub", "Did", "a", "thing."], codes, NOW)
    assert at == local_time(2023, 7, 6, 9, 36)
    assert code == "Project:Sub"
    assert desc == "Did a thing."


def test_parse_line_code_first(codes):
    _, code, desc = parse_line([":Admin", "now", "email"], codes, NOW)
    assert code == "Admin"
    assert desc == "email"


def test_parse_line_embedded_code(codes):
    at, code, desc = parse_line(["Worked", "on", ":Personal", "stuff", "until", "now"], codes, NOW)
    assert code == "Personal"
    assert desc == "Worked on Personal stuff until now"
    assert at == local_time(2023, 7, 6, 14, 24)


def test_parse_line_without_code(codes):
    _, code, desc = parse_line(["now", "thinking"], codes, NOW)
    assert code == ""
    assert desc == "thinking"


def test_parse_line_needs_a_time(codes):
    with pytest.raises(ClockError):
        parse_line(["no", "time", "here"], codes, NOW)


def test_parse_report_request(codes):
    begin, end, found = parse_report_request(
        ["2023-07-10", "2023-07-01", ":Project:...", ":empty"], codes, NOW
    )
    assert begin == local_time(2023, 7, 1)
    assert end == local_time(2023, 7, 10)
    assert found == ["Project:...", "empty"]


def test_parse_report_request_open_ended(codes):
    begin, end, found = parse_report_request(["2023-07-01"], codes, NOW)
    assert begin == local_time(2023, 7, 1)
    assert end is None
    assert found == []
