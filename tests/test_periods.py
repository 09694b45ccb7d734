"""Tests for sorting, range filters and period derivation."""

from datetime import timedelta

import pytest

from core.timelog import TimeLog, local_time, parse_timelog
from models.events import Event, Period


@pytest.fixture
def log():
    return TimeLog([
        Event(at=local_time(2023, 7, 6, 13), code="C", desc="third"),
        Event(at=local_time(2023, 7, 6, 9), code="A", desc="first"),
        Event(at=local_time(2023, 7, 6, 17), code="D", desc="fourth"),
        Event(at=local_time(2023, 7, 6, 12), code="B", desc="second"),
    ])


def test_sort_orders_by_time(log):
    log.sort()
    assert [e.desc for e in log] == ["first", "second", "third", "fourth"]


def test_sort_is_idempotent_and_a_permutation(log):
    original = list(log)
    log.sort()
    once = list(log)
    log.sort()
    assert list(log) == once
    assert sorted(map(id, log)) == sorted(map(id, original))


def test_sort_is_stable():
    at = local_time(2023, 7, 6, 9)
    log = TimeLog([Event(at=at, desc="x"), Event(at=at - timedelta(hours=1), desc="y"), Event(at=at, desc="z")])
    log.sort()
    assert [e.desc for e in log] == ["y", "x", "z"]


def test_after_is_strict(log):
    result = log.after(local_time(2023, 7, 6, 12))
    assert {e.desc for e in result} == {"third", "fourth"}
    assert isinstance(result, TimeLog)


def test_between_is_strict_and_symmetric(log):
    t1 = local_time(2023, 7, 6, 9)
    t2 = local_time(2023, 7, 6, 17)
    forward = log.between(t1, t2)
    backward = log.between(t2, t1)
    assert {e.desc for e in forward} == {"second", "third"}
    assert list(forward) == list(backward)


def test_range_filters_share_events(log):
    view = log.after(local_time(2023, 7, 6, 16))
    view[0].desc = "edited"
    assert any(e.desc == "edited" for e in log)

    view = log.between(local_time(2023, 7, 6, 8), local_time(2023, 7, 6, 10))
    view[0].code = "Z"
    assert any(e.code == "Z" for e in log)


def test_periods_sorts_and_pairs(log):
    periods = log.periods()

    assert [e.desc for e in log] == ["first", "second", "third", "fourth"]
    assert len(periods) == len(log) - 1
    for i, period in enumerate(periods):
        assert period.begin == log[i].at
        assert period.end == log[i + 1].at
        assert period.code == log[i].code
        assert period.desc == log[i].desc
        assert period.begin < period.end


def test_periods_do_not_alias_events(log):
    periods = log.periods()
    log[0].code = "changed"
    log[0].desc = "changed"
    assert periods[0].code == "A"
    assert periods[0].desc == "first"


def test_periods_are_immutable(log):
    period = log.periods()[0]
    with pytest.raises(AttributeError):
        period.code = "X"


@pytest.mark.parametrize("count", [0, 1])
def test_too_few_events_give_no_periods(count):
    log = TimeLog(Event(at=local_time(2023, 7, 6, 9 + i)) for i in range(count))
    assert log.periods() == []


def test_parse_then_derive_period():
    text = (
        "2023/07/06 09:36AM [Project:Sub] Did a thing.\n"
        "2023/07/06 05:36PM [Project:Sub] \n"
    )
    log = parse_timelog(text)
    assert len(log) == 2

    periods = log.periods()
    assert len(periods) == 1
    assert periods[0].code == "Project:Sub"
    assert periods[0].desc == "Did a thing."
    assert periods[0].length == timedelta(hours=8)


def test_period_str():
    period = Period(
        begin=local_time(2023, 7, 6, 9, 36),
        end=local_time(2023, 7, 6, 17, 36),
        code="Project:Sub",
        desc="Did a thing.",
    )
    assert str(period) == "2023/07/06 09:36AM - 05:36PM   8.0h [Project:Sub] Did a thing."
    assert period.hours == 8.0
