"""Tests for normalizing raw events into time slots."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from dateutil import tz

from app.domain.models import CalendarEvent
from app.services.timeslots import ParseError, parse_event_times, resolve_timezone

_SINGAPORE = tz.gettz("Asia/Singapore")


def _event(id: str, start: str, end: str, all_day: bool = False) -> CalendarEvent:
    return CalendarEvent(id=id, start=start, end=end, all_day=all_day)


def test_timed_event_converted_to_location():
    slots = parse_event_times(
        [_event("a", "2026-03-02T01:00:00Z", "2026-03-02T02:30:00Z")], _SINGAPORE
    )

    slot = slots[0]
    assert slot.id == "a"
    assert slot.all_day is False
    assert slot.start == datetime(2026, 3, 2, 1, 0, tzinfo=timezone.utc)
    assert slot.start.utcoffset() == timedelta(hours=8)
    assert (slot.start.hour, slot.end.hour, slot.end.minute) == (9, 10, 30)


def test_timed_event_with_numeric_offset():
    slots = parse_event_times(
        [_event("a", "2026-03-02T09:00:00-05:00", "2026-03-02T10:00:00-05:00")],
        tz.UTC,
    )
    assert slots[0].start == datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)


def test_fractional_seconds_accepted():
    slots = parse_event_times(
        [_event("a", "2026-03-02T09:00:00.250Z", "2026-03-02T10:00:00.5+01:00")],
        tz.UTC,
    )
    assert slots[0].start.microsecond == 250000
    assert slots[0].end == datetime(2026, 3, 2, 9, 0, 0, 500000, tzinfo=timezone.utc)


def test_all_day_event_is_midnight_to_midnight_in_location():
    slots = parse_event_times([_event("d", "2026-03-02", "2026-03-03", True)], _SINGAPORE)

    slot = slots[0]
    assert slot.all_day is True
    assert slot.start == datetime(2026, 3, 2, tzinfo=_SINGAPORE)
    assert slot.end == datetime(2026, 3, 3, tzinfo=_SINGAPORE)
    assert slot.start.utcoffset() == timedelta(hours=8)


def test_all_day_end_date_taken_as_given():
    slots = parse_event_times([_event("d", "2026-03-02", "2026-03-02", True)], tz.UTC)
    assert slots[0].start == slots[0].end


def test_order_preserved():
    events = [
        _event("late", "2026-03-02T15:00:00Z", "2026-03-02T16:00:00Z"),
        _event("day", "2026-03-01", "2026-03-02", True),
        _event("early", "2026-03-02T08:00:00Z", "2026-03-02T09:00:00Z"),
    ]
    assert [s.id for s in parse_event_times(events, tz.UTC)] == ["late", "day", "early"]


@pytest.mark.parametrize(
    "start, end, all_day, field",
    [
        ("not-a-time", "2026-03-02T10:00:00Z", False, "start"),
        ("2026-03-02T09:00:00Z", "2026-03-02T10:00:00", False, "end"),
        ("2026-03-02", "2026-03-03", False, "start"),
        ("2026-03-02T00:00:00Z", "2026-03-03", True, "start"),
        ("2026-03-02", "2026/03/03", True, "end"),
        ("2026-02-30", "2026-03-01", True, "start"),
        ("20260302T090000Z", "2026-03-02T10:00:00Z", False, "start"),
        ("2026-03-02T09Z", "2026-03-02T10:00:00Z", False, "start"),
        ("2026-W10-1T09:00:00Z", "2026-03-02T10:00:00Z", False, "start"),
        ("2026-03-02T09:00:00Z", "2026-061T09:00:00+00", False, "end"),
        ("2026-03-02T09:00:00+0100", "2026-03-02T10:00:00Z", False, "start"),
        ("2026-03-02 09:00:00Z", "2026-03-02T10:00:00Z", False, "start"),
    ],
)
def test_malformed_values_raise_parse_error(start, end, all_day, field):
    with pytest.raises(ParseError) as excinfo:
        parse_event_times([_event("bad", start, end, all_day)], tz.UTC)

    assert excinfo.value.event_id == "bad"
    assert excinfo.value.field == field
    assert isinstance(excinfo.value, ValueError)


def test_one_bad_event_aborts_whole_batch():
    events = [
        _event("ok", "2026-03-02T08:00:00Z", "2026-03-02T09:00:00Z"),
        _event("broken", "tomorrow", "2026-03-02T09:00:00Z"),
        _event("ok2", "2026-03-02T10:00:00Z", "2026-03-02T11:00:00Z"),
    ]
    with pytest.raises(ParseError, match="broken"):
        parse_event_times(events, tz.UTC)


def test_resolve_known_timezone():
    zone = resolve_timezone("Asia/Singapore")
    assert datetime(2026, 1, 1, tzinfo=zone).utcoffset() == timedelta(hours=8)


@pytest.mark.parametrize("name", [None, "", "Not/AZone"])
def test_resolve_falls_back_to_local(name):
    assert resolve_timezone(name) == tz.tzlocal()
