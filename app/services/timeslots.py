"""Service for normalizing raw calendar events into comparable time slots."""

from __future__ import annotations

import re
from datetime import datetime, time, tzinfo

from dateutil import parser as dtparser
from dateutil import tz

from app.domain.models import CalendarEvent, TimeSlot
from app.logging import get_logger

log = get_logger("app.services.timeslots")

_DATE_FORMAT = "%Y-%m-%d"
_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})"
)


class ParseError(ValueError):
    """Raised when an event's start or end cannot be parsed."""

    def __init__(self, event_id: str, field: str, raw: str, reason: str) -> None:
        self.event_id = event_id
        self.field = field
        self.raw = raw
        super().__init__(f"event {event_id!r}: cannot parse {field} {raw!r}: {reason}")


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the tzinfo for an IANA zone name, or the local zone.

    Unknown names fall back to the local zone rather than failing.
    """
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        log.warning("unknown_timezone", timezone=name)
        return tz.tzlocal()
    return zone


def _parse_timestamp(event_id: str, field: str, raw: str, loc: tzinfo) -> datetime:
    if not _RFC3339.fullmatch(raw):
        raise ParseError(event_id, field, raw, "not an RFC3339 timestamp")
    try:
        parsed = dtparser.isoparse(raw)
    except (ValueError, OverflowError) as exc:
        raise ParseError(event_id, field, raw, str(exc)) from exc
    return parsed.astimezone(loc)


def _parse_date(event_id: str, field: str, raw: str, loc: tzinfo) -> datetime:
    try:
        day = datetime.strptime(raw, _DATE_FORMAT).date()
    except ValueError as exc:
        raise ParseError(event_id, field, raw, str(exc)) from exc
    return datetime.combine(day, time(0, 0), tzinfo=loc)


def parse_event_times(events: list[CalendarEvent], loc: tzinfo) -> list[TimeSlot]:
    """Convert events into TimeSlots in *loc*, preserving input order.

    All-day events become midnight-to-midnight slots; the end date is taken
    as given and treated as exclusive (no day is added or removed).

    Raises ``ParseError`` on the first malformed value; no partial list is
    returned.
    """
    slots: list[TimeSlot] = []
    for event in events:
        convert = _parse_date if event.all_day else _parse_timestamp
        slots.append(
            TimeSlot(
                id=event.id,
                start=convert(event.id, "start", event.start, loc),
                end=convert(event.id, "end", event.end, loc),
                all_day=event.all_day,
            )
        )
    return slots
