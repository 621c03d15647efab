"""Service for attaching detection results to the events they came from."""

from __future__ import annotations

from datetime import tzinfo

from app.domain.models import CalendarEvent, DetectionOptions, DetectionResult
from app.services.conflicts import detect_conflicts
from app.services.timeslots import parse_event_times


def apply_to_events(events: list[CalendarEvent], result: DetectionResult) -> None:
    """Set each event's ``conflicts_with`` from the result's adjacency map.

    Events with no entry get an empty list.
    """
    for event in events:
        event.conflicts_with = list(result.adjacency.get(event.id, []))


def annotate_events(
    events: list[CalendarEvent],
    options: DetectionOptions,
    loc: tzinfo,
) -> DetectionResult:
    """Normalize, detect, and annotate *events* in place.

    A ``ParseError`` propagates before any event is touched.
    """
    slots = parse_event_times(events, loc)
    result = detect_conflicts(slots, options)
    apply_to_events(events, result)
    return result
