"""Service for detecting scheduling conflicts between time slots."""

from __future__ import annotations

from datetime import timedelta, timezone

from app.domain.models import (
    Conflict,
    ConflictType,
    DetectionOptions,
    DetectionResult,
    TimeSlot,
)
from app.logging import get_logger

log = get_logger("app.services.conflicts")


def _in_utc(slot: TimeSlot) -> TimeSlot:
    """Copy of *slot* with both bounds in UTC, so comparisons are by instant."""
    return slot.model_copy(
        update={
            "start": slot.start.astimezone(timezone.utc),
            "end": slot.end.astimezone(timezone.utc),
        }
    )


def _whole_minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)


def _link(adjacency: dict[str, list[str]], a_id: str, b_id: str) -> None:
    adjacency.setdefault(a_id, []).append(b_id)
    adjacency.setdefault(b_id, []).append(a_id)


def detect_conflicts(
    slots: list[TimeSlot],
    options: DetectionOptions | None = None,
) -> DetectionResult:
    """Find overlapping and under-buffered pairs among *slots*.

    Overlap rule: a.start < b.end AND b.start < a.end. Touching slots
    (a.end == b.start) never overlap, whatever the buffer.

    With a positive buffer, a non-overlapping pair whose gap is in
    ``[0, buffer)`` is reported as ``insufficient_buffer``. Each unordered
    pair yields at most one Conflict.
    """
    options = options or DetectionOptions()
    result = DetectionResult()
    if len(slots) < 2:
        return result

    buffer = timedelta(minutes=options.buffer_minutes)
    ordered = sorted(map(_in_utc, slots), key=lambda s: (s.start, s.end))

    for i, a in enumerate(ordered):
        horizon = a.end + buffer
        for b in ordered[i + 1 :]:
            if b.start >= horizon:
                break

            if a.start < b.end and b.start < a.end:
                overlap = min(a.end, b.end) - max(a.start, b.start)
                result.conflicts.append(
                    Conflict(
                        type=ConflictType.OVERLAP,
                        event_ids=[a.id, b.id],
                        overlap_minutes=_whole_minutes(overlap),
                    )
                )
                _link(result.adjacency, a.id, b.id)
            elif options.buffer_minutes > 0:
                gap = b.start - a.end
                if timedelta(0) <= gap < buffer:
                    result.conflicts.append(
                        Conflict(
                            type=ConflictType.INSUFFICIENT_BUFFER,
                            event_ids=[a.id, b.id],
                            gap_minutes=_whole_minutes(gap),
                            required_buffer_minutes=options.buffer_minutes,
                        )
                    )
                    _link(result.adjacency, a.id, b.id)

    result.has_conflicts = bool(result.conflicts)
    log.debug(
        "conflict_detection_complete",
        slots=len(slots),
        conflicts=len(result.conflicts),
        buffer_minutes=options.buffer_minutes,
    )
    return result
