"""FastAPI application — entry point for the conflict detection service."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

from app.config import get_settings
from app.domain.models import DetectConflictsRequest, DetectionOptions, EventList
from app.logging import get_logger, setup_logging
from app.services.annotations import annotate_events
from app.services.timeslots import ParseError, resolve_timezone

setup_logging()
log = get_logger("app.main")

app = FastAPI(title="Calendar Conflict Service")


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post(
    "/conflicts/detect",
    response_model=EventList,
    response_model_exclude_none=True,
)
def detect(payload: DetectConflictsRequest) -> EventList:
    """Annotate the submitted events with the events they conflict with.

    ``buffer_minutes`` and ``timezone`` default to the service settings
    when omitted.
    """
    settings = get_settings()
    buffer_minutes = (
        payload.buffer_minutes
        if payload.buffer_minutes is not None
        else settings.buffer_minutes
    )
    loc = resolve_timezone(payload.timezone or settings.timezone)

    events = payload.events
    try:
        result = annotate_events(
            events, DetectionOptions(buffer_minutes=buffer_minutes), loc
        )
    except ParseError as exc:
        log.warning("conflict_detection_failed", event_id=exc.event_id, error=str(exc))
        raise HTTPException(
            status_code=422,
            detail={
                "code": "CONFLICT_DETECTION_ERROR",
                "message": str(exc),
                "event_id": exc.event_id,
            },
        ) from exc

    return EventList(
        events=events,
        count=len(events),
        conflicts=result.conflicts,
        has_conflicts=result.has_conflicts,
    )
