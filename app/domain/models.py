"""Domain models for the conflict detection service."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class ConflictType(StrEnum):
    OVERLAP = "overlap"
    INSUFFICIENT_BUFFER = "insufficient_buffer"


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class CalendarEvent(BaseModel):
    """An event as delivered by the upstream calendar, before normalization.

    ``start``/``end`` are RFC3339 timestamps for timed events and
    ``YYYY-MM-DD`` dates for all-day events.
    """

    id: str
    start: str
    end: str
    all_day: bool = False
    summary: str | None = None
    location: str | None = None
    conflicts_with: list[str] = Field(default_factory=list)


class TimeSlot(BaseModel):
    id: str
    start: datetime
    end: datetime  # exclusive
    all_day: bool = False


class Conflict(BaseModel):
    type: ConflictType
    event_ids: list[str] = Field(min_length=2, max_length=2)
    overlap_minutes: int | None = None
    gap_minutes: int | None = None
    required_buffer_minutes: int | None = None


class DetectionOptions(BaseModel):
    buffer_minutes: int = Field(default=0, ge=0)


class DetectionResult(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)
    has_conflicts: bool = False
    adjacency: dict[str, list[str]] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class DetectConflictsRequest(BaseModel):
    events: list[CalendarEvent]
    buffer_minutes: int | None = Field(default=None, ge=0)
    timezone: str | None = None


class EventList(BaseModel):
    events: list[CalendarEvent]
    count: int
    conflicts: list[Conflict] = Field(default_factory=list)
    has_conflicts: bool = False
