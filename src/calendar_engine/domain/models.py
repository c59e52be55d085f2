from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo
from typing import Any, Dict, FrozenSet, Iterable, Optional

from .enums import EventStatus
from .errors import ValidationError


@dataclass(frozen=True, slots=True)
class Event:
    """One occurrence. Identity is ``(subject, start, end)``; the rest is payload."""

    subject: str
    start: datetime
    end: datetime
    series_id: Optional[str] = field(default=None, compare=False)
    description: str = field(default="", compare=False)
    location: str = field(default="", compare=False)
    status: EventStatus = field(default=EventStatus.CONFIRMED, compare=False)

    def __post_init__(self) -> None:
        if not self.subject or not self.subject.strip():
            raise ValidationError("Event subject must not be empty.")
        if self.start >= self.end:
            raise ValidationError(
                f"Event end time ({self.end.isoformat()}) must be after its start time ({self.start.isoformat()})."
            )

    @property
    def in_series(self) -> bool:
        return bool(self.series_id)

    @property
    def key(self) -> tuple[str, datetime, datetime]:
        return (self.subject, self.start, self.end)

    def with_changes(self, **changes: Any) -> "Event":
        return replace(self, **changes)

    def describe(self) -> str:
        return f"'{self.subject}' from {self.start.isoformat()} to {self.end.isoformat()}"

    def to_record(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "series_id": self.series_id,
            "description": self.description,
            "location": self.location,
            "status": self.status.value,
        }


@dataclass(frozen=True, slots=True)
class Calendar:
    name: str
    timezone: tzinfo
    events: FrozenSet[Event] = field(default_factory=frozenset)

    @property
    def timezone_name(self) -> str:
        return str(self.timezone)

    @property
    def event_count(self) -> int:
        return len(self.events)

    def with_events(self, events: Iterable[Event]) -> "Calendar":
        return replace(self, events=frozenset(events))

    def renamed(self, name: str) -> "Calendar":
        return replace(self, name=name)

    def with_timezone(self, timezone: tzinfo) -> "Calendar":
        return replace(self, timezone=timezone)


__all__ = ["Calendar", "Event"]
