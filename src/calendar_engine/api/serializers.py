from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..domain import Calendar, Event
from ..engine import chronological
from .models import CalendarPayload, EventPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()


def serialize_events(events: Iterable[Event]) -> List[Dict[str, Any]]:
    return [serialize_event(event) for event in chronological(events)]


def serialize_calendar(calendar: Calendar, *, active: bool = False) -> Dict[str, Any]:
    return CalendarPayload.from_domain(calendar, active=active).model_dump()
