from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable
from uuid import NAMESPACE_URL, uuid5

from icalendar import Calendar as ICalendar
from icalendar import Event as ICalEvent

from ..domain import Event, EventStatus

PRODID = "-//CalendarEngine//Calendar Engine 1.0//EN"

_ICAL_STATUS = {
    EventStatus.CONFIRMED: "CONFIRMED",
    EventStatus.TENTATIVE: "TENTATIVE",
    EventStatus.CANCELLED: "CANCELLED",
}


def _uid(event: Event) -> str:
    seed = f"{event.subject}|{event.start.isoformat()}|{event.end.isoformat()}"
    return f"{uuid5(NAMESPACE_URL, seed)}@calendar-engine"


def to_ical_event(event: Event, *, stamp: datetime) -> ICalEvent:
    component = ICalEvent()
    component.add("uid", _uid(event))
    component.add("dtstamp", stamp)
    component.add("dtstart", event.start.astimezone(timezone.utc))
    component.add("dtend", event.end.astimezone(timezone.utc))
    component.add("summary", event.subject)
    component.add("location", event.location)
    component.add("description", event.description)
    component.add("status", _ICAL_STATUS[event.status])
    return component


def export_ical(events: Iterable[Event], path: Path) -> Path:
    calendar = ICalendar()
    calendar.add("prodid", PRODID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    stamp = datetime.now(timezone.utc).replace(microsecond=0)
    for event in events:
        calendar.add_component(to_ical_event(event, stamp=stamp))
    path.write_bytes(calendar.to_ical())
    return path.resolve()
