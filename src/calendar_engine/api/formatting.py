from __future__ import annotations

from typing import AbstractSet, List

from ..core.config import DATE_FORMAT, TIME_FORMAT
from ..domain import Event, QueryKind
from ..engine import availability, chronological

NO_EVENTS = "No events found."


def _location_suffix(event: Event) -> str:
    return f" at {event.location}" if event.location else ""


def format_on_date(events: AbstractSet[Event]) -> str:
    lines: List[str] = ["Query results:"]
    for index, event in enumerate(chronological(events), start=1):
        lines.append(
            f"- {index}: {event.subject} (from {event.start.strftime(TIME_FORMAT)} "
            f"to {event.end.strftime(TIME_FORMAT)}){_location_suffix(event)}"
        )
    return "\n".join(lines)


def format_in_range(events: AbstractSet[Event]) -> str:
    lines: List[str] = ["Query results:"]
    for event in chronological(events):
        lines.append(
            f"- {event.subject} starting on {event.start.strftime(DATE_FORMAT)} at {event.start.strftime(TIME_FORMAT)}, "
            f"ending on {event.end.strftime(DATE_FORMAT)} at {event.end.strftime(TIME_FORMAT)}{_location_suffix(event)}"
        )
    return "\n".join(lines)


def format_query_result(kind: QueryKind, events: AbstractSet[Event]) -> str:
    if kind is QueryKind.STATUS_AT:
        return availability(events)
    if not events:
        return NO_EVENTS
    if kind is QueryKind.ON_DATE:
        return format_on_date(events)
    return format_in_range(events)
