from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import AbstractSet, Callable, Dict, FrozenSet, Iterable, List

from ..domain import Event, QueryKind, ValidationError
from ..domain.requests import QueryEventRequest
from .timeutil import day_window, localize

logger = logging.getLogger(__name__)

BUSY = "busy"
AVAILABLE = "available"

QueryStrategy = Callable[[QueryEventRequest, AbstractSet[Event], tzinfo], FrozenSet[Event]]


def overlaps(event: Event, window_start: datetime, window_end: datetime) -> bool:
    return event.start < window_end and event.end > window_start


def is_active(event: Event, instant: datetime) -> bool:
    return event.start <= instant < event.end


def events_in_window(events: Iterable[Event], window_start: datetime, window_end: datetime) -> FrozenSet[Event]:
    return frozenset(event for event in events if overlaps(event, window_start, window_end))


def chronological(events: Iterable[Event]) -> List[Event]:
    return sorted(events, key=lambda item: (item.start, item.end, item.subject))


def availability(active: AbstractSet[Event]) -> str:
    return BUSY if active else AVAILABLE


def print_on_date(request: QueryEventRequest, events: AbstractSet[Event], zone: tzinfo) -> FrozenSet[Event]:
    request.require("on_date")
    return events_in_window(events, *day_window(request.on_date, zone))


def print_in_range(request: QueryEventRequest, events: AbstractSet[Event], zone: tzinfo) -> FrozenSet[Event]:
    request.require("range_start", "range_end")
    start = localize(request.range_start, zone)
    end = localize(request.range_end, zone)
    if start > end:
        raise ValidationError(f"Range start ({start.isoformat()}) must be before range end ({end.isoformat()}).")
    return events_in_window(events, start, end)


def status_at(request: QueryEventRequest, events: AbstractSet[Event], zone: tzinfo) -> FrozenSet[Event]:
    request.require("at")
    instant = localize(request.at, zone)
    return frozenset(event for event in events if is_active(event, instant))


QUERY_STRATEGIES: Dict[QueryKind, QueryStrategy] = {
    QueryKind.ON_DATE: print_on_date,
    QueryKind.IN_RANGE: print_in_range,
    QueryKind.STATUS_AT: status_at,
}


def query_events(request: QueryEventRequest, events: AbstractSet[Event], zone: tzinfo) -> FrozenSet[Event]:
    found = QUERY_STRATEGIES[request.kind](request, events, zone)
    logger.debug("Query %s matched %d event(s)", request.kind.value, len(found))
    return found
