"""Create strategies: timed or all-day, single or recurring.

Every strategy receives a read-only view of the calendar's events and returns
the new events only; the caller commits them. A failure on any occurrence
aborts the whole request.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import AbstractSet, Callable, Dict, FrozenSet, List, Tuple

from ..config import EngineSettings
from ..domain import CreateKind, Event, ValidationError
from ..domain.requests import CreateEventRequest
from .guard import ensure_unique
from .recurrence import expand_occurrences
from .timeutil import at_time, localize

logger = logging.getLogger(__name__)

CreateStrategy = Callable[[CreateEventRequest, AbstractSet[Event], tzinfo, EngineSettings], FrozenSet[Event]]


def _payload(request: CreateEventRequest, settings: EngineSettings) -> Dict[str, object]:
    return {
        "description": request.description,
        "location": request.location,
        "status": request.status or settings.default_status,
    }


def _timed_bounds(request: CreateEventRequest, zone: tzinfo) -> Tuple[datetime, datetime]:
    request.require("start", "end")
    start = localize(request.start, zone)
    end = localize(request.end, zone)
    if end <= start:
        raise ValidationError(
            f"Event end time ({end.isoformat()}) must be after its start time ({start.isoformat()})."
        )
    return start, end


def _all_day_bounds(request: CreateEventRequest, zone: tzinfo, settings: EngineSettings) -> Tuple[datetime, datetime]:
    request.require("on_date")
    return (
        at_time(request.on_date, settings.all_day_start, zone),
        at_time(request.on_date, settings.all_day_end, zone),
    )


def _commit_batch(candidates: List[Event], existing: AbstractSet[Event]) -> FrozenSet[Event]:
    accepted: List[Event] = []
    for candidate in candidates:
        ensure_unique(candidate, existing, accepted)
        accepted.append(candidate)
    return frozenset(accepted)


def create_single(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _timed_bounds(request, zone)
    event = Event(subject=request.subject, start=start, end=end, **_payload(request, settings))
    return _commit_batch([event], existing)


def create_recurring_for(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _timed_bounds(request, zone)
    request.require("weekdays", "occurrences")
    occurrences = expand_occurrences(
        request.subject, start, end, request.weekdays, count=request.occurrences, **_payload(request, settings)
    )
    return _commit_batch(occurrences, existing)


def create_recurring_until(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _timed_bounds(request, zone)
    request.require("weekdays", "until")
    occurrences = expand_occurrences(
        request.subject, start, end, request.weekdays, until=request.until, **_payload(request, settings)
    )
    return _commit_batch(occurrences, existing)


def create_all_day(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _all_day_bounds(request, zone, settings)
    event = Event(subject=request.subject, start=start, end=end, **_payload(request, settings))
    return _commit_batch([event], existing)


def create_all_day_recurring_for(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _all_day_bounds(request, zone, settings)
    request.require("weekdays", "occurrences")
    occurrences = expand_occurrences(
        request.subject, start, end, request.weekdays, count=request.occurrences, **_payload(request, settings)
    )
    return _commit_batch(occurrences, existing)


def create_all_day_recurring_until(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    start, end = _all_day_bounds(request, zone, settings)
    request.require("weekdays", "until")
    occurrences = expand_occurrences(
        request.subject, start, end, request.weekdays, until=request.until, **_payload(request, settings)
    )
    return _commit_batch(occurrences, existing)


CREATE_STRATEGIES: Dict[CreateKind, CreateStrategy] = {
    CreateKind.SINGLE: create_single,
    CreateKind.RECURRING_FOR: create_recurring_for,
    CreateKind.RECURRING_UNTIL: create_recurring_until,
    CreateKind.ALL_DAY: create_all_day,
    CreateKind.ALL_DAY_RECURRING_FOR: create_all_day_recurring_for,
    CreateKind.ALL_DAY_RECURRING_UNTIL: create_all_day_recurring_until,
}


def create_events(
    request: CreateEventRequest, existing: AbstractSet[Event], zone: tzinfo, settings: EngineSettings
) -> FrozenSet[Event]:
    strategy = CREATE_STRATEGIES[request.kind]
    created = strategy(request, existing, zone, settings)
    logger.debug("Strategy %s produced %d event(s) for '%s'", request.kind.value, len(created), request.subject)
    return created
