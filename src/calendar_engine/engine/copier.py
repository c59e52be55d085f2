from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Dict, FrozenSet, List, Optional

from ..domain import Calendar, CopyKind, Event, NotFoundError, ValidationError
from ..domain.requests import CopyEventRequest
from .guard import ensure_unique
from .query import chronological, events_in_window
from .recurrence import new_series_id
from .timeutil import day_window, elapsed, localize, shift_days, shift_exact, spans_single_day

logger = logging.getLogger(__name__)

CopyStrategy = Callable[[CopyEventRequest, Calendar, Calendar], FrozenSet[Event]]


class _SeriesRemap:
    """Gives each source series one fresh id in the target."""

    def __init__(self) -> None:
        self._mapping: Dict[str, str] = {}

    def __call__(self, series_id: Optional[str]) -> Optional[str]:
        if not series_id:
            return None
        if series_id not in self._mapping:
            self._mapping[series_id] = new_series_id()
        return self._mapping[series_id]


def _retimed(source: Event, start: datetime, series_id: Optional[str]) -> Event:
    end = shift_exact(start, elapsed(source.start, source.end))
    if source.in_series and not spans_single_day(start, end):
        raise ValidationError(
            f"Copying {source.describe()} would make a recurring event span from "
            f"{start.date().isoformat()} to {end.date().isoformat()}."
        )
    return source.with_changes(start=start, end=end, series_id=series_id)


def copy_event(request: CopyEventRequest, source: Calendar, target: Calendar) -> FrozenSet[Event]:
    request.require("subject", "source_start", "target_start")
    source_start = localize(request.source_start, source.timezone)
    matches = sorted(
        (event for event in source.events if event.subject == request.subject and event.start == source_start),
        key=lambda item: item.end,
    )
    if not matches:
        raise NotFoundError(
            f"Event '{request.subject}' starting at {source_start.isoformat()} not found in calendar '{source.name}'."
        )
    original = matches[0]
    copied = _retimed(original, localize(request.target_start, target.timezone), _SeriesRemap()(original.series_id))
    ensure_unique(copied, target.events)
    return target.events | {copied}


def _copy_shifted(selected: List[Event], days: int, target: Calendar) -> FrozenSet[Event]:
    remap = _SeriesRemap()
    pending: List[Event] = []
    for event in chronological(selected):
        start = shift_days(event.start, days).astimezone(target.timezone)
        copied = _retimed(event, start, remap(event.series_id))
        ensure_unique(copied, target.events, pending)
        pending.append(copied)
    return target.events | frozenset(pending)


def copy_on_date(request: CopyEventRequest, source: Calendar, target: Calendar) -> FrozenSet[Event]:
    request.require("source_date", "target_date")
    selected = events_in_window(source.events, *day_window(request.source_date, source.timezone))
    if not selected:
        raise NotFoundError(f"No events found on {request.source_date.isoformat()} in calendar '{source.name}'.")
    days = (request.target_date - request.source_date).days
    return _copy_shifted(list(selected), days, target)


def copy_between_dates(request: CopyEventRequest, source: Calendar, target: Calendar) -> FrozenSet[Event]:
    request.require("interval_start", "interval_end", "target_date")
    first: date = request.interval_start
    last: date = request.interval_end
    if last < first:
        raise ValidationError(f"Interval end {last.isoformat()} is before interval start {first.isoformat()}.")
    window_start = day_window(first, source.timezone)[0]
    window_end = day_window(last, source.timezone)[1]
    selected = events_in_window(source.events, window_start, window_end)
    if not selected:
        raise NotFoundError(
            f"No events found between {first.isoformat()} and {last.isoformat()} in calendar '{source.name}'."
        )
    days = (request.target_date - first).days
    return _copy_shifted(list(selected), days, target)


COPY_STRATEGIES: Dict[CopyKind, CopyStrategy] = {
    CopyKind.EVENT: copy_event,
    CopyKind.ON_DATE: copy_on_date,
    CopyKind.BETWEEN_DATES: copy_between_dates,
}


def copy_events(request: CopyEventRequest, source: Calendar, target: Calendar) -> FrozenSet[Event]:
    updated = COPY_STRATEGIES[request.kind](request, source, target)
    logger.debug(
        "Copy %s from '%s' added %d event(s) to '%s'",
        request.kind.value,
        source.name,
        len(updated) - len(target.events),
        target.name,
    )
    return updated
