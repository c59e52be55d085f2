"""Edit scopes.

``SINGLE`` rewrites one exactly-identified event. ``FORWARD`` and ``SERIES``
rewrite the anchor's series (from the anchor onward, or all of it). Every
proposed occurrence is validated against the surviving events and the rest of
the batch before anything is returned, so a scope either yields a complete
:class:`EventDiff` or raises.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import AbstractSet, Any, Callable, Dict, List, Optional, Set

from ..domain import EditScope, Event, NotFoundError
from ..domain.requests import EditEventRequest
from .changes import (
    EventDiff,
    Violation,
    build,
    check_duplicate,
    check_times,
    parse_changes,
    propose,
    raise_violations,
)
from .recurrence import new_series_id
from .timeutil import localize, wall_delta

logger = logging.getLogger(__name__)

EditStrategy = Callable[[EditEventRequest, AbstractSet[Event], tzinfo], EventDiff]


def find_exact(events: AbstractSet[Event], subject: str, start: datetime, end: datetime) -> Event:
    for event in events:
        if event.key == (subject, start, end):
            return event
    raise NotFoundError(f"Event not found with subject '{subject}' from {start.isoformat()} to {end.isoformat()}.")


def find_by_start(events: AbstractSet[Event], subject: str, start: datetime) -> List[Event]:
    matches = sorted(
        (event for event in events if event.subject == subject and event.start == start),
        key=lambda item: item.end,
    )
    if not matches:
        raise NotFoundError(f"Event not found with subject '{subject}' starting at {start.isoformat()}.")
    return matches


def series_members(events: AbstractSet[Event], series_id: str, *, from_start: Optional[datetime] = None) -> List[Event]:
    members = [
        event
        for event in events
        if event.series_id == series_id and (from_start is None or event.start >= from_start)
    ]
    return sorted(members, key=lambda item: item.start)


def _edit_one(
    target: Event,
    parsed: Dict[str, Any],
    events: AbstractSet[Event],
    removed: Set[Event],
    added: List[Event],
) -> List[Violation]:
    values = propose(target, parsed)
    violations = check_times(values, in_series=target.in_series, changed=set(parsed))
    removed.add(target)
    violations.extend(check_duplicate(values, events, removed, added))
    if not violations:
        added.append(build(values, target.series_id))
    return violations


def edit_single(request: EditEventRequest, events: AbstractSet[Event], zone: tzinfo) -> EventDiff:
    request.require("end")
    target = find_exact(events, request.subject, localize(request.start, zone), localize(request.end, zone))
    parsed = parse_changes(request.changes, zone)

    removed: Set[Event] = set()
    added: List[Event] = []
    raise_violations(_edit_one(target, parsed, events, removed, added))
    return EventDiff(removed=frozenset(removed), added=frozenset(added))


def _retime(occurrence: Event, start_delta: Optional[timedelta], end_delta: Optional[timedelta]) -> Dict[str, Any]:
    moved: Dict[str, Any] = {}
    if start_delta is not None:
        moved["start"] = occurrence.start + start_delta
    if end_delta is not None:
        moved["end"] = occurrence.end + end_delta
    return moved


def _edit_series(
    request: EditEventRequest,
    events: AbstractSet[Event],
    zone: tzinfo,
    *,
    forward_only: bool,
) -> EventDiff:
    anchors = find_by_start(events, request.subject, localize(request.start, zone))
    parsed = parse_changes(request.changes, zone)
    plain = {name: value for name, value in parsed.items() if name not in ("start", "end")}

    removed: Set[Event] = set()
    added: List[Event] = []
    violations: List[Violation] = []

    for anchor in anchors:
        if anchor in removed:
            continue
        if not anchor.in_series:
            violations.extend(_edit_one(anchor, parsed, events, removed, added))
            continue

        start_delta = wall_delta(anchor.start, parsed["start"]) if "start" in parsed else None
        if "end" in parsed:
            end_delta: Optional[timedelta] = wall_delta(anchor.end, parsed["end"])
        else:
            end_delta = start_delta

        selection = series_members(events, anchor.series_id, from_start=anchor.start if forward_only else None)
        series_id = new_series_id() if forward_only else anchor.series_id
        removed.update(selection)

        for index, occurrence in enumerate(selection, start=1):
            overrides = dict(plain)
            overrides.update(_retime(occurrence, start_delta, end_delta))
            values = propose(occurrence, overrides)
            problems = check_times(values, in_series=True, changed=set(parsed))
            problems.extend(check_duplicate(values, events, removed, added))
            if problems:
                prefix = f"Failed to update event #{index} in series (starting at {occurrence.start.isoformat()}): "
                violations.extend((kind, prefix + text) for kind, text in problems)
                continue
            added.append(build(values, series_id))

    raise_violations(violations)
    return EventDiff(removed=frozenset(removed), added=frozenset(added))


def edit_forward(request: EditEventRequest, events: AbstractSet[Event], zone: tzinfo) -> EventDiff:
    return _edit_series(request, events, zone, forward_only=True)


def edit_series(request: EditEventRequest, events: AbstractSet[Event], zone: tzinfo) -> EventDiff:
    return _edit_series(request, events, zone, forward_only=False)


EDIT_STRATEGIES: Dict[EditScope, EditStrategy] = {
    EditScope.SINGLE: edit_single,
    EditScope.FORWARD: edit_forward,
    EditScope.SERIES: edit_series,
}


def edit_events(request: EditEventRequest, events: AbstractSet[Event], zone: tzinfo) -> EventDiff:
    diff = EDIT_STRATEGIES[request.scope](request, events, zone)
    logger.debug("Edit scope %s rewrote %d event(s) of '%s'", request.scope.value, diff.changed, request.subject)
    return diff
