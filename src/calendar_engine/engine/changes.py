"""Property changes, proposed values and batch diffs shared by the edit scopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import AbstractSet, Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Type

from ..domain import (
    CalendarError,
    DuplicateEventError,
    Event,
    EventStatus,
    UnsupportedOperationError,
    ValidationError,
)
from .guard import would_duplicate
from .timeutil import parse_local_datetime, spans_single_day

EDITABLE_PROPERTIES = ("subject", "start", "end", "description", "location", "status")

Violation = Tuple[Type[CalendarError], str]


def parse_changes(changes: Mapping[str, str], zone: tzinfo) -> Dict[str, Any]:
    """Turn raw ``property -> text`` pairs into typed values."""

    parsed: Dict[str, Any] = {}
    for name, raw in changes.items():
        prop = name.lower()
        if prop not in EDITABLE_PROPERTIES:
            raise UnsupportedOperationError(f"Unknown property: {name}")
        if prop in ("start", "end"):
            parsed[prop] = parse_local_datetime(raw, zone)
        elif prop == "status":
            try:
                parsed[prop] = EventStatus(raw.strip().lower())
            except ValueError as exc:
                allowed = ", ".join(status.value for status in EventStatus)
                raise ValidationError(f"Unknown status '{raw}'. Expected one of: {allowed}.") from exc
        elif prop == "subject":
            if not raw.strip():
                raise ValidationError("Event subject must not be empty.")
            parsed[prop] = raw
        else:
            parsed[prop] = raw
    return parsed


def propose(original: Event, overrides: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "subject": original.subject,
        "start": original.start,
        "end": original.end,
        "description": original.description,
        "location": original.location,
        "status": original.status,
    }
    values.update(overrides)
    return values


def check_times(values: Mapping[str, Any], *, in_series: bool, changed: AbstractSet[str]) -> List[Violation]:
    violations: List[Violation] = []
    start: datetime = values["start"]
    end: datetime = values["end"]
    if start >= end:
        message = f"Invalid update: start time ({start.isoformat()}) must be before end time ({end.isoformat()})."
        if {"start", "end"} <= changed:
            message += " Both start and end times were modified."
        elif "start" in changed:
            message += " Start time was modified."
        elif "end" in changed:
            message += " End time was modified."
        violations.append((ValidationError, message))
    if in_series and not spans_single_day(start, end):
        violations.append(
            (
                ValidationError,
                "Invalid update: events in a series must start and end on the same day. "
                f"Event would span from {start.date().isoformat()} to {end.date().isoformat()}.",
            )
        )
    return violations


def check_duplicate(
    values: Mapping[str, Any],
    existing: AbstractSet[Event],
    removed: AbstractSet[Event],
    pending: Iterable[Event],
) -> List[Violation]:
    if values["start"] >= values["end"]:
        return []
    candidate = Event(values["subject"], values["start"], values["end"])
    if would_duplicate(candidate, existing, removed=removed):
        return [(DuplicateEventError, f"Edit operation failed: an event {candidate.describe()} already exists.")]
    if would_duplicate(candidate, frozenset(), pending):
        return [(DuplicateEventError, f"Edit operation failed: would create duplicate events {candidate.describe()}.")]
    return []


def build(values: Mapping[str, Any], series_id: Optional[str]) -> Event:
    return Event(series_id=series_id or None, **values)


def raise_violations(violations: List[Violation]) -> None:
    """Raise one error carrying every violation; duplicates alone keep their own type."""

    if not violations:
        return
    message = "\n".join(text for _, text in violations)
    if all(kind is DuplicateEventError for kind, _ in violations):
        raise DuplicateEventError(message)
    raise ValidationError(message)


@dataclass(frozen=True)
class EventDiff:
    removed: FrozenSet[Event] = field(default_factory=frozenset)
    added: FrozenSet[Event] = field(default_factory=frozenset)

    def apply(self, events: AbstractSet[Event]) -> FrozenSet[Event]:
        return frozenset((set(events) - self.removed) | self.added)

    @property
    def changed(self) -> int:
        return len(self.added)
