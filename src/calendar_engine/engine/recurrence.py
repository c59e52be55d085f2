from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import AbstractSet, Any, List, Optional
from uuid import uuid4

from ..domain import Event, ValidationError
from .timeutil import at_time, spans_single_day

logger = logging.getLogger(__name__)

_SEARCH_WINDOW_DAYS = 7


def new_series_id() -> str:
    return str(uuid4())


def first_matching_day(anchor: date, weekdays: AbstractSet[int]) -> date:
    candidate = anchor
    for _ in range(_SEARCH_WINDOW_DAYS):
        if candidate.weekday() in weekdays:
            return candidate
        candidate += timedelta(days=1)
    raise ValidationError("No requested weekday found within a week of the start date.")


def expand_occurrences(
    subject: str,
    start: datetime,
    end: datetime,
    weekdays: AbstractSet[int],
    *,
    count: Optional[int] = None,
    until: Optional[date] = None,
    **payload: Any,
) -> List[Event]:
    """Expand one anchor occurrence into a chronologically ordered series.

    ``start``/``end`` carry the time-of-day and zone of every occurrence; only
    their date is advanced. Exactly one of ``count`` or ``until`` terminates the
    scan, ``until`` being inclusive. Every occurrence shares one fresh series id.
    """

    if not weekdays:
        raise ValidationError("At least one weekday is required for a recurring event.")
    if (count is None) == (until is None):
        raise ValidationError("A recurring event needs exactly one of a repeat count or an until date.")
    if start >= end:
        raise ValidationError(
            f"Event end time ({end.isoformat()}) must be after its start time ({start.isoformat()})."
        )
    if not spans_single_day(start, end):
        raise ValidationError("Recurring events must start and end on the same day.")
    if count is not None and count < 1:
        raise ValidationError(f"Repeat count must be at least 1, got {count}.")
    if until is not None and until < start.date():
        raise ValidationError(
            f"The until date {until.isoformat()} cannot be before the start date {start.date().isoformat()}."
        )

    zone = start.tzinfo
    start_time = start.time()
    end_time = end.time()
    series_id = new_series_id()

    occurrences: List[Event] = []
    day = first_matching_day(start.date(), weekdays)
    while True:
        if count is not None and len(occurrences) >= count:
            break
        if until is not None and day > until:
            break
        if day.weekday() in weekdays:
            occurrences.append(
                Event(
                    subject=subject,
                    start=at_time(day, start_time, zone),
                    end=at_time(day, end_time, zone),
                    series_id=series_id,
                    **payload,
                )
            )
        day += timedelta(days=1)

    if not occurrences:
        raise ValidationError(
            f"No occurrences of '{subject}' fall between {start.date().isoformat()} and {until}."
        )
    logger.debug("Expanded '%s' into %d occurrences (series %s)", subject, len(occurrences), series_id)
    return occurrences
