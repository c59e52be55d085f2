from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..domain import CopyKind, CreateKind, EditScope, EventStatus, ExportFormat, QueryKind, ValidationError
from ..domain.requests import (
    CopyEventRequest,
    CreateEventRequest,
    EditEventRequest,
    ExportRequest,
    QueryEventRequest,
)
from .formatting import format_query_result
from .models import QueryResultPayload
from .registry import register_api
from .serializers import serialize_calendar, serialize_event, serialize_events
from .state import api_state

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


def _build_request(model: Type[RequestT], **fields: Any) -> RequestT:
    try:
        return model(**{key: value for key, value in fields.items() if value is not None})
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'request'}: {error['msg']}" for error in exc.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {problems}") from exc


def _parse_datetime(timestamp: str) -> datetime:
    try:
        return datetime.fromisoformat(timestamp)
    except ValueError as exc:
        raise ValidationError(f"Invalid timestamp: {timestamp}. Expected YYYY-MM-DDTHH:MM.") from exc


def _is_active(name: str) -> bool:
    return api_state.calendar.active_name == name


# Calendars -------------------------------------------------------------------


@register_api(
    "calendar_create",
    description="Create an empty calendar with a unique name and an IANA time zone.",
    category="calendars",
    tags=("write",),
)
def calendar_create(name: str, timezone: Optional[str] = None) -> Dict[str, Any]:
    calendar = api_state.calendar.create_calendar(name, timezone)
    return {"calendar": serialize_calendar(calendar, active=_is_active(calendar.name))}


@register_api(
    "calendar_use",
    description="Select the calendar that event operations act on.",
    category="calendars",
    tags=("write",),
)
def calendar_use(name: str) -> Dict[str, Any]:
    calendar = api_state.calendar.use_calendar(name)
    return {"calendar": serialize_calendar(calendar, active=True)}


@register_api(
    "calendar_edit",
    description="Rename a calendar or change its time zone.",
    category="calendars",
    tags=("write",),
)
def calendar_edit(name: str, property: str, value: str) -> Dict[str, Any]:
    calendar = api_state.calendar.edit_calendar(name, property, value)
    return {"calendar": serialize_calendar(calendar, active=_is_active(calendar.name))}


@register_api(
    "calendar_delete",
    description="Delete a calendar and all of its events.",
    category="calendars",
    tags=("write",),
)
def calendar_delete(name: str) -> Dict[str, Any]:
    removed = api_state.calendar.delete_calendar(name)
    return {"deleted": removed.name, "event_count": removed.event_count}


@register_api(
    "calendar_list",
    description="List every calendar with its time zone and event count.",
    category="calendars",
    tags=("read",),
)
def calendar_list() -> Dict[str, Any]:
    service = api_state.calendar
    calendars: List[Dict[str, Any]] = [
        serialize_calendar(service.get_calendar(name), active=_is_active(name)) for name in service.calendar_names()
    ]
    return {"calendars": calendars, "active": service.active_name}


@register_api(
    "calendar_timezone",
    description="Return the IANA time zone of a calendar.",
    category="calendars",
    tags=("read",),
)
def calendar_timezone(name: str) -> Dict[str, Any]:
    return {"name": name, "timezone": api_state.calendar.calendar_timezone(name)}


# Events ----------------------------------------------------------------------


@register_api(
    "event_create",
    description="Create a single, all-day or recurring event in the active calendar.",
    category="events",
    tags=("write",),
    choices={"kind": CreateKind, "status": EventStatus},
)
def event_create(
    *,
    kind: str,
    subject: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    on_date: Optional[str] = None,
    weekdays: Optional[str] = None,
    occurrences: Optional[int] = None,
    until: Optional[str] = None,
    description: str = "",
    location: str = "",
    status: Optional[str] = None,
) -> Dict[str, Any]:
    request = _build_request(
        CreateEventRequest,
        kind=kind,
        subject=subject,
        start=start,
        end=end,
        on_date=on_date,
        weekdays=weekdays,
        occurrences=occurrences,
        until=until,
        description=description,
        location=location,
        status=status,
    )
    created = api_state.calendar.create(request)
    return {"created": len(created), "events": serialize_events(created)}


@register_api(
    "event_edit",
    description="Change properties of one event, an event and its later occurrences, or a whole series.",
    category="events",
    tags=("write",),
    choices={"scope": EditScope},
)
def event_edit(
    *,
    scope: str,
    subject: str,
    start: str,
    changes: Dict[str, str],
    end: Optional[str] = None,
) -> Dict[str, Any]:
    request = _build_request(
        EditEventRequest,
        scope=scope,
        subject=subject,
        start=start,
        end=end,
        changes=changes,
    )
    api_state.calendar.edit(request)
    return {"edited": request.subject, "scope": request.scope.value}


@register_api(
    "event_copy",
    description="Copy one event, a day of events, or a range of days into another calendar.",
    category="events",
    tags=("write",),
    choices={"kind": CopyKind},
)
def event_copy(
    *,
    kind: str,
    target_calendar: str,
    subject: Optional[str] = None,
    source_start: Optional[str] = None,
    target_start: Optional[str] = None,
    source_date: Optional[str] = None,
    target_date: Optional[str] = None,
    interval_start: Optional[str] = None,
    interval_end: Optional[str] = None,
) -> Dict[str, Any]:
    request = _build_request(
        CopyEventRequest,
        kind=kind,
        target_calendar=target_calendar,
        subject=subject,
        source_start=source_start,
        target_start=target_start,
        source_date=source_date,
        target_date=target_date,
        interval_start=interval_start,
        interval_end=interval_end,
    )
    before = api_state.calendar.get_calendar(request.target_calendar).events
    updated = api_state.calendar.copy(request)
    return {"target_calendar": request.target_calendar, "events": serialize_events(updated - before)}


@register_api(
    "event_query",
    description="List events on a date or in a range, or report busy/available at an instant.",
    category="events",
    tags=("read",),
    choices={"kind": QueryKind},
)
def event_query(
    *,
    kind: str,
    on_date: Optional[str] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
    at: Optional[str] = None,
) -> Dict[str, Any]:
    request = _build_request(
        QueryEventRequest,
        kind=kind,
        on_date=on_date,
        range_start=range_start,
        range_end=range_end,
        at=at,
    )
    found = api_state.calendar.query(request)
    text = format_query_result(request.kind, found)
    payload = QueryResultPayload(
        kind=request.kind.value,
        events=serialize_events(found),
        text=text,
        status=text if request.kind is QueryKind.STATUS_AT else None,
    )
    return payload.model_dump()


@register_api(
    "event_delete",
    description="Remove one event identified by subject, start and end.",
    category="events",
    tags=("write",),
)
def event_delete(subject: str, start: str, end: str) -> Dict[str, Any]:
    removed = api_state.calendar.delete_event(subject, _parse_datetime(start), _parse_datetime(end))
    return {"deleted": serialize_event(removed)}


# Export ----------------------------------------------------------------------


@register_api(
    "calendar_export",
    description="Write the active calendar to a CSV or iCalendar file.",
    category="export",
    tags=("file",),
    choices={"format": ExportFormat},
)
def calendar_export(filename: str, format: Optional[str] = None) -> Dict[str, Any]:
    request = _build_request(ExportRequest, filename=filename, format=format)
    path = api_state.calendar.export(request)
    logger.debug("Export written to %s", path)
    return {"path": str(path)}
