"""Domain models for calendar scheduling."""

from __future__ import annotations

from .enums import CopyKind, CreateKind, EditScope, EventStatus, ExportFormat, QueryKind
from .errors import (
    CalendarError,
    DuplicateEventError,
    NamingConflictError,
    NotFoundError,
    UnsupportedOperationError,
    ValidationError,
)
from .models import Calendar, Event

__all__ = [
    "Calendar",
    "CalendarError",
    "CopyKind",
    "CreateKind",
    "DuplicateEventError",
    "EditScope",
    "Event",
    "EventStatus",
    "ExportFormat",
    "NamingConflictError",
    "NotFoundError",
    "QueryKind",
    "UnsupportedOperationError",
    "ValidationError",
]
