"""Scheduling strategies: recurrence expansion, duplicate guarding, create, edit, copy and query."""

from __future__ import annotations

from .changes import EDITABLE_PROPERTIES, EventDiff
from .copier import COPY_STRATEGIES, copy_events
from .create import CREATE_STRATEGIES, create_events
from .edit import EDIT_STRATEGIES, edit_events
from .guard import ensure_unique, would_duplicate
from .query import AVAILABLE, BUSY, QUERY_STRATEGIES, availability, chronological, query_events
from .recurrence import expand_occurrences

__all__ = [
    "AVAILABLE",
    "BUSY",
    "COPY_STRATEGIES",
    "CREATE_STRATEGIES",
    "EDITABLE_PROPERTIES",
    "EDIT_STRATEGIES",
    "EventDiff",
    "QUERY_STRATEGIES",
    "availability",
    "chronological",
    "copy_events",
    "create_events",
    "edit_events",
    "ensure_unique",
    "expand_occurrences",
    "query_events",
    "would_duplicate",
]
