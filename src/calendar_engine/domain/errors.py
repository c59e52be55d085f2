from __future__ import annotations


class CalendarError(ValueError):
    """Base class for every failure surfaced by the scheduling engine."""


class NotFoundError(CalendarError):
    """Raised when a calendar or event lookup fails."""


class ValidationError(CalendarError):
    """Raised when a request or a proposed event breaks a temporal rule."""


class DuplicateEventError(CalendarError):
    """Raised when a candidate event collides with an existing or pending one."""


class NamingConflictError(CalendarError):
    """Raised when a calendar name is already taken."""


class UnsupportedOperationError(CalendarError):
    """Raised for unknown property names, request kinds or export formats."""


__all__ = [
    "CalendarError",
    "DuplicateEventError",
    "NamingConflictError",
    "NotFoundError",
    "UnsupportedOperationError",
    "ValidationError",
]
