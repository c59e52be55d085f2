from __future__ import annotations

from enum import Enum


class EventStatus(str, Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class CreateKind(str, Enum):
    SINGLE = "single"
    RECURRING_FOR = "recurring_for"
    RECURRING_UNTIL = "recurring_until"
    ALL_DAY = "all_day"
    ALL_DAY_RECURRING_FOR = "all_day_recurring_for"
    ALL_DAY_RECURRING_UNTIL = "all_day_recurring_until"


class EditScope(str, Enum):
    SINGLE = "single"
    FORWARD = "forward"
    SERIES = "series"


class CopyKind(str, Enum):
    EVENT = "event"
    ON_DATE = "on_date"
    BETWEEN_DATES = "between_dates"


class QueryKind(str, Enum):
    ON_DATE = "on_date"
    IN_RANGE = "in_range"
    STATUS_AT = "status_at"


class ExportFormat(str, Enum):
    CSV = "csv"
    ICAL = "ical"
