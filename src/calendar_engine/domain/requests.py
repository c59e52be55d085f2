"""Structured requests accepted by the scheduling engine.

Each request carries a ``kind`` (or ``scope``) that selects the strategy; the
fields a strategy needs are checked with :meth:`require` when it runs, so one
model serves every strategy of its family.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import CopyKind, CreateKind, EditScope, EventStatus, ExportFormat, QueryKind
from .errors import ValidationError

_WEEKDAY_LETTERS = "MTWRFSU"


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def require(self, *names: str) -> None:
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            label = getattr(self, "kind", None) or getattr(self, "scope", None)
            raise ValidationError(
                f"Missing required field(s) for {_label(label)}: {', '.join(missing)}."
            )


def _label(value: Any) -> str:
    return getattr(value, "value", str(value))


class CreateEventRequest(_Request):
    kind: CreateKind
    subject: str = Field(min_length=1)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    on_date: Optional[date] = None
    weekdays: Optional[FrozenSet[int]] = None
    occurrences: Optional[int] = None
    until: Optional[date] = None
    description: str = ""
    location: str = ""
    status: Optional[EventStatus] = None

    @field_validator("weekdays", mode="before")
    @classmethod
    def _letters_to_weekdays(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        cleaned = value.strip().upper()
        unknown = sorted({letter for letter in cleaned if letter not in _WEEKDAY_LETTERS})
        if unknown:
            raise ValueError(f"unknown weekday letter(s) {', '.join(unknown)}; use letters from MTWRFSU")
        return frozenset(_WEEKDAY_LETTERS.index(letter) for letter in cleaned)


class EditEventRequest(_Request):
    scope: EditScope
    subject: str = Field(min_length=1)
    start: datetime
    end: Optional[datetime] = None
    changes: Dict[str, str] = Field(min_length=1)

    @field_validator("changes")
    @classmethod
    def _normalize_property_names(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {name.strip().lower(): new_value for name, new_value in value.items()}


class CopyEventRequest(_Request):
    kind: CopyKind
    target_calendar: str = Field(min_length=1)
    subject: Optional[str] = None
    source_start: Optional[datetime] = None
    target_start: Optional[datetime] = None
    source_date: Optional[date] = None
    target_date: Optional[date] = None
    interval_start: Optional[date] = None
    interval_end: Optional[date] = None


class QueryEventRequest(_Request):
    kind: QueryKind
    on_date: Optional[date] = None
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None
    at: Optional[datetime] = None


class ExportRequest(_Request):
    filename: str = Field(min_length=1)
    format: Optional[ExportFormat] = None


__all__ = [
    "CopyEventRequest",
    "CreateEventRequest",
    "EditEventRequest",
    "ExportRequest",
    "QueryEventRequest",
]
