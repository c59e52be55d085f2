from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import Calendar, Event


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    start: str
    end: str
    series_id: Optional[str] = Field(default=None)
    description: str = Field(default="")
    location: str = Field(default="")
    status: str

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(**event.to_record())


class CalendarPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    timezone: str
    event_count: int
    active: bool = Field(default=False)

    @classmethod
    def from_domain(cls, calendar: Calendar, *, active: bool = False) -> "CalendarPayload":
        return cls(
            name=calendar.name,
            timezone=calendar.timezone_name,
            event_count=calendar.event_count,
            active=active,
        )


class QueryResultPayload(BaseModel):
    kind: str
    events: List[EventPayload] = Field(default_factory=list)
    text: str
    status: Optional[str] = Field(default=None)
