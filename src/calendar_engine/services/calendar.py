from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, List, Optional

from ..domain import Calendar, Event, NotFoundError, QueryKind, UnsupportedOperationError, ValidationError
from ..domain.requests import (
    CopyEventRequest,
    CreateEventRequest,
    EditEventRequest,
    ExportRequest,
    QueryEventRequest,
)
from ..engine import availability, copy_events, create_events, edit_events, query_events
from ..engine.edit import find_exact
from ..engine.timeutil import localize, resolve_zone
from ..export import export_events
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    """Resolves the active/target calendars, runs a strategy and commits its result."""

    context: ServiceContext
    active_name: Optional[str] = None

    # Calendar bookkeeping -------------------------------------------------
    def create_calendar(self, name: str, timezone: Optional[str] = None) -> Calendar:
        if not name or not name.strip():
            raise ValidationError("Calendar name must not be empty.")
        zone = resolve_zone(timezone or self.context.settings.engine.default_timezone)
        calendar = self.context.store.add(Calendar(name=name, timezone=zone))
        logger.info("Created calendar '%s' (%s)", name, calendar.timezone_name)
        return calendar

    def use_calendar(self, name: str) -> Calendar:
        calendar = self.context.store.get(name)
        self.active_name = name
        logger.info("Active calendar is now '%s'", name)
        return calendar

    def edit_calendar(self, name: str, prop: str, value: str) -> Calendar:
        key = prop.strip().lower()
        if key == "name":
            if not value or not value.strip():
                raise ValidationError("Calendar name must not be empty.")
            updated = self.context.store.mutate(name, lambda calendar: calendar.renamed(value))
            if self.active_name == name:
                self.active_name = value
            logger.info("Renamed calendar '%s' to '%s'", name, value)
            return updated
        if key == "timezone":
            zone = resolve_zone(value)
            updated = self.context.store.mutate(name, lambda calendar: calendar.with_timezone(zone))
            logger.info("Calendar '%s' now uses time zone %s", name, value)
            return updated
        raise UnsupportedOperationError(f"Unknown calendar property: {prop}")

    def delete_calendar(self, name: str) -> Calendar:
        removed = self.context.store.delete(name)
        if self.active_name == name:
            self.active_name = None
        logger.info("Deleted calendar '%s' with %d event(s)", name, removed.event_count)
        return removed

    def calendar_names(self) -> List[str]:
        return self.context.store.names()

    def get_calendar(self, name: str) -> Calendar:
        return self.context.store.get(name)

    def calendar_timezone(self, name: str) -> str:
        return self.context.store.get(name).timezone_name

    @property
    def active_calendar(self) -> Calendar:
        if self.active_name is None:
            raise NotFoundError("No calendar is currently selected.")
        return self.context.store.get(self.active_name)

    # Event operations -----------------------------------------------------
    def create(self, request: CreateEventRequest) -> FrozenSet[Event]:
        calendar = self.active_calendar
        created = create_events(request, calendar.events, calendar.timezone, self.context.settings.engine)
        self.context.store.mutate(calendar.name, lambda current: current.with_events(current.events | created))
        logger.info("Created %d event(s) '%s' in '%s'", len(created), request.subject, calendar.name)
        return created

    def edit(self, request: EditEventRequest) -> None:
        calendar = self.active_calendar
        diff = edit_events(request, calendar.events, calendar.timezone)
        self.context.store.mutate(calendar.name, lambda current: current.with_events(diff.apply(current.events)))
        logger.info(
            "Edited %d event(s) '%s' in '%s' (%s scope)",
            diff.changed,
            request.subject,
            calendar.name,
            request.scope.value,
        )

    def copy(self, request: CopyEventRequest) -> FrozenSet[Event]:
        source = self.active_calendar
        target = self.context.store.get(request.target_calendar)
        added = copy_events(request, source, target) - target.events
        committed = self.context.store.mutate(target.name, lambda current: current.with_events(current.events | added))
        logger.info("Copied %d event(s) from '%s' to '%s'", len(added), source.name, target.name)
        return committed.events

    def query(self, request: QueryEventRequest) -> FrozenSet[Event]:
        calendar = self.active_calendar
        return query_events(request, calendar.events, calendar.timezone)

    def status_at(self, instant: datetime) -> str:
        return availability(self.query(QueryEventRequest(kind=QueryKind.STATUS_AT, at=instant)))

    def delete_event(self, subject: str, start: datetime, end: datetime) -> Event:
        calendar = self.active_calendar
        target = find_exact(
            calendar.events, subject, localize(start, calendar.timezone), localize(end, calendar.timezone)
        )
        self.context.store.mutate(calendar.name, lambda current: current.with_events(current.events - {target}))
        logger.info("Deleted event %s from '%s'", target.describe(), calendar.name)
        return target

    def export(self, request: ExportRequest) -> Path:
        calendar = self.active_calendar
        return export_events(
            calendar.events,
            request.filename,
            fmt=request.format,
            directory=self.context.settings.export.directory,
        )
