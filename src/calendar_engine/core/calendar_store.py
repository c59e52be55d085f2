from __future__ import annotations

import logging
from typing import Callable, Dict, List

from ..domain import Calendar, NamingConflictError, NotFoundError

logger = logging.getLogger(__name__)


class CalendarStore:
    """In-memory registry of calendars keyed by name.

    Calendars are immutable values; :meth:`mutate` swaps in the calendar
    returned by a callback, so a callback that raises leaves the store as it
    was.
    """

    def __init__(self) -> None:
        self._calendars: Dict[str, Calendar] = {}

    def get(self, name: str) -> Calendar:
        calendar = self._calendars.get(name)
        if calendar is None:
            raise NotFoundError(f"Calendar '{name}' not found.")
        return calendar

    def names(self) -> List[str]:
        return sorted(self._calendars)

    def add(self, calendar: Calendar) -> Calendar:
        if calendar.name in self._calendars:
            raise NamingConflictError(f"A calendar with the name '{calendar.name}' already exists.")
        self._calendars[calendar.name] = calendar
        return calendar

    def delete(self, name: str) -> Calendar:
        calendar = self.get(name)
        del self._calendars[name]
        return calendar

    def mutate(self, name: str, callback: Callable[[Calendar], Calendar]) -> Calendar:
        current = self.get(name)
        updated = callback(current)
        if updated.name != name:
            if updated.name in self._calendars:
                raise NamingConflictError(f"A calendar with the name '{updated.name}' already exists.")
            del self._calendars[name]
        self._calendars[updated.name] = updated
        logger.debug("Calendar '%s' now holds %d event(s)", updated.name, updated.event_count)
        return updated


__all__ = ["CalendarStore"]
