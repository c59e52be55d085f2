"""Application services orchestrating the calendar store and the scheduling engine."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext

__all__ = ["CalendarService", "ServiceContext"]
