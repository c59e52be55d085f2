from __future__ import annotations

from dataclasses import dataclass, field

from ..services import CalendarService, ServiceContext


@dataclass(slots=True)
class ApiState:
    context: ServiceContext = field(default_factory=ServiceContext)
    calendar: CalendarService = field(init=False)

    def __post_init__(self) -> None:
        self.calendar = CalendarService(self.context)

    def reset(self) -> None:
        """Start a fresh in-memory session."""

        self.context = ServiceContext(settings=self.context.settings)
        self.calendar = CalendarService(self.context)


api_state = ApiState()
