from datetime import time
from pathlib import Path

import pytest

from calendar_engine.api import api_state
from calendar_engine.config import AppSettings, EngineSettings, ExportSettings, HttpSettings, LoggingSettings
from calendar_engine.domain import EventStatus
from calendar_engine.services import CalendarService, ServiceContext


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings(
        default_timezone="America/New_York",
        all_day_start=time(hour=8),
        all_day_end=time(hour=17),
        default_status=EventStatus.CONFIRMED,
    )


@pytest.fixture
def settings(engine_settings: EngineSettings, tmp_path: Path) -> AppSettings:
    return AppSettings(
        engine=engine_settings,
        logging=LoggingSettings(level="DEBUG", directory=tmp_path / "logs"),
        export=ExportSettings(directory=tmp_path / "exports"),
        http=HttpSettings(host="127.0.0.1", port=8000),
    )


@pytest.fixture
def service(settings: AppSettings) -> CalendarService:
    return CalendarService(ServiceContext(settings=settings))


@pytest.fixture
def work(service: CalendarService) -> CalendarService:
    """A service with an active 'Work' calendar in New York time."""
    service.create_calendar("Work", "America/New_York")
    service.use_calendar("Work")
    return service


@pytest.fixture
def api(settings: AppSettings):
    api_state.context = ServiceContext(settings=settings)
    api_state.reset()
    yield api_state
    api_state.reset()
