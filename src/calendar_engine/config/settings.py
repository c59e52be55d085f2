from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from ..domain import EventStatus

load_dotenv()


@dataclass(frozen=True)
class EngineSettings:
    default_timezone: str
    all_day_start: time
    all_day_end: time
    default_status: EventStatus


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Optional[Path]


@dataclass(frozen=True)
class ExportSettings:
    directory: Path


@dataclass(frozen=True)
class HttpSettings:
    host: str
    port: int


@dataclass(frozen=True)
class AppSettings:
    engine: EngineSettings
    logging: LoggingSettings
    export: ExportSettings
    http: HttpSettings


def _time_from_env(name: str, default: time) -> time:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return time.fromisoformat(raw)
    except ValueError:
        return default


def _timezone_from_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        return default
    return raw


def _status_from_env(name: str, default: EventStatus) -> EventStatus:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return EventStatus(raw.lower())
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    all_day_start = _time_from_env("CALENDAR_ALL_DAY_START", time(hour=8))
    all_day_end = _time_from_env("CALENDAR_ALL_DAY_END", time(hour=17))
    if all_day_end <= all_day_start:
        all_day_start, all_day_end = time(hour=8), time(hour=17)

    engine = EngineSettings(
        default_timezone=_timezone_from_env("CALENDAR_DEFAULT_TIMEZONE", "UTC"),
        all_day_start=all_day_start,
        all_day_end=all_day_end,
        default_status=_status_from_env("CALENDAR_DEFAULT_STATUS", EventStatus.CONFIRMED),
    )

    log_dir = os.getenv("CALENDAR_LOG_DIR")
    logging_settings = LoggingSettings(
        level=os.getenv("CALENDAR_LOG_LEVEL", "INFO").upper(),
        directory=Path(log_dir) if log_dir else None,
    )

    export = ExportSettings(directory=Path(os.getenv("CALENDAR_EXPORT_DIR") or Path.cwd()))

    http = HttpSettings(
        host=os.getenv("CALENDAR_HTTP_HOST", "127.0.0.1"),
        port=_int_from_env("CALENDAR_HTTP_PORT", 8000),
    )

    return AppSettings(engine=engine, logging=logging_settings, export=export, http=http)
