"""Core constants and the in-memory calendar store."""

from .calendar_store import CalendarStore
from .config import APP_NAME, DATA_DIR, DATE_FORMAT, DATETIME_FORMAT, TIME_FORMAT, ensure_data_dir

__all__ = [
    "APP_NAME",
    "CalendarStore",
    "DATA_DIR",
    "DATE_FORMAT",
    "DATETIME_FORMAT",
    "TIME_FORMAT",
    "ensure_data_dir",
]
