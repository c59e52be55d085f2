from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Calendar Engine"
APP_AUTHOR = "CalendarEngine"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))

DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
