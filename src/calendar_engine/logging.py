from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import LoggingSettings, get_settings
from .core import DATA_DIR, ensure_data_dir

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILENAME = "calendar_engine.log"

_configured = False


def default_log_path(settings: LoggingSettings) -> Path:
    if settings.directory is not None:
        return settings.directory / LOG_FILENAME
    ensure_data_dir()
    return DATA_DIR / LOG_FILENAME


def configure_logging(level: Optional[str] = None, *, log_path: Optional[Path] = None) -> None:
    """Attach console and rotating file handlers to the root logger, once per process."""

    global _configured
    if _configured:
        return

    settings = get_settings().logging
    path = log_path or default_log_path(settings)
    path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: List[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(str(path), maxBytes=1_000_000, backupCount=5, encoding="utf-8"),
    ]

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.level).upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    _configured = True
    logging.getLogger(__name__).debug("Logging to %s", path)


__all__ = ["LOG_FORMAT", "configure_logging", "default_log_path"]
