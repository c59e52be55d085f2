"""File exporters. Each takes a collection of events and a path and returns the written file's path."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from ..domain import Event, ExportFormat, UnsupportedOperationError
from .csv_exporter import export_csv
from .ical_exporter import export_ical

logger = logging.getLogger(__name__)

Exporter = Callable[[Iterable[Event], Path], Path]

EXPORTERS: Dict[ExportFormat, Exporter] = {
    ExportFormat.CSV: export_csv,
    ExportFormat.ICAL: export_ical,
}

_EXTENSIONS = {
    ".csv": ExportFormat.CSV,
    ".ics": ExportFormat.ICAL,
    ".ical": ExportFormat.ICAL,
}


def infer_format(filename: str) -> ExportFormat:
    suffix = Path(filename).suffix.lower()
    if suffix not in _EXTENSIONS:
        raise UnsupportedOperationError(
            f"Cannot infer an export format from '{filename}'. Use a .csv or .ics file name."
        )
    return _EXTENSIONS[suffix]


def export_events(
    events: Iterable[Event],
    filename: str,
    *,
    fmt: Optional[ExportFormat] = None,
    directory: Optional[Path] = None,
) -> Path:
    chosen = fmt or infer_format(filename)
    path = Path(filename)
    if not path.is_absolute() and directory is not None:
        path = directory / path
    path.parent.mkdir(parents=True, exist_ok=True)
    written = EXPORTERS[chosen](sorted(events, key=lambda item: item.start), path)
    logger.info("Exported events as %s to %s", chosen.value, written)
    return written


__all__ = ["EXPORTERS", "export_csv", "export_events", "export_ical", "infer_format"]
