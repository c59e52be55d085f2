from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from ..domain import Event

CSV_HEADER = ["Subject", "Start Date", "Start Time", "End Date", "End Time", "Description", "Location", "Status"]
GOOGLE_DATE_FORMAT = "%m/%d/%Y"
GOOGLE_TIME_FORMAT = "%I:%M %p"


def event_row(event: Event) -> list[str]:
    return [
        event.subject,
        event.start.strftime(GOOGLE_DATE_FORMAT),
        event.start.strftime(GOOGLE_TIME_FORMAT),
        event.end.strftime(GOOGLE_DATE_FORMAT),
        event.end.strftime(GOOGLE_TIME_FORMAT),
        event.description,
        event.location,
        event.status.value,
    ]


def export_csv(events: Iterable[Event], path: Path) -> Path:
    """Write events in the layout Google Calendar imports."""

    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for event in events:
            writer.writerow(event_row(event))
    return path.resolve()
