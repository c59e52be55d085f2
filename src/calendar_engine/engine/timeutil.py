from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.config import DATETIME_FORMAT
from ..domain import ValidationError


def resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Invalid time zone '{name}'.") from exc


def parse_local_datetime(value: str, zone: tzinfo) -> datetime:
    try:
        floating = datetime.strptime(value.strip(), DATETIME_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"Invalid date-time '{value}'; expected YYYY-MM-DDTHH:MM.") from exc
    return floating.replace(tzinfo=zone)


def localize(value: datetime, zone: tzinfo) -> datetime:
    """Attach ``zone`` to a naive datetime or convert an aware one into it."""

    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def at_time(day: date, moment: time, zone: tzinfo) -> datetime:
    return datetime.combine(day, moment, tzinfo=zone)


def day_window(day: date, zone: tzinfo) -> Tuple[datetime, datetime]:
    """Half-open ``[midnight, next midnight)`` for ``day`` in ``zone``."""

    return at_time(day, time.min, zone), at_time(day + timedelta(days=1), time.min, zone)


def shift_exact(value: datetime, delta: timedelta) -> datetime:
    """Add an absolute duration, keeping the original zone for display."""

    zone = value.tzinfo
    return (value.astimezone(timezone.utc) + delta).astimezone(zone)


def shift_days(value: datetime, days: int) -> datetime:
    """Move by whole calendar days keeping the wall-clock time."""

    return value + timedelta(days=days)


def elapsed(start: datetime, end: datetime) -> timedelta:
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def spans_single_day(start: datetime, end: datetime) -> bool:
    return start.date() == end.date()


def wall_delta(old: datetime, new: datetime) -> timedelta:
    """Wall-clock difference between ``old`` and ``new`` read in ``old``'s zone."""

    moved = new.astimezone(old.tzinfo)
    return moved.replace(tzinfo=None) - old.replace(tzinfo=None)
