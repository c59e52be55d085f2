from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from calendar_engine.domain import Calendar, CopyKind, DuplicateEventError, Event, NotFoundError, ValidationError
from calendar_engine.domain.requests import CopyEventRequest
from calendar_engine.engine import COPY_STRATEGIES, copy_events, expand_occurrences

NY = ZoneInfo("America/New_York")
LA = ZoneInfo("America/Los_Angeles")
UTC = ZoneInfo("UTC")


def ny(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=NY)


def la(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=LA)


@pytest.fixture
def source():
    return Calendar(
        "Work",
        NY,
        frozenset(
            {
                Event("Review", ny(2024, 5, 6, 10), ny(2024, 5, 6, 11, 30), location="Room 1"),
                Event("Lunch", ny(2024, 5, 6, 13), ny(2024, 5, 6, 14)),
                Event("Planning", ny(2024, 5, 8, 9), ny(2024, 5, 8, 10)),
                Event("Retro", ny(2024, 5, 10, 15), ny(2024, 5, 10, 16)),
            }
        ),
    )


@pytest.fixture
def target():
    return Calendar("Home", LA)


def test_every_kind_has_a_strategy():
    assert set(COPY_STRATEGIES) == set(CopyKind)


class TestCopyEvent:
    def test_target_time_read_in_target_zone(self, source, target):
        request = CopyEventRequest(
            kind="event",
            target_calendar="Home",
            subject="Review",
            source_start=datetime(2024, 5, 6, 10),
            target_start=datetime(2024, 5, 9, 14),
        )
        updated = copy_events(request, source, target)
        (copied,) = updated
        assert copied.start == la(2024, 5, 9, 14)
        assert copied.end == la(2024, 5, 9, 15, 30)
        assert copied.location == "Room 1"
        assert target.event_count == 0

    def test_missing_event_names_calendar(self, source, target):
        request = CopyEventRequest(
            kind="event",
            target_calendar="Home",
            subject="Review",
            source_start=datetime(2024, 5, 7, 10),
            target_start=datetime(2024, 5, 9, 14),
        )
        with pytest.raises(NotFoundError, match="Work"):
            copy_events(request, source, target)

    def test_same_calendar_same_time_is_duplicate(self, source):
        request = CopyEventRequest(
            kind="event",
            target_calendar="Work",
            subject="Review",
            source_start=datetime(2024, 5, 6, 10),
            target_start=datetime(2024, 5, 6, 10),
        )
        with pytest.raises(DuplicateEventError):
            copy_events(request, source, source)

    def test_series_member_gets_new_series(self, target):
        members = expand_occurrences("Standup", ny(2024, 5, 6, 10), ny(2024, 5, 6, 11), {0}, count=2)
        source = Calendar("Work", NY, frozenset(members))
        request = CopyEventRequest(
            kind="event",
            target_calendar="Home",
            subject="Standup",
            source_start=datetime(2024, 5, 6, 10),
            target_start=datetime(2024, 5, 20, 8),
        )
        (copied,) = copy_events(request, source, target)
        assert copied.series_id
        assert copied.series_id != members[0].series_id


class TestCopyOnDate:
    def test_shift_keeps_instant_in_target_zone(self, source, target):
        request = CopyEventRequest(
            kind="on_date", target_calendar="Home", source_date=date(2024, 5, 6), target_date=date(2024, 5, 20)
        )
        updated = copy_events(request, source, target)
        assert sorted((event.subject, event.start) for event in updated) == [
            ("Lunch", la(2024, 5, 20, 10)),
            ("Review", la(2024, 5, 20, 7)),
        ]
        assert all(event.start.tzinfo is LA for event in updated)

    def test_overlapping_event_from_previous_day_selected(self, target):
        source = Calendar("Work", NY, frozenset({Event("Late", ny(2024, 5, 5, 23), ny(2024, 5, 6, 1))}))
        request = CopyEventRequest(
            kind="on_date", target_calendar="Home", source_date=date(2024, 5, 6), target_date=date(2024, 5, 7)
        )
        (copied,) = copy_events(request, source, target)
        assert copied.start == ny(2024, 5, 6, 23)
        assert copied.end == ny(2024, 5, 7, 1)

    def test_nothing_to_copy(self, source, target):
        request = CopyEventRequest(
            kind="on_date", target_calendar="Home", source_date=date(2024, 5, 7), target_date=date(2024, 5, 20)
        )
        with pytest.raises(NotFoundError):
            copy_events(request, source, target)


class TestCopyBetweenDates:
    def test_shift_anchored_on_interval_start(self, source, target):
        request = CopyEventRequest(
            kind="between_dates",
            target_calendar="Home",
            interval_start=date(2024, 5, 6),
            interval_end=date(2024, 5, 8),
            target_date=date(2024, 5, 13),
        )
        updated = copy_events(request, source, target)
        assert sorted(event.start.astimezone(NY).date() for event in updated) == [
            date(2024, 5, 13),
            date(2024, 5, 13),
            date(2024, 5, 15),
        ]
        assert "Retro" not in {event.subject for event in updated}

    def test_interval_must_be_ordered(self, source, target):
        request = CopyEventRequest(
            kind="between_dates",
            target_calendar="Home",
            interval_start=date(2024, 5, 8),
            interval_end=date(2024, 5, 6),
            target_date=date(2024, 5, 13),
        )
        with pytest.raises(ValidationError):
            copy_events(request, source, target)

    def test_series_copies_stay_grouped(self, target):
        members = expand_occurrences("Standup", ny(2024, 5, 6, 10), ny(2024, 5, 6, 11), {0, 2}, count=2)
        source = Calendar("Work", NY, frozenset(members))
        request = CopyEventRequest(
            kind="between_dates",
            target_calendar="Home",
            interval_start=date(2024, 5, 6),
            interval_end=date(2024, 5, 8),
            target_date=date(2024, 6, 3),
        )
        updated = copy_events(request, source, target)
        series = {event.series_id for event in updated}
        assert len(series) == 1
        assert members[0].series_id not in series

    def test_all_or_nothing(self, source):
        """One clash in the target rejects the whole batch."""
        target = Calendar("Home", NY, frozenset({Event("Lunch", ny(2024, 5, 13, 13), ny(2024, 5, 13, 14))}))
        request = CopyEventRequest(
            kind="between_dates",
            target_calendar="Home",
            interval_start=date(2024, 5, 6),
            interval_end=date(2024, 5, 8),
            target_date=date(2024, 5, 13),
        )
        with pytest.raises(DuplicateEventError):
            copy_events(request, source, target)
        assert target.event_count == 1

    def test_series_member_cannot_cross_midnight(self):
        members = expand_occurrences("Call", ny(2024, 5, 6, 19, 30), ny(2024, 5, 6, 20, 30), {0}, count=1)
        source = Calendar("Work", NY, frozenset(members))
        request = CopyEventRequest(
            kind="on_date", target_calendar="Utc", source_date=date(2024, 5, 6), target_date=date(2024, 5, 7)
        )
        with pytest.raises(ValidationError, match="span"):
            copy_events(request, source, Calendar("Utc", UTC))
