import asyncio
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from calendar_engine.api import call_api, get_api_functions, register_api
from calendar_engine.api.registry import REGISTRY
from calendar_engine.domain import NotFoundError, ValidationError
from calendar_engine.services.http import app


@pytest.fixture
def client(api):
    return TestClient(app)


def open_work_calendar():
    call_api("calendar_create", name="Work", timezone="America/New_York")
    call_api("calendar_use", name="Work")


class TestRegistry:
    def test_operations_registered(self):
        names = {function.name for function in get_api_functions()}
        assert {
            "calendar_create",
            "calendar_use",
            "calendar_edit",
            "calendar_delete",
            "calendar_list",
            "calendar_timezone",
            "calendar_export",
            "event_create",
            "event_edit",
            "event_copy",
            "event_query",
            "event_delete",
        } <= names

    def test_parameter_schema_marks_required(self):
        (create,) = [function for function in get_api_functions() if function.name == "event_create"]
        schema = create.schema
        assert {"kind", "subject"} <= set(schema["required"])
        assert schema["properties"]["occurrences"]["type"] == "integer"
        assert "all_day_recurring_until" in schema["properties"]["kind"]["enum"]
        assert create.parameters["weekdays"] == "string"

    def test_operation_arguments_may_be_called_name(self, api):
        """Operations with a 'name' argument are reachable through call_api."""
        created = call_api("calendar_create", name="Work", timezone="UTC")
        assert created["calendar"]["name"] == "Work"
        assert call_api("calendar_timezone", name="Work") == {"name": "Work", "timezone": "UTC"}

    def test_unknown_operation(self, api):
        with pytest.raises(NotFoundError):
            call_api("calendar_explode")

    def test_bad_arguments(self, api):
        with pytest.raises(ValidationError):
            call_api("calendar_create", title="Work")


class TestCalls:
    def test_create_and_query(self, api):
        open_work_calendar()
        created = call_api(
            "event_create",
            kind="recurring_for",
            subject="Standup",
            start="2024-05-06T10:00",
            end="2024-05-06T10:15",
            weekdays="MW",
            occurrences=2,
            location="Room 1",
        )
        assert created["created"] == 2
        assert created["events"][0]["start"] == "2024-05-06T10:00:00-04:00"

        result = call_api("event_query", kind="on_date", on_date="2024-05-08")
        assert result["text"] == "Query results:\n- 1: Standup (from 10:00 to 10:15) at Room 1"
        assert result["status"] is None
        assert len(result["events"]) == 1

    def test_status_query(self, api):
        open_work_calendar()
        call_api("event_create", kind="single", subject="Lunch", start="2024-05-06T12:00", end="2024-05-06T13:00")
        assert call_api("event_query", kind="status_at", at="2024-05-06T12:00")["status"] == "busy"
        assert call_api("event_query", kind="status_at", at="2024-05-06T13:00")["status"] == "available"

    def test_invalid_request_fields(self, api):
        open_work_calendar()
        with pytest.raises(ValidationError, match="kind"):
            call_api("event_create", kind="weekly", subject="Lunch")

    def test_edit_copy_delete(self, api):
        open_work_calendar()
        call_api("calendar_create", name="Home", timezone="Europe/London")
        call_api("event_create", kind="single", subject="Lunch", start="2024-05-06T12:00", end="2024-05-06T13:00")
        call_api(
            "event_edit",
            scope="single",
            subject="Lunch",
            start="2024-05-06T12:00",
            end="2024-05-06T13:00",
            changes={"subject": "Brunch"},
        )
        copied = call_api(
            "event_copy",
            kind="event",
            target_calendar="Home",
            subject="Brunch",
            source_start="2024-05-06T12:00",
            target_start="2024-05-07T09:00",
        )
        assert copied["events"][0]["start"] == "2024-05-07T09:00:00+01:00"
        deleted = call_api("event_delete", subject="Brunch", start="2024-05-06T12:00", end="2024-05-06T13:00")
        assert deleted["deleted"]["subject"] == "Brunch"

        listing = call_api("calendar_list")
        assert listing["active"] == "Work"
        counts = {calendar["name"]: calendar["event_count"] for calendar in listing["calendars"]}
        assert counts == {"Home": 1, "Work": 0}

    def test_export(self, api, settings):
        open_work_calendar()
        call_api("event_create", kind="all_day", subject="Offsite", on_date="2024-05-06")
        result = call_api("calendar_export", filename="work.csv")
        assert result["path"].endswith("work.csv")
        assert (settings.export.directory / "work.csv").exists()


class TestHttp:
    def test_list_functions(self, client):
        response = client.get("/api/functions")
        assert response.status_code == 200
        names = {function["name"] for function in response.json()["functions"]}
        assert "event_create" in names

    def test_invoke(self, client):
        response = client.post(
            "/api/functions/calendar_create", json={"arguments": {"name": "Work", "timezone": "UTC"}}
        )
        assert response.status_code == 200
        assert response.json()["result"]["calendar"]["timezone"] == "UTC"

    @pytest.mark.parametrize(
        "name, arguments, status",
        [
            ("calendar_create", {"name": "Work"}, 409),
            ("calendar_use", {"name": "Nope"}, 404),
            ("calendar_create", {"name": "Other", "timezone": "Mars/Olympus"}, 400),
            ("calendar_edit", {"name": "Work", "property": "colour", "value": "red"}, 400),
            ("no_such_function", {}, 404),
        ],
    )
    def test_error_statuses(self, client, name, arguments, status):
        client.post("/api/functions/calendar_create", json={"arguments": {"name": "Work"}})
        response = client.post(f"/api/functions/{name}", json={"arguments": arguments})
        assert response.status_code == status
        assert response.json()["detail"]


@pytest.fixture
def slow_operation():
    calls = {"running": 0, "peak": 0}

    @register_api("slow_status", description="Hold the engine briefly.", category="testing")
    def slow_status():
        calls["running"] += 1
        calls["peak"] = max(calls["peak"], calls["running"])
        time.sleep(0.05)
        calls["running"] -= 1
        return {"status": "done"}

    yield calls
    REGISTRY.pop("slow_status", None)


class TestSerializedDispatch:
    def test_concurrent_requests_run_one_at_a_time(self, api, slow_operation):
        async def fire():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://engine") as client:
                return await asyncio.gather(
                    *(client.post("/api/functions/slow_status", json={"arguments": {}}) for _ in range(4))
                )

        responses = asyncio.run(fire())
        assert [response.status_code for response in responses] == [200] * 4
        assert slow_operation["peak"] == 1
