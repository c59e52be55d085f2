import orjson
import pytest

from calendar_engine.cli import build_parser, load_script, run_script
from calendar_engine.domain import ValidationError


def write_script(tmp_path, steps):
    path = tmp_path / "script.json"
    path.write_bytes(orjson.dumps(steps))
    return path


class TestParser:
    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve", "--port", "9000"])
        assert (args.command, args.port) == ("serve", 9000)

    def test_run_takes_script(self, tmp_path):
        args = build_parser().parse_args(["run", str(tmp_path / "steps.json")])
        assert args.script.name == "steps.json"


class TestScripts:
    def test_load_rejects_non_list(self, tmp_path):
        with pytest.raises(ValidationError):
            load_script(write_script(tmp_path, {"call": "calendar_list"}))

    def test_load_rejects_step_without_call(self, tmp_path):
        with pytest.raises(ValidationError, match="Step 2"):
            load_script(write_script(tmp_path, [{"call": "calendar_list"}, {"arguments": {}}]))

    def test_run_prints_each_result(self, api, tmp_path, capsys):
        steps = load_script(
            write_script(
                tmp_path,
                [
                    {"call": "calendar_create", "arguments": {"name": "Work", "timezone": "UTC"}},
                    {"call": "calendar_use", "arguments": {"name": "Work"}},
                    {
                        "call": "event_create",
                        "arguments": {
                            "kind": "single",
                            "subject": "Lunch",
                            "start": "2024-05-06T12:00",
                            "end": "2024-05-06T13:00",
                        },
                    },
                    {"call": "event_query", "arguments": {"kind": "status_at", "at": "2024-05-06T12:30"}},
                ],
            )
        )
        assert run_script(steps) == 0
        output = capsys.readouterr().out
        assert '"step": 4' in output
        assert '"status": "busy"' in output

    def test_run_stops_at_first_failure(self, api, capsys):
        steps = [
            {"call": "calendar_create", "arguments": {"name": "Work"}},
            {"call": "calendar_create", "arguments": {"name": "Work"}},
            {"call": "calendar_list"},
        ]
        assert run_script(steps) == 1
        output = capsys.readouterr().out
        assert "NamingConflictError" in output
        assert '"step": 3' not in output
