from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

import orjson

from .api import api_state, call_api
from .config import get_settings
from .domain import CalendarError, ValidationError
from .logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings().http
    parser = argparse.ArgumentParser(description="Calendar Engine command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the FastAPI server exposing calendar operations.")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    run_parser = subparsers.add_parser("run", help="Execute a JSON script of operations in one session.")
    run_parser.add_argument("script", type=Path, help="JSON list of {\"call\": ..., \"arguments\": {...}} steps.")

    return parser


def load_script(path: Path) -> List[dict]:
    try:
        steps = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise ValidationError(f"Script {path} is not valid JSON: {exc}") from exc
    if not isinstance(steps, list):
        raise ValidationError(f"Script {path} must contain a list of steps.")
    for index, step in enumerate(steps, start=1):
        if not isinstance(step, dict) or not isinstance(step.get("call"), str):
            raise ValidationError(f"Step {index} must be an object with a 'call' name.")
        if not isinstance(step.get("arguments", {}), dict):
            raise ValidationError(f"Step {index} arguments must be an object.")
    return steps


def _emit(payload: Any) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode() + "\n")


def run_script(steps: Sequence[dict]) -> int:
    """Run each step in order; stop at the first failure and return the exit code."""

    api_state.reset()
    for index, step in enumerate(steps, start=1):
        name = step["call"]
        try:
            result = call_api(name, **step.get("arguments", {}))
        except CalendarError as exc:
            logger.warning("Step %d (%s) failed: %s", index, name, exc)
            _emit({"step": index, "call": name, "error": type(exc).__name__, "message": str(exc)})
            return 1
        _emit({"step": index, "call": name, "result": result})
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()
    logger.info("Calendar Engine CLI starting")

    if args.command == "serve":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
        return 0
    if args.command == "run":
        try:
            steps = load_script(args.script)
        except (OSError, CalendarError) as exc:
            logger.error("Cannot load script %s: %s", args.script, exc)
            return 1
        return run_script(steps)
    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2


if __name__ == "__main__":
    sys.exit(main())
