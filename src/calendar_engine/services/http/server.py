from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from hypercorn.asyncio import serve
from hypercorn.config import Config
from pydantic import BaseModel, Field

from ...api import call_api, get_api_functions
from ...domain import CalendarError, DuplicateEventError, NamingConflictError, NotFoundError
from ...logging import configure_logging

logger = logging.getLogger(__name__)

ERROR_STATUS: Dict[Type[CalendarError], int] = {
    NotFoundError: 404,
    DuplicateEventError: 409,
    NamingConflictError: 409,
}

app = FastAPI(title="Calendar Engine API", version="0.1.0")


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def status_for(exc: CalendarError) -> int:
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS:
            return ERROR_STATUS[kind]
    return 400


@app.exception_handler(CalendarError)
async def calendar_error_handler(request: Request, exc: CalendarError) -> JSONResponse:
    logger.warning("%s rejected: %s", request.url.path, exc)
    return JSONResponse({"detail": str(exc), "error": type(exc).__name__}, status_code=status_for(exc))


@app.get("/api/functions")
async def list_api_functions() -> Dict[str, Any]:
    return {"functions": [api_function.describe() for api_function in get_api_functions()]}


@app.post("/api/functions/{function_name}")
async def invoke_api_function(function_name: str, payload: ApiCallRequest) -> Dict[str, Any]:
    result = call_api(function_name, **payload.arguments)
    logger.debug("Operation %s completed", function_name)
    return {"name": function_name, "result": result}


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    configure_logging()
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving calendar operations on %s:%d", host, port)
    asyncio.run(serve(app, config))
