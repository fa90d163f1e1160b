"""
Exception handlers producing the response envelope.

Every response of the API has the shape ``{"success": bool, "result":
...}``.  Route handlers build successful envelopes themselves; the
handlers below turn the three kinds of failure into envelopes:

* request validation errors (HTTP 400, ``result.errors``),
* ``HTTPException`` raised by routes or by routing itself
  (``result.error`` with the exception's detail),
* ``sqlite3.Error`` escaping the service layer (HTTP 500,
  ``result.error`` with the driver's message).
"""

import logging
import sqlite3
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# Messages keyed by the name of the offending body field or path
# parameter.  Anything else falls back to pydantic's message.
FIELD_MESSAGES: Dict[str, str] = {
    "full_name": "Full name must be a non-empty string",
    "role": "Role must be a non-empty string",
    "efficiency": "Efficiency must be a number between 0 and 100",
}

PATH_MESSAGES: Dict[str, str] = {
    "user_id": "ID must be an integer",
}

MISSING_MESSAGES: Dict[str, str] = {
    "full_name": "Full name is required",
    "role": "Role is required",
    "efficiency": "Efficiency is required",
}


def envelope(success: bool, result: Any = None) -> Dict[str, Any]:
    """Build the response envelope; ``result`` is omitted when ``None``."""
    body: Dict[str, Any] = {"success": success}
    if result is not None:
        body["result"] = result
    return body


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(False, {"error": message}),
    )


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``{location, field, message}`` items."""
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        location = loc[0] if loc else "body"
        field = loc[-1] if len(loc) > 1 else location
        if error.get("type") == "missing" and field in MISSING_MESSAGES:
            message = MISSING_MESSAGES[field]
        elif error.get("type") == "json_invalid":
            field = "body"
            message = "Request body must be valid JSON"
        else:
            messages = PATH_MESSAGES if location == "path" else FIELD_MESSAGES
            message = messages.get(field, error.get("msg", "Invalid value"))
        formatted.append({"location": location, "field": field, "message": message})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope(False, {"errors": format_validation_errors(exc.errors())}),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def store_exception_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(sqlite3.Error, store_exception_handler)
