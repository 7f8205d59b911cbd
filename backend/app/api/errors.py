"""Exception handlers shared by every router."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}
# Raw inputs and pydantic context objects are not echoed back.
_DROPPED_KEYS = {"ctx", "url", "input"}


def _field_path(loc: tuple[Any, ...] | list[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def invalid_input(errors: list[dict[str, Any]]) -> dict[str, Any]:
    fields: list[str] = []
    for error in errors:
        path = _field_path(error.get("loc", ()))
        if path and path not in fields:
            fields.append(path)
    return {"kind": "invalid_input", "fields": fields, "errors": errors}


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(
        [{key: value for key, value in error.items() if key not in _DROPPED_KEYS} for error in exc.errors()]
    )
    logger.warning("Rejected %s %s: invalid input", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": invalid_input(errors)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = ["invalid_input", "register_exception_handlers"]
