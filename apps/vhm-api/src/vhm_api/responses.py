"""Mapping of core results and errors onto HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from vhm_common import FailureKind, SyncResult

from vhm.errors import (
    PersistenceError,
    SiteConflictError,
    SiteNotFoundError,
    SiteValidationError,
    VhmError,
)


def result_body(result: SyncResult) -> dict[str, Any]:
    body = result.model_dump(mode="json", by_alias=True, exclude={"outcomes"})
    body["success"] = not result.failed
    return body


def result_response(result: SyncResult) -> JSONResponse:
    """200 for ok/warning, 409 for a config collision, 500 for other failures."""
    if not result.failed:
        return JSONResponse(result_body(result))
    code = 409 if result.failure_kind is FailureKind.COLLISION else 500
    return JSONResponse(result_body(result), status_code=code)


_STATUS_CODES: list[tuple[type[VhmError], int]] = [
    (SiteValidationError, 400),
    (SiteNotFoundError, 404),
    (SiteConflictError, 409),
    (PersistenceError, 500),
]


async def vhm_error_handler(request: Request, exc: Exception) -> JSONResponse:
    code = next((status for cls, status in _STATUS_CODES if isinstance(exc, cls)), 500)
    body: dict[str, Any] = {"success": False, "error": str(exc)}
    if isinstance(exc, SiteValidationError):
        body["field"] = exc.field
    return JSONResponse(body, status_code=code)
