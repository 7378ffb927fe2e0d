from __future__ import annotations

from typing import Any, Optional

from fastapi.responses import JSONResponse

from .observability import now_iso


class AppError(Exception):
    status_code = 500
    error_type = "internal_server_error"

    def __init__(self, message: str, *, error_type: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        if error_type is not None:
            self.error_type = error_type
        self.details = details


class ValidationError(AppError):
    status_code = 400
    error_type = "validation_error"


class NotFound(AppError):
    status_code = 404
    error_type = "not_found"


# reserved: no path raises this yet
class Conflict(AppError):
    status_code = 409
    error_type = "conflict"


class DatabaseError(AppError):
    status_code = 500
    error_type = "database_error"

    def __init__(self, message: str = "An internal database error occurred", **kw: Any) -> None:
        super().__init__(message, **kw)


class InternalServerError(AppError):
    status_code = 500
    error_type = "internal_server_error"

    def __init__(self, message: str = "An internal server error occurred", **kw: Any) -> None:
        super().__init__(message, **kw)


def error_envelope(
    error_type: str,
    message: str,
    status_code: int,
    details: Any = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "error_type": error_type,
                "message": message,
                "details": details,
                "timestamp": now_iso(),
            }
        },
        headers=headers,
    )
