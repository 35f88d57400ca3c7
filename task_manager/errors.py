"""Domain errors and their HTTP rendering."""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class TaskManagerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


class Unauthenticated(TaskManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class Forbidden(TaskManagerError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFound(TaskManagerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InvalidInput(TaskManagerError):
    status_code = 422
    code = "invalid_input"


class Conflict(TaskManagerError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


async def task_manager_error_handler(_: Request, exc: TaskManagerError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.payload, headers=headers)


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    payload = build_error_payload(
        InvalidInput.code,
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(status_code=InvalidInput.status_code, content=payload)
