"""Response envelope helpers and error handlers."""

from typing import Any

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from discuss.domain.error import (
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from discuss.wire.payload import Envelope

_STATUS_BY_ERROR: dict[type[DomainError], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    NotAuthorizedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
}


def envelope(
    data: BaseModel | list[BaseModel] | None = None, message: str = ""
) -> dict[str, Any]:
    """Wrap response data in a successful envelope."""
    if isinstance(data, list):
        payload: Any = [item.model_dump(mode="json", by_alias=True) for item in data]
    elif isinstance(data, BaseModel):
        payload = data.model_dump(mode="json", by_alias=True)
    else:
        payload = data
    return Envelope(success=True, message=message, data=payload).model_dump(mode="json")


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Envelope(success=False, message=message).model_dump(mode="json"),
    )


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    status_code = next(
        (code for kind, code in _STATUS_BY_ERROR.items() if isinstance(exc, kind)),
        status.HTTP_400_BAD_REQUEST,
    )
    logfire.info(
        "Request rejected",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    return _failure(status_code, str(exc))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _failure(status.HTTP_400_BAD_REQUEST, "Invalid request body")


def register_error_handlers(app: FastAPI) -> None:
    """Answer domain and validation errors with failed envelopes."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
