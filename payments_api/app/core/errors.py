"""
Error taxonomy and exception handlers.

Services raise subclasses of ``ApiError``; the handlers registered by
``add_error_handlers`` render every failure, expected or not, as a
response envelope with the ``errors`` list populated and no ``data``
or ``links``.
"""

import logging
from typing import Iterable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..schemas.envelope import envelope_response

logger = logging.getLogger(__name__)

ERROR_INVALID_JSON = "Invalid JSON"
ERROR_RESOURCE_NOT_FOUND = "Resource not found"
ERROR_METHOD_NOT_ALLOWED = "Method not allowed"
ERROR_INTERNAL = "Internal server error"


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = ERROR_INTERNAL

    def __init__(self, *messages: str, headers: Optional[dict] = None) -> None:
        self.messages: List[str] = list(messages) or [self.default_message]
        self.headers = headers
        super().__init__("; ".join(self.messages))


class InvalidInput(ApiError):
    """The request body could not be decoded into the expected shape."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ERROR_INVALID_JSON


class ValidationFailed(ApiError):
    """A decoded value broke a field-level rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class Conflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class IdMismatch(Conflict):
    """The identifier in the body differs from the one in the path."""

    default_message = "Mismatching IDs"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = ERROR_RESOURCE_NOT_FOUND


class InternalError(ApiError):
    """A lower-layer fault.  The caller never sees the cause."""


def describe_validation_errors(errors: Iterable[dict]) -> List[str]:
    """Turn pydantic error dicts into ``"<field>: <reason>"`` strings.

    The leading ``body`` location element added by FastAPI is dropped so
    the field path reads the way the client wrote it.
    """
    described = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        described.append(f"{field}: {error.get('msg', 'invalid value')}")
    return described


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc)
    return envelope_response(exc.status_code, errors=exc.messages, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = describe_validation_errors(exc.errors())
    logger.warning("%s %s rejected: malformed body %s", request.method, request.url.path, details)
    return envelope_response(status.HTTP_400_BAD_REQUEST, errors=[ERROR_INVALID_JSON, *details])


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = ERROR_RESOURCE_NOT_FOUND
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = ERROR_METHOD_NOT_ALLOWED
    else:
        message = str(exc.detail)
    return envelope_response(exc.status_code, errors=[message], headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Details stay in the log; the client only learns that it failed.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope_response(status.HTTP_500_INTERNAL_SERVER_ERROR, errors=[ERROR_INTERNAL])


def add_error_handlers(app: FastAPI) -> None:
    """Register all envelope-producing exception handlers on ``app``."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
