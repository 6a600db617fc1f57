"""
Domain exceptions and the JSON error envelope.

Every failure surfaced to a caller ends up as ``{"error": "<message>"}`` with
an HTTP status taken from the exception class.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class FleetError(Exception):
    """Base class for errors that are reported to the caller."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FleetError):
    """A referenced trip, vehicle, driver, log or profile does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(FleetError):
    """The entity is in the wrong status for the requested transition."""
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailure(FleetError):
    """A business rule rejected the request (capacity, odometer, license...)."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(FleetError):
    """Missing, malformed or rejected credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(FleetError):
    """Caller is authenticated but its role may not run the operation."""
    status_code = status.HTTP_403_FORBIDDEN


class StoreError(FleetError):
    """The data store rejected a query or write."""
    status_code = status.HTTP_400_BAD_REQUEST


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def fleet_error_handler(request: Request, exc: FleetError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return _error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg", "Invalid request"))
    return _error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    message = str(getattr(exc, "orig", None) or exc)
    logger.error(f"Store error on {request.method} {request.url.path}: {message}")
    return _error_response(StoreError.status_code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the uniform ``{"error": ...}`` envelope on an application."""
    app.add_exception_handler(FleetError, fleet_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
