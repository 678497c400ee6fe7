"""
Exception taxonomy and the JSON error handlers installed on the app.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from pymongo.errors import PyMongoError
from starlette.responses import JSONResponse

log = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class Conflict(ApiError):
    # Duplicate registrations have always been answered with 400.
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidCredential(Exception):
    """A bearer token failed signature, expiry or payload checks."""


class InvalidPath(ValueError):
    """A collection path cannot be mapped onto the document store."""


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def handle_api_error(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.message, exc.headers)


async def handle_invalid_path(request: Request, exc: InvalidPath):
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_validation_error(request: Request, exc: RequestValidationError):
    log.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def handle_store_error(request: Request, exc: PyMongoError):
    log.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")


async def handle_unexpected(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(InvalidPath, handle_invalid_path)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(PyMongoError, handle_store_error)
    app.add_exception_handler(Exception, handle_unexpected)
