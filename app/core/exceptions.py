# app/core/exceptions.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"


class PolygonServiceError(Exception):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    message = SERVER_ERROR

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(PolygonServiceError):
    status_code = HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidCoordinate(ValidationError):
    message = "Invalid coordinate in array"


class NotFound(PolygonServiceError):
    status_code = HTTP_404_NOT_FOUND
    message = "Not found"


class PayloadTooLarge(PolygonServiceError):
    status_code = HTTP_413_REQUEST_ENTITY_TOO_LARGE
    message = "Payload too large"


class StoreUnavailable(PolygonServiceError):
    """Persistence layer failed or is unreachable. The cause is chained, never sent to clients."""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def service_exception_handler(request: Request, exc: PolygonServiceError):
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %r", request.method, request.url.path,
                     exc.__cause__ or exc, exc_info=exc.__cause__ or exc)
        return _error(exc.status_code, SERVER_ERROR)
    return _error(exc.status_code, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed path ids and query params land here
    errors = exc.errors()
    logger.info("VALIDATION ERR on %s %s: %s", request.method, request.url.path, errors)
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("path", "query", "body"))
    message = f"invalid {loc}" if loc else "invalid request"
    return _error(HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # framework-raised errors (unknown route, malformed multipart) in the same shape
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                        headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("%s %s crashed", request.method, request.url.path)
    return _error(HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PolygonServiceError, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
