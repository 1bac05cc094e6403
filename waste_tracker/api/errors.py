import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from waste_tracker.core import exceptions as domain_exceptions

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # covers routing errors too (404 unknown path, 405 unsupported verb)
    return _error(exc.status_code, str(exc.detail))


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed bodies are client errors like any other missing input
    return _error(400, "Invalid request body")


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def _domain_error_handler(status_code: int, default_detail: str):
    def _handler(_: Request, exc: domain_exceptions.DomainError) -> JSONResponse:
        return _error(status_code, str(exc) or default_detail)

    return _handler


def install(app) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(
        domain_exceptions.NotFoundError, _domain_error_handler(404, "Not Found")
    )
    app.add_exception_handler(
        domain_exceptions.ValidationError, _domain_error_handler(400, "Bad Request")
    )
    app.add_exception_handler(Exception, _unhandled_exception_handler)
