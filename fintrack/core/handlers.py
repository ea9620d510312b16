from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from fintrack.core.exceptions import FinanceTrackerError
from fintrack.core.responses import ErrorEnvelope
from fintrack.core.validation import first_error_message


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(error=message).model_dump(),
    )


def domain_error_handler(request: Request, exc: FinanceTrackerError):
    """Translate a domain error into the error envelope with its own status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request bodies that fail schema validation are reported as 400."""
    return error_response(400, first_error_message(exc.errors()))


def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


def general_exception_handler(request: Request, exc: Exception):
    """Anything unclassified becomes a bare 500; details stay in the log."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return error_response(500, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FinanceTrackerError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
