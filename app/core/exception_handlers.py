import logging
import uuid

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.errors import AppError

log = logging.getLogger("exception_handlers")


# Generate a clean request id for every response
def _rid():
    """Generates a unique request ID for tracing."""
    return uuid.uuid4().hex


def _error_body(code: str, message, details=None):
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "message": message,
        "error": error,
        "request_id": _rid(),
    }


# ----------- Exception Handlers (called by FastAPI) -----------

def app_error_handler(request: Request, exc: AppError):
    """Handles domain errors raised by the service layer (400/401/403/404/409)."""
    log.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))


def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 404, 400)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    return JSONResponse(
        status_code=422,
        content=_error_body("validation_error", "Invalid input data", jsonable_encoder(exc.errors())),
    )


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    # Full traceback stays server-side; the caller gets a generic message.
    log.error(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("server_error", "Internal Server Error"))


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
