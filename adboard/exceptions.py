
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging

logger = logging.getLogger(__name__)

class AdboardException(Exception):
    """Base exception for the application"""
    pass

class ConfigurationError(AdboardException):
    pass

class DuplicateUserError(AdboardException):
    """A user with the same npub or username already exists"""
    pass

async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all exception handler.
    Returns 500 JSON response and hides internal error details.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Unhandled exception occurred",
        extra={"request_id": request_id, "path": request.url.path},
        exc_info=exc
    )

    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal Server Error",
            "request_id": request_id
        },
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTPExceptions raised by services and routers.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    # Log 5xx errors as errors, 4xx as info
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})
    else:
        logger.info(f"HTTP {exc.status_code} error", extra={"request_id": request_id, "detail": exc.detail})

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, "request_id": request_id},
        headers=getattr(exc, "headers", None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle Pydantic validation errors. The dashboard expects 400 with the
    field errors passed through untouched.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    errors = jsonable_encoder(exc.errors())
    logger.info("Validation error", extra={"request_id": request_id, "errors": errors})

    return JSONResponse(
        status_code=400,
        content={
            "message": "Invalid data",
            "errors": errors,
            "request_id": request_id
        },
    )
