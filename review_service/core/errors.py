"""
Error types and exception handlers

Expected failures are raised as ErrorResponse subclasses and mapped to their
HTTP status. Server-side failures (5xx) are logged with full detail and
answered with a generic message.
"""

import traceback
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from review_service.core.config import config
from review_service.core.logger import logger

GENERIC_ERROR_MESSAGE = "Something went wrong."


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    status_code = 400

    def __init__(self, message: str, status_code: int = None, details: dict = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(ErrorResponse):
    """Bad input"""
    status_code = 400


class NotFoundError(ErrorResponse):
    """Missing entity"""
    status_code = 404


class ConflictError(ErrorResponse):
    """Duplicate entity, e.g. a second active review for the same book"""
    status_code = 400


class PermissionDeniedError(ErrorResponse):
    """Ownership or eligibility failure"""
    status_code = 403


class InternalError(ErrorResponse):
    """Unexpected failure such as the database being unavailable"""
    status_code = 500


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    success: bool = False
    message: str
    details: Optional[dict] = None


def _error_content(message: str, details: dict = None) -> dict:
    content = {"success": False, "message": message}
    if details:
        content["details"] = details
    return content


def _request_metadata(request: Request, status_code: int) -> dict:
    return {
        "status_code": status_code,
        "url": str(request.url),
        "method": request.method,
    }


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for ErrorResponse and its subclasses"""
    metadata = {
        "event": "error_response",
        "error_type": type(exc).__name__,
        **_request_metadata(request, exc.status_code),
        **exc.details,
    }

    if exc.status_code >= 500:
        if config.environment == "development":
            metadata["traceback"] = traceback.format_exc()
        logger.error(f"Error: {exc.message}", metadata=metadata)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(GENERIC_ERROR_MESSAGE),
        )

    logger.warning(f"Error: {exc.message}", metadata=metadata)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.message, exc.details),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={"event": "http_exception", **_request_metadata(request, exc.status_code)},
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for request schema failures, reported as 400"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        message = str(errors[0].get("msg", message)).removeprefix("Value error, ")

    logger.warning(
        f"Validation error: {message}",
        metadata={"event": "validation_error", **_request_metadata(request, 400)},
    )

    details = {
        "errors": [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in errors
        ]
    }
    return JSONResponse(status_code=400, content=_error_content(message, details))


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log everything, reveal nothing"""
    logger.error(
        "Unhandled exception",
        error=exc,
        metadata={
            "event": "unhandled_exception",
            "traceback": traceback.format_exc(),
            **_request_metadata(request, 500),
        },
    )
    return JSONResponse(status_code=500, content=_error_content(GENERIC_ERROR_MESSAGE))
