"""
Shared HTTP error classes and utilities for the tracking services.

Provides:
- Base exception class for API errors
- Common subclasses (Validation, Internal)
- Shared error response model
- Utility to convert exceptions to error responses
- FastAPI exception handler registration

Common Usage Patterns:
=====================

Basic Exception Usage:
>>> from services.common.http_errors import ValidationError, InternalError
>>>
>>> # Validation error naming the offending fields
>>> error = ValidationError("Missing fields: status", fields=["status"])
>>>
>>> # Opaque server-side failure
>>> error = InternalError()

FastAPI Integration:
>>> from fastapi import FastAPI
>>> from services.common.http_errors import register_briefly_exception_handlers
>>>
>>> app = FastAPI()
>>> register_briefly_exception_handlers(app)

Every handled error is rendered as an ``ErrorResponse``, whose ``error`` key
carries the human readable message:

    {
      "error": "Missing fields: status",
      "type": "validation_error",
      "details": {"fields": ["status"], "code": "VALIDATION_FAILED"},
      "timestamp": "2024-01-15T10:30:00+00:00",
      "request_id": "..."
    }

Error Code Taxonomy:
===================
- VALIDATION_FAILED : Caller input missing or malformed (400)
- INTERNAL_ERROR : Unexpected server-side failure (500)
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.common.logging_config import log_http_error, request_id_var

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorCode(str, Enum):
    """Standardized error codes, carried in ``details.code`` of error responses."""

    VALIDATION_FAILED = "VALIDATION_FAILED"  # HTTP 400 - Input validation failed
    INTERNAL_ERROR = "INTERNAL_ERROR"  # HTTP 500 - Generic internal error


class ErrorResponse(BaseModel):
    """
    Standardized error response model.

    Attributes:
        error: Human-readable error message for clients
        type: Error type categorization (e.g., "validation_error")
        details: Optional dictionary containing additional error context
        timestamp: ISO 8601 timestamp of when the error occurred
        request_id: Identifier for correlating the response with server logs
    """

    error: str
    type: str
    details: Optional[Dict[str, Any]] = None
    timestamp: str
    request_id: str


def _current_request_id() -> str:
    """Return the request ID of the active request, or a fresh one outside a request."""
    request_id = request_id_var.get()
    if request_id and request_id != "uninitialized":
        return request_id
    return str(uuid.uuid4())


class BrieflyAPIException(Exception):
    """
    Base exception class for all API errors.

    Carries everything needed to render a response: message, error type,
    error code, HTTP status and a request ID for correlating logs.

    Args:
        message: The error message to display to callers
        details: Optional dictionary with additional error context
        error_type: Error category string (defaults to "internal_error")
        error_code: Specific error code from ErrorCode enum
        status_code: HTTP status code (defaults to 500)
        request_id: Optional request ID (taken from context if not provided)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_type: str = "internal_error",
        error_code: Optional[ErrorCode] = None,
        status_code: int = 500,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.error_type = error_type
        self.error_code = error_code
        self.status_code = status_code
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.request_id = request_id or _current_request_id()
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse, adding the error code to details."""
        details = {
            **self.details,
            **({"code": self.error_code.value} if self.error_code else {}),
        }
        return ErrorResponse(
            error=self.message,
            type=self.error_type,
            details=details if details else None,
            timestamp=self.timestamp,
            request_id=self.request_id,
        )


class ValidationError(BrieflyAPIException):
    """
    Exception for caller input errors (HTTP 400).

    Raised before any side effect takes place, so a request failing
    validation never mutates state.

    Args:
        message: Human-readable description of the validation failure
        field: Optional single field name that failed validation
        fields: Optional list of field names that failed validation
        details: Optional additional validation context

    Examples:
        >>> error = ValidationError("Shipment ID is required", field="shipment_id")
        >>> error = ValidationError(
        ...     "Missing fields: location, status",
        ...     fields=["location", "status"],
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        fields: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        validation_details = dict(details or {})
        if field:
            validation_details["field"] = field
        if fields:
            validation_details["fields"] = list(fields)
        super().__init__(
            message=message,
            details=validation_details,
            error_type="validation_error",
            error_code=ErrorCode.VALIDATION_FAILED,
            status_code=400,
        )
        self.field = field
        self.fields = list(fields or [])


class InternalError(BrieflyAPIException):
    """
    Exception for unexpected server-side failures (HTTP 500).

    The message is always the generic one. Whatever caused the failure is
    logged by the raiser and never included in the response.
    """

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=INTERNAL_ERROR_MESSAGE,
            details=details,
            error_type="internal_error",
            error_code=ErrorCode.INTERNAL_ERROR,
            status_code=500,
        )


def exception_to_response(exc: Exception) -> ErrorResponse:
    """
    Convert any exception to a standardized ErrorResponse.

    1. BrieflyAPIException: uses its own to_error_response()
    2. HTTPException: keeps the detail message and status
    3. Anything else: an opaque internal error, the exception text is dropped

    Examples:
        >>> response = exception_to_response(ValidationError("Missing fields: status"))
        >>> response.type
        'validation_error'
        >>> exception_to_response(ValueError("secret detail")).error
        'Internal server error'
    """
    if isinstance(exc, BrieflyAPIException):
        return exc.to_error_response()
    elif isinstance(exc, StarletteHTTPException):
        detail = (
            exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
        )
        return ErrorResponse(
            error=str(detail.get("message", "HTTP error")),
            type="http_error",
            details=detail,
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=_current_request_id(),
        )
    else:
        return InternalError().to_error_response()


def _describe_validation_errors(exc: RequestValidationError) -> ValidationError:
    fields: List[str] = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            return ValidationError("Malformed request body")
        # Locations look like ("body", "status"); a bare ("body",) is a non-object body
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if loc:
            name = ".".join(loc)
            if name not in fields:
                fields.append(name)
    if fields:
        return ValidationError(f"Invalid fields: {', '.join(fields)}", fields=fields)
    return ValidationError("Malformed request body")


def register_briefly_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers that render every error as ErrorResponse.

    Behavior:
        - BrieflyAPIException: the exception's status_code and details
        - HTTPException (including routing 404/405): its status_code
        - RequestValidationError: HTTP 400 validation_error
        - Generic Exception: HTTP 500 with the generic message, logged with traceback
    """

    @app.exception_handler(BrieflyAPIException)
    async def briefly_api_exception_handler(
        request: Request, exc: BrieflyAPIException
    ) -> JSONResponse:
        error_response = exc.to_error_response()
        log_http_error(
            exc.error_type,
            exc.message,
            exc.status_code,
            request_id=error_response.request_id,
            details=error_response.details,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=exc.status_code, content=error_response.model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        error_response = exception_to_response(exc)
        log_http_error(
            error_response.type,
            error_response.error,
            exc.status_code,
            request_id=error_response.request_id,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = _describe_validation_errors(exc)
        return await briefly_api_exception_handler(request, error)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        error_response = exception_to_response(exc)
        log_http_error(
            error_response.type,
            error_response.error,
            500,
            request_id=error_response.request_id,
            path=request.url.path,
            method=request.method,
            exception_class=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=error_response.model_dump())


__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "BrieflyAPIException",
    "ValidationError",
    "InternalError",
    "INTERNAL_ERROR_MESSAGE",
    "exception_to_response",
    "register_briefly_exception_handlers",
]
