"""
Centralized logging configuration for the tracking services.

This module provides consistent logging setup including:
- Structured logging with JSON or text output (structlog over stdlib logging)
- Request ID tracking for HTTP requests
- Request/response timing middleware

Usage:
    from services.common.logging_config import setup_service_logging

    # In your service main.py
    setup_service_logging(
        service_name="shipments",
        log_level="INFO",
        log_format="json"
    )
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Callable, Dict, Optional

import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-Id"

# Context variable for request-specific data
request_id_var: ContextVar[str] = ContextVar("request_id", default="uninitialized")


def add_request_context(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Add the current request ID to all log entries."""
    request_id = request_id_var.get()
    if request_id and request_id != "uninitialized":
        event_dict["request_id"] = request_id
    return event_dict


def add_service_context(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Add service name derived from loggers named like ``services.<name>.*``."""
    logger_name = event_dict.get("logger", "")
    if logger_name.startswith("services."):
        service_parts = logger_name.split(".")
        if len(service_parts) >= 2:
            event_dict["service"] = service_parts[1]
    return event_dict


class EnhancedTextRenderer:
    """Custom text renderer for readable logs during development."""

    _RESERVED_KEYS = ("timestamp", "level", "logger", "event", "service", "request_id")

    def __init__(self, service_name: str):
        self.service_name = service_name

    def __call__(
        self,
        logger: structlog.types.WrappedLogger,
        method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> str:
        timestamp = event_dict.get("timestamp", "")
        level = event_dict.get("level", "INFO").upper()
        logger_name = event_dict.get("logger", "")
        message = event_dict.get("event", "")
        service = event_dict.get("service", self.service_name)

        # Last 4 chars are enough to correlate lines of one request
        request_id = event_dict.get("request_id", "")
        if request_id and request_id != "uninitialized":
            request_id_suffix = f"[{request_id[-4:]}]"
        else:
            request_id_suffix = ""

        clean_logger_name = logger_name
        if logger_name.startswith("services."):
            clean_logger_name = logger_name[len("services.") :]

        parts = [
            timestamp,
            f"[{service}]",
            f"[{level}]",
            request_id_suffix,
            clean_logger_name,
            f"- {message}",
        ]

        extra_context = []
        for key, value in event_dict.items():
            if key in self._RESERVED_KEYS:
                continue
            if isinstance(value, (str, int, float, bool)):
                extra_context.append(f"{key}={value}")
            else:
                extra_context.append(f"{key}={str(value)[:150]}...")

        if extra_context:
            parts.append(f"| {', '.join(extra_context)}")

        return " ".join(filter(None, parts))


def setup_service_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
) -> None:
    """
    Set up logging configuration for a service.

    Args:
        service_name: Name of the service (e.g., "shipments")
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Format type ("json" or "text")
    """
    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_request_context,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(EnhancedTextRenderer(service_name))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # structlog renders the whole line, stdlib only passes it through
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    get_logger(__name__).info(
        f"Logging configured for {service_name}",
        log_level=log_level,
        log_format=log_format,
    )


def create_request_logging_middleware() -> Callable:
    """
    Create HTTP request logging middleware for FastAPI.

    The middleware reuses the caller's ``X-Request-Id`` or generates one,
    exposes it to log processors and echoes it on the response.
    """

    async def log_requests(request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        start_time = time.time()
        logger = get_logger("http.requests")
        logger.info(
            f"→ {request.method} {request.url.path}",
            method=request.method,
            client_ip=request.client.host if request.client else "unknown",
            content_type=request.headers.get("content-type"),
        )

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                log_level,
                f"{request.method} {request.url.path} → "
                f"{response.status_code} ({process_time:.3f}s)",
                status_code=response.status_code,
                process_time=process_time,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)

    return log_requests


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def log_service_startup(service_name: str, **kwargs: Any) -> None:
    """Log service startup with configuration details."""
    get_logger("startup").info(f"Starting {service_name}", service=service_name, **kwargs)


def log_service_shutdown(service_name: str) -> None:
    """Log service shutdown event."""
    get_logger(__name__).info(f"Service {service_name} shutting down")


def log_http_error(
    error_type: str,
    message: str,
    status_code: int,
    request_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> None:
    """
    Log an HTTP error at a level matching its status code.

    5xx responses are logged as errors, 4xx as warnings and anything
    else as info.

    Args:
        error_type: Type of error (e.g., "validation_error")
        message: Human-readable error message
        status_code: HTTP status code
        request_id: Optional request ID for tracing
        details: Optional additional error details
        **kwargs: Additional context to include in the log
    """
    logger = get_logger(__name__)

    log_context: Dict[str, Any] = {
        "error_type": error_type,
        "status_code": status_code,
        **kwargs,
    }
    if request_id:
        log_context["request_id"] = request_id
    if details:
        log_context["details"] = details

    event = f"HTTP {status_code} {error_type}: {message}"
    if status_code >= 500:
        logger.error(event, **log_context)
    elif status_code >= 400:
        logger.warning(event, **log_context)
    else:
        logger.info(event, **log_context)
