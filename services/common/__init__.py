"""
Common utilities and configurations for the tracking services.
"""

from services.common.http_errors import (
    BrieflyAPIException,
    InternalError,
    ValidationError,
    register_briefly_exception_handlers,
)
from services.common.logging_config import get_logger, setup_service_logging

__all__ = [
    "BrieflyAPIException",
    "InternalError",
    "ValidationError",
    "register_briefly_exception_handlers",
    "get_logger",
    "setup_service_logging",
]
