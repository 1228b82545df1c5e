"""Shared utilities for the Movie Browser backend."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success, request_id_var
from .result import Result
from .time import timer
from .types import (
    DEFAULT_VIDEO_CONTENT_TYPE,
    VIDEO_EXTENSIONS,
    ErrorCode,
    content_type_for,
    is_supported_video,
)

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "timer",
    "ErrorCode",
    "VIDEO_EXTENSIONS",
    "DEFAULT_VIDEO_CONTENT_TYPE",
    "content_type_for",
    "is_supported_video",
    "sanitize_error_message",
]
