"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"

    # Feature / service availability
    TOOL_MISSING = "TOOL_MISSING"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Server / infrastructure
    DIRECTORY_UNREADABLE = "DIRECTORY_UNREADABLE"
    TIMEOUT = "TIMEOUT"

    # Tool / parsing
    FFPROBE_ERROR = "FFPROBE_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


# Extensions listed by the library scan, with the content type used to stream them.
VIDEO_CONTENT_TYPES: Final[dict[str, str]] = {
    ".mp4": "video/mp4",
    ".mkv": "video/x-matroska",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
}

VIDEO_EXTENSIONS: Final[frozenset[str]] = frozenset(VIDEO_CONTENT_TYPES)

DEFAULT_VIDEO_CONTENT_TYPE: Final[str] = "video/mp4"


def is_supported_video(filename: str) -> bool:
    """Return True when the filename carries a listed video extension (case-insensitive)."""
    ext = os.path.splitext(filename)[1].lower()
    return ext in VIDEO_EXTENSIONS


def content_type_for(filename: str) -> str:
    """
    Content type for streaming a media file.

    Args:
        filename: File name or path

    Returns:
        MIME type derived from the extension, `video/mp4` when unknown
    """
    ext = os.path.splitext(filename)[1].lower()
    return VIDEO_CONTENT_TYPES.get(ext, DEFAULT_VIDEO_CONTENT_TYPE)
