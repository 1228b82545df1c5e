"""
Core utilities for route handlers.
"""
from .response import _json_error_response, _json_payload_response
from .services import APP_KEY_SERVICES, _require_service

__all__ = [
    "APP_KEY_SERVICES",
    "_json_error_response",
    "_json_payload_response",
    "_require_service",
]
