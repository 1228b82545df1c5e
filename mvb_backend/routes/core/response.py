"""
Response utilities for route handlers.
"""

import math
from typing import Any

from aiohttp import web

from mvb_shared import Result


def _sanitize_json_payload(value: Any) -> Any:
    """
    Normalize payload values so they are always valid strict JSON.
    - Converts NaN/Infinity floats to None.
    - Recurses through dict/list/tuple containers.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _sanitize_json_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_payload(v) for v in value]
    return value


def _json_payload_response(payload: Any, status: int = 200) -> web.Response:
    """Plain JSON body (no Result envelope)."""
    return web.json_response(_sanitize_json_payload(payload), status=status)


def _json_error_response(result: Result, status: int = 500) -> web.Response:
    """
    Convert a failed Result to a JSON error response.

    Args:
        result: Result object (ok=False)
        status: HTTP status code

    Returns:
        aiohttp web.Response with `{ok, error, code}`
    """
    payload = {
        "ok": False,
        "error": result.error,
        "code": result.code,
    }
    return web.json_response(_sanitize_json_payload(payload), status=status)
