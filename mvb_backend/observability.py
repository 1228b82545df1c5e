"""
Observability helpers (request id + timing) for aiohttp routes.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from aiohttp import web

from mvb_shared import get_logger, request_id_var

# Raised when the client goes away mid-response (seek, tab closed, player reload).
# asyncio.CancelledError is deliberately absent: it must propagate.
_CLIENT_DISCONNECT_ERRORS = (
    ConnectionResetError,
    BrokenPipeError,
    ConnectionAbortedError,
)

# OSError errno codes that indicate client disconnect (not server-side issues)
_CLIENT_DISCONNECT_ERRNO = frozenset({
    10053,  # WSAECONNABORTED (Windows)
    10054,  # WSAECONNRESET (Windows)
    104,    # ECONNRESET (Linux/macOS)
    32,     # EPIPE (Linux/macOS)
})


def is_client_disconnect(exc: BaseException) -> bool:
    """Check if an exception represents a benign client disconnect."""
    if isinstance(exc, _CLIENT_DISCONNECT_ERRORS):
        return True
    if isinstance(exc, OSError):
        if getattr(exc, "errno", None) in _CLIENT_DISCONNECT_ERRNO:
            return True
        if getattr(exc, "winerror", None) in _CLIENT_DISCONNECT_ERRNO:
            return True
    return False


logger = get_logger(__name__)

MS_PER_S = 1000.0
_DEFAULT_LOG_RATELIMIT_MS = 2000.0
_API_PREFIX = "/api/"

# Keeps a polling client or a 404 loop from flooding the log. Process-local.
_LOG_RATELIMIT_LOCK = threading.Lock()
_LOG_RATELIMIT_STATE: dict[str, float] = {}


@dataclass(frozen=True)
class RequestLogSettings:
    log_all: bool = False
    ratelimit_ms: float = _DEFAULT_LOG_RATELIMIT_MS


APP_KEY_REQUEST_LOG: web.AppKey[RequestLogSettings] = web.AppKey("mvb_request_log", RequestLogSettings)
REQUEST_KEY_REQUEST_ID: web.RequestKey[str] = web.RequestKey("mvb_request_id", str)

_DEFAULT_REQUEST_LOG = RequestLogSettings()


def _new_request_id() -> str:
    return uuid4().hex


def _get_request_id(request: web.Request) -> str:
    rid = (request.headers.get("X-Request-ID") or "").strip()
    # Echoed into a response header and log lines.
    if rid and len(rid) <= 128 and rid.isprintable():
        return rid
    return _new_request_id()


def _should_emit_log(key: str, *, window_ms: float) -> bool:
    now = time.monotonic() * MS_PER_S
    with _LOG_RATELIMIT_LOCK:
        last = _LOG_RATELIMIT_STATE.get(key, 0.0)
        if last and now - last < window_ms:
            return False
        _LOG_RATELIMIT_STATE[key] = now
        if len(_LOG_RATELIMIT_STATE) > 1024:
            cutoff = now - window_ms
            for k, ts in list(_LOG_RATELIMIT_STATE.items()):
                if ts < cutoff:
                    _LOG_RATELIMIT_STATE.pop(k, None)
    return True


def _request_log_settings(request: web.Request) -> RequestLogSettings:
    return request.app.get(APP_KEY_REQUEST_LOG) or _DEFAULT_REQUEST_LOG


def _should_log(request: web.Request, *, status: int | None, settings: RequestLogSettings) -> bool:
    if not request.path.startswith(_API_PREFIX):
        return False
    if settings.log_all:
        return True
    return status is None or status >= 400


def _emit_request_log(
    request: web.Request,
    *,
    status: int | None,
    duration_ms: float,
    error: str | None,
) -> None:
    settings = _request_log_settings(request)
    if not _should_log(request, status=status, settings=settings):
        return
    key = f"{request.method}:{request.path}:{status}"
    if not _should_emit_log(key, window_ms=settings.ratelimit_ms):
        return
    message = f"{request.method} {request.path} -> {status} ({duration_ms:.1f}ms)"
    if error:
        message = f"{message} {error}"
    if status is None or status >= 500:
        logger.error(message)
    elif status >= 400:
        logger.warning(message)
    else:
        logger.info(message)


def _response_status_code(response: Any) -> int:
    try:
        return int(getattr(response, "status", 200) or 200)
    except (TypeError, ValueError):
        return 200


async def attach_request_id(request: web.Request, response: web.StreamResponse) -> None:
    """on_response_prepare hook; also covers handlers that stream their own response."""
    rid = request.get(REQUEST_KEY_REQUEST_ID)
    if rid:
        response.headers["X-Request-ID"] = rid


@web.middleware
async def request_context_middleware(request: web.Request, handler):
    """Add request-id correlation and lightweight request logging."""
    rid = _get_request_id(request)
    request[REQUEST_KEY_REQUEST_ID] = rid
    token = request_id_var.set(rid)
    start = time.perf_counter()
    status: int | None = None
    error: str | None = None
    try:
        response = await handler(request)
        status = _response_status_code(response)
        return response
    except web.HTTPException as exc:
        status = exc.status
        raise
    except Exception as exc:
        status = 500
        error = f"{exc.__class__.__name__}: {exc}"
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * MS_PER_S
        request_id_var.reset(token)
        _emit_request_log(request, status=status, duration_ms=duration_ms, error=error)
