"""
Route registration system.
Coordinates all route handlers, middlewares and response hooks on an aiohttp app.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from aiohttp import hdrs, web

from mvb_shared import get_logger

from ..observability import (
    APP_KEY_REQUEST_LOG,
    RequestLogSettings,
    attach_request_id,
    request_context_middleware,
)
from .handlers import register_movie_routes, register_stream_routes

API_PREFIX = "/api/"
_EXPOSED_HEADERS = "Content-Length, Content-Range, Accept-Ranges, X-Request-ID"
_ALLOWED_REQUEST_HEADERS = "Range, X-Request-ID, Content-Type"

APP_KEY_CORS_ORIGIN: web.AppKey[str] = web.AppKey("mvb_cors_origin", str)

logger = get_logger(__name__)


def _is_api_path(request: web.Request) -> bool:
    return (request.path or "").startswith(API_PREFIX)


def _cors_headers(request: web.Request) -> dict[str, str]:
    origin = request.app.get(APP_KEY_CORS_ORIGIN, "")
    if not origin:
        return {}
    headers = {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Expose-Headers": _EXPOSED_HEADERS,
    }
    if origin != "*":
        headers["Vary"] = "Origin"
    return headers


@web.middleware
async def cors_preflight_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Answer CORS preflight requests for API routes."""
    if request.method == hdrs.METH_OPTIONS and _is_api_path(request) and request.app.get(APP_KEY_CORS_ORIGIN):
        return web.Response(
            status=204,
            headers={
                "Access-Control-Allow-Methods": "GET, HEAD, OPTIONS",
                "Access-Control-Allow-Headers": _ALLOWED_REQUEST_HEADERS,
                "Access-Control-Max-Age": "600",
            },
        )
    return await handler(request)


async def apply_api_headers(request: web.Request, response: web.StreamResponse) -> None:
    """on_response_prepare hook adding CORS and hardening headers to API responses."""
    if not _is_api_path(request):
        return
    for name, value in _cors_headers(request).items():
        response.headers.setdefault(name, value)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if request.path == API_PREFIX + "movies":
        response.headers.setdefault("Cache-Control", "no-store")


def register_routes(routes: web.RouteTableDef) -> None:
    register_movie_routes(routes)
    register_stream_routes(routes)


def register_all_routes(
    app: web.Application,
    *,
    cors_origin: str = "*",
    request_log: RequestLogSettings | None = None,
) -> None:
    """
    Install middlewares, response hooks and API routes on an application.

    Must be called before the application is started (middlewares are frozen then).
    """
    app[APP_KEY_CORS_ORIGIN] = cors_origin or ""
    app[APP_KEY_REQUEST_LOG] = request_log or RequestLogSettings()
    app.middlewares.append(request_context_middleware)
    app.middlewares.append(cors_preflight_middleware)
    app.on_response_prepare.append(attach_request_id)
    app.on_response_prepare.append(apply_api_headers)

    routes = web.RouteTableDef()
    register_routes(routes)
    app.add_routes(routes)
    logger.debug("Registered %d route(s)", len(list(routes)))
