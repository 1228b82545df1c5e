"""
Access to the service graph stored on the aiohttp application.
"""
from typing import Any

from aiohttp import web

APP_KEY_SERVICES: web.AppKey[dict[str, Any]] = web.AppKey("mvb_services", dict)


def _require_service(request: web.Request, name: str) -> Any:
    services = request.app.get(APP_KEY_SERVICES)
    if not services or name not in services:
        raise web.HTTPServiceUnavailable(text=f"Service '{name}' is not initialized")
    return services[name]
