"""
aiohttp application factory.
"""
from __future__ import annotations

from typing import Any

from aiohttp import web

from mvb_shared import get_logger

from .config import BrowserConfig
from .deps import build_services, dispose_services
from .observability import RequestLogSettings
from .routes import register_all_routes
from .routes.core import APP_KEY_SERVICES

logger = get_logger(__name__)


def create_app(config: BrowserConfig, services: dict[str, Any] | None = None) -> web.Application:
    """
    Build the web application for a configuration.

    Args:
        config: Process configuration
        services: Pre-built services (tests inject fakes here); built from config when None

    Raises:
        RuntimeError: the service graph could not be built
    """
    if services is None:
        built = build_services(config)
        if not built.ok:
            raise RuntimeError(built.error or "Failed to initialize services")
        services = built.unwrap()

    app = web.Application()
    app[APP_KEY_SERVICES] = services
    register_all_routes(
        app,
        cors_origin=config.cors_origin,
        request_log=RequestLogSettings(log_all=config.obs_log_all, ratelimit_ms=config.obs_ratelimit_ms),
    )

    async def _on_cleanup(app: web.Application) -> None:
        await dispose_services(app[APP_KEY_SERVICES])

    app.on_cleanup.append(_on_cleanup)
    return app
