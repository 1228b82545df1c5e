"""
Dependency injection - builds services.
Simple, debug-friendly DI without framework magic.
"""
from typing import Any

from .adapters.catalog import OmdbClient
from .adapters.tools import FFProbe
from .config import BrowserConfig
from .features.library import CatalogCache, DurationProber, LibraryService
from .features.stream import MediaStreamer
from mvb_shared import ErrorCode, Result, get_logger, log_success

logger = get_logger(__name__)


def _log_environment(config: BrowserConfig, prober: DurationProber, catalog: OmdbClient) -> None:
    if prober.is_available():
        log_success(logger, "ffprobe is available")
    else:
        logger.warning("ffprobe not found - durations will be reported as unknown")
    if catalog.is_enabled():
        log_success(logger, "OMDb API key configured")
    else:
        logger.warning("OMDB_API_KEY not set - listing will use filename-derived titles only")
    if not config.media_dir.is_dir():
        logger.warning("Media directory does not exist yet: %s", config.media_dir)


def build_services(config: BrowserConfig) -> Result[dict[str, Any]]:
    """
    Build the service graph for one application instance.

    Args:
        config: Process configuration, passed down explicitly

    Returns:
        Result with a dict of services keyed by name
    """
    try:
        ffprobe = FFProbe(bin_name=config.ffprobe_bin, timeout=config.ffprobe_timeout)
        catalog = OmdbClient(
            config.omdb_api_key,
            base_url=config.omdb_url,
            timeout=config.catalog_timeout,
        )
        prober = DurationProber(ffprobe)
        library = LibraryService(config, catalog, prober, cache=CatalogCache(config.catalog_cache_ttl))
        streamer = MediaStreamer(config)
    except Exception as exc:
        logger.error("Failed to initialize services: %s", exc, exc_info=True)
        return Result.Err(ErrorCode.SERVICE_UNAVAILABLE, f"Failed to initialize services: {exc}")

    _log_environment(config, prober, catalog)

    return Result.Ok(
        {
            "config": config,
            "ffprobe": ffprobe,
            "catalog": catalog,
            "prober": prober,
            "library": library,
            "streamer": streamer,
        }
    )


async def dispose_services(services: dict[str, Any]) -> None:
    """Release resources held by services; errors are logged, not raised."""
    catalog = services.get("catalog")
    if catalog is not None and hasattr(catalog, "aclose"):
        try:
            await catalog.aclose()
            logger.debug("Catalog session closed")
        except Exception as exc:
            logger.warning("Error closing catalog session: %s", exc)
