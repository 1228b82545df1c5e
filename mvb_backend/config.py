"""
Configuration for the Movie Browser backend.

Settings are read once at startup into a frozen `BrowserConfig` that is passed
explicitly to every service; nothing below keeps module-level state.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from mvb_shared import get_logger

logger = get_logger(__name__)

DEFAULT_OMDB_URL = "http://www.omdbapi.com/"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4000
DEFAULT_CATALOG_TIMEOUT = 5.0
DEFAULT_FFPROBE_TIMEOUT = 10.0
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_STREAM_CHUNK_SIZE = 256 * 1024
DEFAULT_OBS_RATELIMIT_MS = 2000.0

_BOOL_TRUE = frozenset({"1", "true", "yes", "on", "enabled"})
_BOOL_FALSE = frozenset({"0", "false", "no", "off", "disabled"})


@dataclass(frozen=True)
class BrowserConfig:
    media_dir: Path
    omdb_api_key: str | None = None
    omdb_url: str = DEFAULT_OMDB_URL
    catalog_timeout: float = DEFAULT_CATALOG_TIMEOUT
    catalog_cache_ttl: float = 0.0
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    ffprobe_bin: str = "ffprobe"
    ffprobe_timeout: float = DEFAULT_FFPROBE_TIMEOUT
    stream_chunk_size: int = DEFAULT_STREAM_CHUNK_SIZE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origin: str = "*"
    obs_log_all: bool = False
    obs_ratelimit_ms: float = DEFAULT_OBS_RATELIMIT_MS
    debug: bool = False

    @property
    def catalog_enabled(self) -> bool:
        return bool(self.omdb_api_key)


def _env_raw(env: Mapping[str, str], *names: str, default: str | None = None) -> str | None:
    for name in names:
        val = env.get(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_bool(env: Mapping[str, str], default: bool, *names: str) -> bool:
    raw = _env_raw(env, *names)
    if raw is None:
        return default
    normalized = raw.lower()
    if normalized in _BOOL_TRUE:
        return True
    if normalized in _BOOL_FALSE:
        return False
    logger.warning("Invalid boolean for %s=%r, using default=%s", names[0], raw, default)
    return default


def _env_int(
    env: Mapping[str, str],
    default: int,
    *names: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    raw = _env_raw(env, *names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0], raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0], value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0], value, max_value)
        value = max_value
    return value


def _env_float(
    env: Mapping[str, str],
    default: float,
    *names: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    raw = _env_raw(env, *names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0], raw, default)
        return default
    if value != value:  # NaN
        logger.warning("Invalid float for %s=%r, using default=%s", names[0], raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0], value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0], value, max_value)
        value = max_value
    return value


def _resolve_media_dir(raw: str | None) -> Path:
    candidate = Path(raw) if raw else Path.cwd() / "movies"
    try:
        return candidate.expanduser().resolve()
    except (OSError, RuntimeError):
        logger.warning("Failed to resolve media directory %s, using it as given", candidate)
        return candidate


def _cors_origin(raw: str | None) -> str:
    value = (raw or "").strip()
    return "" if value.lower() == "none" else value


def load_config(environ: Mapping[str, str] | None = None, **overrides) -> BrowserConfig:
    """
    Build the process configuration from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)
        **overrides: Explicit values (e.g. from CLI flags) that win over the environment;
            `None` values are ignored.

    Returns:
        BrowserConfig instance
    """
    env = os.environ if environ is None else environ

    api_key = _env_raw(env, "OMDB_API_KEY", "MVB_OMDB_API_KEY")
    values = {
        "media_dir": _resolve_media_dir(_env_raw(env, "MVB_MEDIA_DIR", "MOVIE_DIR")),
        "omdb_api_key": api_key,
        "omdb_url": _env_raw(env, "MVB_OMDB_URL", default=DEFAULT_OMDB_URL),
        "catalog_timeout": _env_float(
            env, DEFAULT_CATALOG_TIMEOUT, "MVB_CATALOG_TIMEOUT", min_value=0.5, max_value=60.0
        ),
        "catalog_cache_ttl": _env_float(env, 0.0, "MVB_CATALOG_CACHE_TTL", min_value=0.0),
        "max_concurrency": _env_int(
            env, DEFAULT_MAX_CONCURRENCY, "MVB_MAX_CONCURRENCY", min_value=1, max_value=64
        ),
        "ffprobe_bin": _env_raw(env, "MVB_FFPROBE_BIN", default="ffprobe"),
        "ffprobe_timeout": _env_float(
            env, DEFAULT_FFPROBE_TIMEOUT, "MVB_FFPROBE_TIMEOUT", min_value=0.5, max_value=300.0
        ),
        "stream_chunk_size": _env_int(
            env,
            DEFAULT_STREAM_CHUNK_SIZE,
            "MVB_STREAM_CHUNK_SIZE",
            min_value=4096,
            max_value=8 * 1024 * 1024,
        ),
        "host": _env_raw(env, "MVB_HOST", default=DEFAULT_HOST),
        "port": _env_int(env, DEFAULT_PORT, "MVB_PORT", "PORT", min_value=1, max_value=65535),
        "cors_origin": _cors_origin(_env_raw(env, "MVB_CORS_ORIGIN", default="*")),
        "obs_log_all": _env_bool(env, False, "MVB_OBS_LOG_ALL"),
        "obs_ratelimit_ms": _env_float(
            env, DEFAULT_OBS_RATELIMIT_MS, "MVB_OBS_RATELIMIT_MS", min_value=0.0, max_value=3_600_000.0
        ),
        "debug": _env_bool(env, False, "MVB_DEBUG"),
    }

    for key, value in overrides.items():
        if value is None:
            continue
        if key not in values:
            raise TypeError(f"Unknown configuration field: {key}")
        values[key] = _resolve_media_dir(str(value)) if key == "media_dir" else value

    return BrowserConfig(**values)
