from aiohttp import web
from aiohttp.test_utils import make_mocked_request

from mvb_backend import observability
from mvb_backend.app import create_app
from mvb_backend.observability import (
    APP_KEY_REQUEST_LOG,
    REQUEST_KEY_REQUEST_ID,
    RequestLogSettings,
    is_client_disconnect,
)

from ..fakes import build_services


def _capture(monkeypatch) -> list[str]:
    seen: list[str] = []
    for level in ("info", "warning", "error"):
        monkeypatch.setattr(observability.logger, level, lambda msg, *args, _seen=seen: _seen.append(msg))
    return seen


def _request(path: str, settings: RequestLogSettings | None) -> web.Request:
    app = web.Application()
    if settings is not None:
        app[APP_KEY_REQUEST_LOG] = settings
    return make_mocked_request("GET", path, app=app)


def test_success_logging_follows_app_settings_not_environment(monkeypatch):
    monkeypatch.setenv("MVB_OBS_LOG_ALL", "1")
    seen = _capture(monkeypatch)

    observability._emit_request_log(
        _request("/api/movies", RequestLogSettings(log_all=False, ratelimit_ms=0.0)),
        status=200,
        duration_ms=1.0,
        error=None,
    )
    assert seen == []

    observability._emit_request_log(
        _request("/api/movies", RequestLogSettings(log_all=True, ratelimit_ms=0.0)),
        status=200,
        duration_ms=1.0,
        error=None,
    )
    assert len(seen) == 1
    assert "GET /api/movies -> 200" in seen[0]


def test_failures_are_logged_with_default_settings(monkeypatch):
    seen = _capture(monkeypatch)
    observability._emit_request_log(
        _request("/api/stream/zz-unique-failure.mp4", None), status=404, duration_ms=2.0, error=None
    )
    assert len(seen) == 1


def test_non_api_paths_are_not_logged(monkeypatch):
    seen = _capture(monkeypatch)
    observability._emit_request_log(
        _request("/favicon.ico", RequestLogSettings(log_all=True, ratelimit_ms=0.0)),
        status=500,
        duration_ms=1.0,
        error=None,
    )
    assert seen == []


def test_create_app_stores_request_log_settings(make_config):
    config = make_config(obs_log_all=True, obs_ratelimit_ms=50.0)
    app = create_app(config, services=build_services(config))
    assert app[APP_KEY_REQUEST_LOG] == RequestLogSettings(log_all=True, ratelimit_ms=50.0)


def test_request_id_is_stored_under_typed_key():
    req = make_mocked_request("GET", "/api/movies", headers={"X-Request-ID": "rid-7"})
    assert observability._get_request_id(req) == "rid-7"
    req[REQUEST_KEY_REQUEST_ID] = "rid-7"
    assert req.get(REQUEST_KEY_REQUEST_ID) == "rid-7"


def test_oversized_or_unprintable_request_ids_are_replaced():
    for value in ("x" * 200, "bad\x01id"):
        req = make_mocked_request("GET", "/api/movies", headers={"X-Request-ID": value})
        rid = observability._get_request_id(req)
        assert rid != value
        assert len(rid) == 32


def test_client_disconnect_detection():
    assert is_client_disconnect(ConnectionResetError())
    assert is_client_disconnect(BrokenPipeError())
    assert is_client_disconnect(OSError(104, "reset"))
    assert not is_client_disconnect(OSError(2, "missing"))
    assert not is_client_disconnect(RuntimeError("boom"))
