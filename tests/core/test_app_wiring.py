import pytest
from aiohttp import web

from mvb_backend import app as app_module
from mvb_backend.adapters.catalog import OmdbClient
from mvb_backend.app import create_app
from mvb_backend.deps import build_services, dispose_services
from mvb_backend.main import _parse_args, build_config
from mvb_backend.routes.core import APP_KEY_SERVICES
from mvb_shared import ErrorCode, Result


def test_build_services_wires_every_service(make_config):
    out = build_services(make_config(ffprobe_bin="definitely-not-ffprobe"))
    assert out.ok
    services = out.unwrap()
    assert set(services) == {"config", "ffprobe", "catalog", "prober", "library", "streamer"}
    assert services["ffprobe"].is_available() is False
    assert services["prober"].is_available() is False
    assert services["catalog"].is_enabled() is False
    assert services["library"].catalog is services["catalog"]


@pytest.mark.asyncio
async def test_dispose_services_closes_catalog_session(make_config):
    client = OmdbClient("key")
    session = client._get_session()
    await dispose_services({"catalog": client})
    assert session.closed is True
    await dispose_services({})


def test_create_app_registers_api_routes(make_config):
    app = create_app(make_config())
    paths = {resource.canonical for resource in app.router.resources()}
    assert "/api/movies" in paths
    assert "/api/stream/{file}" in paths
    assert set(app[APP_KEY_SERVICES]) >= {"library", "streamer"}


def test_create_app_raises_when_services_fail(make_config, monkeypatch):
    monkeypatch.setattr(
        app_module,
        "build_services",
        lambda _cfg: Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "no services"),
    )
    with pytest.raises(RuntimeError, match="no services"):
        create_app(make_config())


@pytest.mark.asyncio
async def test_missing_service_answers_503(make_config, make_client):
    client = await make_client(make_config(), {"config": make_config()})
    resp = await client.get("/api/movies")
    assert resp.status == web.HTTPServiceUnavailable.status_code


def test_cli_flags_and_env_file(tmp_path, monkeypatch):
    for name in ("MVB_PORT", "MVB_HOST", "MVB_MEDIA_DIR", "MOVIE_DIR", "PORT"):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    env_file = tmp_path / "browser.env"
    env_file.write_text("MVB_PORT=5555\nMVB_HOST=127.0.0.1\n", encoding="utf-8")
    media = tmp_path / "films"

    args = _parse_args(["--env-file", str(env_file), "--media-dir", str(media)])
    cfg = build_config(args)
    assert cfg.port == 5555
    assert cfg.host == "127.0.0.1"
    assert cfg.media_dir == media.resolve()

    args = _parse_args(["--env-file", str(env_file), "--port", "7001"])
    assert build_config(args).port == 7001
