import pytest

from ..fakes import FakeCatalog, FakeProber, build_services, matched


@pytest.mark.asyncio
async def test_movies_returns_plain_array(make_config, make_client, media_dir):
    (media_dir / "Heat.1995.1080p.mkv").write_bytes(b"x")
    (media_dir / "readme.txt").write_text("ignored")
    config = make_config()
    services = build_services(
        config,
        catalog=FakeCatalog({"Heat": matched("Heat", year="1995", overview="Cops and robbers.")}),
        prober=FakeProber({"Heat.1995.1080p.mkv": 10227.0}),
    )
    client = await make_client(config, services)

    resp = await client.get("/api/movies")
    assert resp.status == 200
    assert resp.headers["Content-Type"].startswith("application/json")
    assert resp.headers["Cache-Control"] == "no-store"
    body = await resp.json()
    assert body == [
        {
            "file": "Heat.1995.1080p.mkv",
            "title": "Heat",
            "overview": "Cops and robbers.",
            "poster": "",
            "year": "1995",
            "duration": 10227.0,
        }
    ]


@pytest.mark.asyncio
async def test_movies_empty_directory_is_empty_array(make_config, make_client):
    config = make_config()
    client = await make_client(config, build_services(config))
    resp = await client.get("/api/movies")
    assert resp.status == 200
    assert await resp.json() == []


@pytest.mark.asyncio
async def test_movies_unreadable_directory_is_500_without_path(make_config, make_client, tmp_path):
    missing = tmp_path / "nowhere"
    config = make_config(media_dir=missing)
    client = await make_client(config, build_services(config))

    resp = await client.get("/api/movies")
    assert resp.status == 500
    body = await resp.json()
    assert body["ok"] is False
    assert body["code"] == "DIRECTORY_UNREADABLE"
    assert str(missing) not in await resp.text()


@pytest.mark.asyncio
async def test_movies_carries_request_id_and_cors_headers(make_config, make_client):
    config = make_config()
    client = await make_client(config, build_services(config))

    resp = await client.get("/api/movies", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"

    generated = await client.get("/api/movies")
    assert len(generated.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_cors_preflight_is_answered(make_config, make_client):
    config = make_config(cors_origin="http://localhost:3000")
    client = await make_client(config, build_services(config))

    resp = await client.options("/api/stream/anything.mp4")
    assert resp.status == 204
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert "Range" in resp.headers["Access-Control-Allow-Headers"]
    assert resp.headers["Vary"] == "Origin"


@pytest.mark.asyncio
async def test_cors_can_be_disabled(make_config, make_client):
    config = make_config(cors_origin="")
    client = await make_client(config, build_services(config))
    resp = await client.get("/api/movies")
    assert "Access-Control-Allow-Origin" not in resp.headers
