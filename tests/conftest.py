import sys
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    root = tmp_path / "movies"
    root.mkdir()
    return root


@pytest.fixture
def make_config(media_dir):
    from mvb_backend.config import BrowserConfig

    def _make(**overrides):
        values = {"media_dir": media_dir, "max_concurrency": 4, "stream_chunk_size": 4096}
        values.update(overrides)
        return BrowserConfig(**values)

    return _make


@pytest_asyncio.fixture
async def make_client():
    """Start a TestClient for an app built from a config and (fake) services."""
    from mvb_backend.app import create_app

    clients: list[TestClient] = []

    async def _make(config, services) -> TestClient:
        client = TestClient(TestServer(create_app(config, services=services)))
        await client.start_server()
        clients.append(client)
        return client

    try:
        yield _make
    finally:
        for client in clients:
            await client.close()
