import httpx
import pytest
from httpx import ASGITransport

from hotpepper.config import Settings


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("WORKER_DELAY", "0")
    monkeypatch.setenv("CHUNK_DELAY", "0")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")


@pytest.fixture
def settings():
    return Settings(worker_delay=0, chunk_delay=0)


@pytest.fixture
async def client(mock_env):
    from hotpepper.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
