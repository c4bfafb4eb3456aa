import os

import pytest
from httpx import ASGITransport, AsyncClient

# IMPORTANT:
# Set env vars BEFORE importing watchtrack.main (pydantic settings load at import time)
os.environ["ENV"] = "test"
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:5173")

from watchtrack.main import app as fastapi_app  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def async_client(client):
    yield client


@pytest.fixture
def movie_payload():
    def _make(**overrides):
        payload = {
            "media_type": "movie",
            "id": 438631,
            "title": "Dune",
            "poster_path": "/x.jpg",
            "release_date": "2021-10-22",
            "overview": "Paul Atreides leads nomadic tribes.",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def tv_payload():
    def _make(**overrides):
        payload = {
            "media_type": "tv",
            "id": 1399,
            "name": "Game of Thrones",
            "poster_path": "/got.jpg",
            "first_air_date": "2011-04-17",
            "overview": "Seven noble families fight for control.",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def envelope():
    def _make(results, /, **overrides):
        payload = {
            "page": 1,
            "results": results,
            "total_pages": 1,
            "total_results": len(results),
        }
        payload.update(overrides)
        return payload

    return _make
