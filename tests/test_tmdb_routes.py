import pytest

from watchtrack.api.deps import get_search_controller
from watchtrack.main import app as fastapi_app
from watchtrack.schemas.tmdb import MovieResult, TvResult
from watchtrack.services.search import GENERIC_SEARCH_ERROR
from watchtrack.services.search_controller import SearchController, SearchPhase
from watchtrack.services.tmdb import TMDBStatusError


@pytest.fixture
def search_controller_override():
    controllers: list[SearchController] = []

    def _install(pipeline):
        async def _override():
            controller = SearchController(pipeline=pipeline)
            controllers.append(controller)
            return controller

        fastapi_app.dependency_overrides[get_search_controller] = _override
        return controllers

    yield _install
    fastapi_app.dependency_overrides.pop(get_search_controller, None)


@pytest.mark.anyio
async def test_health(async_client):
    r = await async_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_tmdb_search_returns_cards(async_client, search_controller_override):
    async def fake_pipeline(query: str):
        assert query == "dune"
        return [
            MovieResult(
                media_type="movie",
                id=1,
                title="Dune",
                poster_path="/x.jpg",
                release_date="2021-10-22",
                overview="...",
            ),
            TvResult(
                media_type="tv",
                id=2,
                name="Dune: Prophecy",
                poster_path=None,
                first_air_date="",
                overview="",
            ),
        ]

    controllers = search_controller_override(fake_pipeline)

    r = await async_client.get("/tmdb/search", params={"query": "  dune "})
    assert r.status_code == 200, r.text
    data = r.json()

    assert len(controllers) == 1
    assert controllers[0].view().phase is SearchPhase.SUCCESS
    assert data["status"] == "success"
    assert data["items"][0] == {
        "key": "movie-1",
        "tmdb_id": 1,
        "media_type": "movie",
        "title": "Dune",
        "year": 2021,
        "year_label": "2021",
        "type_label": "Movie",
        "overview": "...",
        "poster_path": "/x.jpg",
        "poster_url": "https://image.tmdb.org/t/p/w342/x.jpg",
    }
    assert data["items"][1]["key"] == "tv-2"
    assert data["items"][1]["year"] is None
    assert data["items"][1]["year_label"] == "N/A"
    assert data["items"][1]["type_label"] == "TV Show"
    assert data["items"][1]["poster_url"] is None


@pytest.mark.anyio
async def test_tmdb_search_reports_generic_error(async_client, search_controller_override):
    async def fake_pipeline(query: str):
        raise TMDBStatusError(500, "Internal Server Error")

    controllers = search_controller_override(fake_pipeline)

    r = await async_client.get("/tmdb/search", params={"query": "dune"})
    assert r.status_code == 200
    assert r.json() == {"status": "error", "message": GENERIC_SEARCH_ERROR}
    assert controllers[0].view().phase is SearchPhase.ERROR


@pytest.mark.anyio
@pytest.mark.parametrize("params", [{}, {"query": ""}, {"query": "   "}])
async def test_tmdb_search_ignores_blank_query(async_client, search_controller_override, params):
    calls: list[str] = []

    async def fake_pipeline(query: str):
        calls.append(query)
        return []

    controllers = search_controller_override(fake_pipeline)

    r = await async_client.get("/tmdb/search", params=params)
    assert r.status_code == 204
    assert r.content == b""
    assert calls == []
    assert controllers[0].view().phase is SearchPhase.IDLE


@pytest.mark.anyio
async def test_tmdb_search_upstream_500_hides_details(async_client, monkeypatch):
    import httpx

    from watchtrack.services import search as search_service
    from watchtrack.services.tmdb import TMDBSearchClient

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="database password leaked here")

    def fake_from_settings(cls, *args, **kwargs):
        return TMDBSearchClient("k", transport=httpx.MockTransport(handler))

    monkeypatch.setattr(search_service.TMDBSearchClient, "from_settings", classmethod(fake_from_settings))

    r = await async_client.get("/tmdb/search", params={"query": "dune"})
    assert r.status_code == 200
    assert r.json() == {"status": "error", "message": GENERIC_SEARCH_ERROR}
    assert "password" not in r.text


@pytest.mark.anyio
async def test_title_action_is_acknowledged_but_not_persisted(async_client):
    r = await async_client.post("/tmdb/movie/603/actions/watchlist")
    assert r.status_code == 202, r.text
    assert r.json() == {
        "action": "watchlist",
        "media_type": "movie",
        "tmdb_id": 603,
        "persisted": False,
    }


@pytest.mark.anyio
@pytest.mark.parametrize(
    "path",
    [
        "/tmdb/person/1/actions/watched",
        "/tmdb/movie/1/actions/delete",
        "/tmdb/tv/0/actions/rate_up",
    ],
)
async def test_title_action_rejects_invalid_input(async_client, path):
    r = await async_client.post(path)
    assert r.status_code == 422
