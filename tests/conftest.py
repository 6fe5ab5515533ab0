import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.core.deps import get_page_loader, get_tmdb_client
from app.main import app
from app.services.page_loader import PageDataLoader
from app.services.tmdb import TMDbClient


class FakeTMDb:
    """MockTransport handler that records every upstream request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, httpx.Response] = {}
        self.error: Exception | None = None

    def add(self, path: str, status_code: int = 200, json=None, text: str | None = None):
        if text is not None:
            self.routes[path] = httpx.Response(status_code, text=text)
        else:
            self.routes[path] = httpx.Response(status_code, json=json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        path = request.url.path.removeprefix("/3")
        if path in self.routes:
            return self.routes[path]
        return httpx.Response(404, json={"status_code": 34, "status_message": "The resource you requested could not be found."})

    @property
    def calls(self) -> int:
        return len(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def popular_payload(page: int = 1, total_pages: int = 50, count: int = 20) -> dict:
    return {
        "page": page,
        "results": [
            {
                "id": page * 100 + i,
                "title": f"电影 {page}-{i}",
                "poster_path": f"/poster{i}.jpg",
                "release_date": "2024-05-01",
                "vote_average": 7.6,
            }
            for i in range(count)
        ],
        "total_pages": total_pages,
        "total_results": total_pages * count,
    }


def details_payload(movie_id: int = 550, **overrides) -> dict:
    payload = {
        "id": movie_id,
        "title": "搏击俱乐部",
        "poster_path": "/fight.jpg",
        "release_date": "1999-10-15",
        "vote_average": 8.4,
        "vote_count": 27000,
        "runtime": 139,
        "genres": [{"id": 18, "name": "剧情"}],
        "tagline": "Mischief. Mayhem. Soap.",
        "overview": "A ticking-time-bomb insomniac...",
        "homepage": "http://www.foxmovies.com/movies/fight-club",
        "credits": {
            "cast": [
                {"id": i, "name": f"Actor {i}", "character": f"Role {i}", "profile_path": None}
                for i in range(15)
            ],
            "crew": [],
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings():
    return Settings(
        TMDB_API_KEY="test-api-key-1234",
        TMDB_ACCESS_TOKEN=None,
        TMDB_BASE_URL="https://tmdb.test/3",
        APP_ENV="development",
        VERCEL_URL=None,
    )


@pytest.fixture
def fake_tmdb():
    return FakeTMDb()


@pytest.fixture
def client(settings, fake_tmdb):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_tmdb_client] = lambda: TMDbClient.from_settings(
        settings, transport=fake_tmdb.transport()
    )
    app.dependency_overrides[get_page_loader] = lambda: PageDataLoader(
        "http://testserver", transport=httpx.ASGITransport(app=app)
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
