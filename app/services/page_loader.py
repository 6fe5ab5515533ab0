"""Server-side data loading for the list and detail pages.

Pages never talk to TMDb directly: they call this deployment's own proxy
endpoints over HTTP, exactly like the browser does on later page turns.
Endpoint failures become render-ready messages instead of exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.core.config import Settings
from app.services.models import MovieDetail, MovieSummary, PageResult

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost:8000"


@dataclass(slots=True)
class MovieListPage:
    movies: list[MovieSummary] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    error: str | None = None


@dataclass(slots=True)
class MovieDetailPage:
    movie: MovieDetail | None = None
    error: str | None = None
    not_found: bool = False


def resolve_api_base_url(settings: Settings, host_header: str | None) -> str:
    """Build the base address of the proxy endpoints for this deployment."""

    protocol = "https" if settings.is_production else "http"
    host = settings.vercel_url or host_header or DEFAULT_HOST
    return f"{protocol}://{host}"


def _parse_page(raw: str | int | None) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 1


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return fallback


class PageDataLoader:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            return await client.get(path, params=params)

    async def load_movie_list(self, page: str | None = None) -> MovieListPage:
        page = page or "1"
        requested = _parse_page(page)
        logger.info("Loading movie list from %s/api/getMovies?page=%s", self.base_url, page)
        try:
            response = await self._get("/api/getMovies", {"page": page})
        except httpx.HTTPError as exc:
            logger.error("Movie list request failed: %s", exc)
            return MovieListPage(page=requested, error=str(exc) or "加载电影时发生服务器内部错误。")

        if not response.is_success:
            logger.error("/api/getMovies failed with status %s", response.status_code)
            return MovieListPage(
                page=requested,
                error=_error_message(response, f"加载电影失败，状态码: {response.status_code}"),
            )

        try:
            result = PageResult.from_payload(response.json(), default_page=requested)
        except (ValueError, AttributeError) as exc:
            logger.error("/api/getMovies returned an unreadable body: %s", exc)
            return MovieListPage(page=requested, error="加载电影时发生服务器内部错误。")
        return MovieListPage(
            movies=result.results,
            page=_parse_page(result.page),
            total_pages=result.total_pages,
        )

    async def load_movie_detail(self, movie_id: str) -> MovieDetailPage:
        logger.info("Loading movie detail from %s/api/getMovieDetails?id=%s", self.base_url, movie_id)
        try:
            response = await self._get("/api/getMovieDetails", {"id": movie_id})
        except httpx.HTTPError as exc:
            logger.error("Movie detail request for %s failed: %s", movie_id, exc)
            return MovieDetailPage(error="加载电影详情时发生服务器内部错误。")

        if response.status_code == 404:
            return MovieDetailPage(
                error=f"ID 为 {movie_id} 的电影未找到。请检查 ID 或返回首页。",
                not_found=True,
            )
        if not response.is_success:
            logger.error("/api/getMovieDetails failed for %s: %s", movie_id, response.status_code)
            return MovieDetailPage(
                error=_error_message(response, f"加载电影详情失败，状态码: {response.status_code}"),
            )
        try:
            movie = MovieDetail.from_payload(response.json())
        except (ValueError, AttributeError) as exc:
            logger.error("/api/getMovieDetails returned an unreadable body for %s: %s", movie_id, exc)
            return MovieDetailPage(error="加载电影详情时发生服务器内部错误。")
        return MovieDetailPage(movie=movie)
