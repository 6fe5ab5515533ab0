"""Pagination state machine for the popular-movies list.

The list page seeds a controller from the server-side load and embeds its
snapshot; ``static/pagination.js`` drives the same transitions in the
browser. The Python controller is usable by any async client of the list
endpoint.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

import httpx

from app.services.models import MovieSummary, PageResult
from app.services.page_loader import MovieListPage

logger = logging.getLogger(__name__)


class PaginationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class PaginationController:
    """Fetch pages of ``/api/getMovies`` with at most one request in flight."""

    def __init__(
        self,
        *,
        movies: list[MovieSummary],
        page: int,
        total_pages: int,
        error: str | None = None,
        client: httpx.AsyncClient | None = None,
        on_page_loaded: Callable[[], None] | None = None,
    ) -> None:
        self.movies = movies
        self.page = page
        self.total_pages = total_pages
        self.error = error
        self.status = PaginationStatus.ERROR if error else PaginationStatus.IDLE
        self._client = client
        self._on_page_loaded = on_page_loaded

    @classmethod
    def seed(cls, initial: MovieListPage, **kwargs: Any) -> PaginationController:
        return cls(
            movies=list(initial.movies),
            page=initial.page,
            total_pages=initial.total_pages,
            error=initial.error,
            **kwargs,
        )

    @property
    def loading(self) -> bool:
        return self.status is PaginationStatus.LOADING

    @property
    def has_prev(self) -> bool:
        return self.page > 1 and not self.loading

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages and not self.loading

    def can_go_to(self, page: int) -> bool:
        return not self.loading and 1 <= page <= self.total_pages

    async def go_to(self, page: int) -> bool:
        """Load ``page``; returns False when the request was dropped."""

        if not self.can_go_to(page):
            logger.debug("Ignoring page turn to %s (page=%s/%s status=%s)", page, self.page, self.total_pages, self.status.value)
            return False
        if self._client is None:
            raise RuntimeError("PaginationController has no HTTP client")

        self.status = PaginationStatus.LOADING
        self.error = None
        try:
            response = await self._client.get("/api/getMovies", params={"page": str(page)})
        except httpx.HTTPError as exc:
            logger.error("Page %s request failed: %s", page, exc)
            self._fail(str(exc) or "加载电影时发生错误。")
            return True

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("message") if isinstance(body, dict) else None
            self._fail(message or f"请求失败，状态码: {response.status_code}")
            return True

        try:
            result = PageResult.from_payload(
                response.json(),
                default_page=page,
                default_total_pages=self.total_pages,
            )
        except (ValueError, AttributeError) as exc:
            logger.error("Page %s returned an unreadable body: %s", page, exc)
            self._fail("加载电影时发生错误。")
            return True

        self.movies = result.results
        self.page = result.page
        self.total_pages = result.total_pages
        self.status = PaginationStatus.IDLE
        if self._on_page_loaded is not None:
            self._on_page_loaded()
        return True

    async def next_page(self) -> bool:
        return await self.go_to(self.page + 1)

    async def prev_page(self) -> bool:
        return await self.go_to(self.page - 1)

    def _fail(self, message: str) -> None:
        # previous movies stay visible
        self.status = PaginationStatus.ERROR
        self.error = message

    def snapshot(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "page": self.page,
            "totalPages": self.total_pages,
            "error": self.error,
        }
