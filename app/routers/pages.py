"""Server-rendered list and detail pages."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates

from app.core.config import Settings, get_settings
from app.core.deps import get_page_loader
from app.services.page_loader import PageDataLoader
from app.services.pagination import PaginationController

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/")
async def movie_list_page(
    request: Request,
    page: str | None = None,
    loader: PageDataLoader = Depends(get_page_loader),
    settings: Settings = Depends(get_settings),
):
    initial = await loader.load_movie_list(page)
    controller = PaginationController.seed(initial)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "movies": controller.movies,
            "pagination": controller,
            "initial_state": controller.snapshot(),
            "image_base": settings.tmdb_image_base,
        },
    )


@router.get("/movie/{movie_id}")
async def movie_detail_page(
    request: Request,
    movie_id: str,
    loader: PageDataLoader = Depends(get_page_loader),
    settings: Settings = Depends(get_settings),
):
    result = await loader.load_movie_detail(movie_id)
    if result.not_found:
        return templates.TemplateResponse(
            request, "movie_not_found.html", {"movie_id": movie_id, "message": result.error}
        )
    if result.error or result.movie is None:
        return templates.TemplateResponse(
            request, "movie_error.html", {"movie_id": movie_id, "message": result.error}
        )
    return templates.TemplateResponse(
        request,
        "movie.html",
        {"movie": result.movie, "image_base": settings.tmdb_image_base},
    )
