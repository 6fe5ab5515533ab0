"""FastAPI dependencies shared by the API and page routers."""

from __future__ import annotations

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.services.page_loader import PageDataLoader, resolve_api_base_url
from app.services.tmdb import TMDbClient


def get_tmdb_client(settings: Settings = Depends(get_settings)) -> TMDbClient:
    return TMDbClient.from_settings(settings)


def get_page_loader(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> PageDataLoader:
    """Loader that calls this deployment's own proxy endpoints."""

    base_url = resolve_api_base_url(settings, request.headers.get("host"))
    return PageDataLoader(base_url, timeout=settings.tmdb_timeout + 5.0)
