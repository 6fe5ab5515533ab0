"""JSON proxy endpoints forwarding TMDb responses to the pages and the browser."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.deps import get_tmdb_client
from app.services.models import ErrorEnvelope
from app.services.tmdb import (
    TMDbClient,
    TMDbConfigurationError,
    TMDbNotFound,
    TMDbOk,
    TMDbRejected,
    TMDbResult,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["movies"])

CONFIG_ERROR_MESSAGE = "Server configuration error: TMDb credentials missing."
TRANSPORT_ERROR_MESSAGE = "Internal Server Error while fetching from TMDb."
HIDDEN_DETAILS = "Error details hidden in production"
UNAUTHORIZED_MESSAGE = "TMDb API密钥认证失败。请检查API密钥是否正确设置。"


def _error(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.as_dict())


def _translate(result: TMDbResult, settings: Settings) -> JSONResponse:
    """Map a non-success TMDb result to the proxy's error response."""

    if isinstance(result, TMDbRejected):
        message = f"Failed to fetch data from TMDb. Status: {result.status_code}"
        if result.status_code == status.HTTP_401_UNAUTHORIZED:
            message = UNAUTHORIZED_MESSAGE
        return _error(result.status_code, ErrorEnvelope(message=message, tmdb_error=result.message))

    details = HIDDEN_DETAILS if settings.is_production else result.message
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(message=TRANSPORT_ERROR_MESSAGE, error_details=details),
    )


def _configuration_error(exc: TMDbConfigurationError) -> JSONResponse:
    logger.error("TMDb credentials are not configured: %s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorEnvelope(message=CONFIG_ERROR_MESSAGE))


@router.get("/getMovies")
async def get_movies(
    page: str | None = Query(None, description="1-based page number, forwarded to TMDb as-is"),
    client: TMDbClient = Depends(get_tmdb_client),
    settings: Settings = Depends(get_settings),
):
    """Return one page of popular movies exactly as TMDb sent it."""

    page = page or "1"
    try:
        result = await client.popular_movies(page)
    except TMDbConfigurationError as exc:
        return _configuration_error(exc)

    if isinstance(result, TMDbOk):
        logger.info("Fetched popular movies page %s (%d results)", page, len(result.data.get("results") or []))
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.data)
    return _translate(result, settings)


@router.get("/getMovieDetails")
async def get_movie_details(
    movie_id: str | None = Query(None, alias="id", description="TMDb movie id"),
    client: TMDbClient = Depends(get_tmdb_client),
    settings: Settings = Depends(get_settings),
):
    """Return a movie's details with its credits embedded."""

    if not movie_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bad Request: Movie ID is required.",
        )

    try:
        result = await client.movie_details(movie_id)
    except TMDbConfigurationError as exc:
        return _configuration_error(exc)

    if isinstance(result, TMDbOk):
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.data)
    if isinstance(result, TMDbNotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Movie with ID {movie_id} not found.",
        )
    return _translate(result, settings)
