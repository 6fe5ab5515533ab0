"""FastAPI entrypoint wiring the TMDb proxy endpoints and the rendered pages."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_settings
from app.core.deps import get_tmdb_client
from app.routers import movies_api, pages
from app.services.tmdb import TMDbClient

logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# httpx logs full request URLs, which carry the api_key query parameter
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Report which TMDb credential will be used before serving."""

    settings = get_settings()
    mode = TMDbClient.from_settings(settings).credential_mode
    if mode is None:
        logger.warning("Neither TMDB_ACCESS_TOKEN nor TMDB_API_KEY is set; TMDb calls will fail")
    logger.info("Application started: env=%s tmdb_auth=%s", settings.app_env, mode)
    yield
    logger.info("Application shutting down")


app = FastAPI(title="TMDb Movie Browser", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.0f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": f"Method {request.method} Not Allowed"},
            headers={"Allow": "GET"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "An internal error occurred. Please try again."},
    )


@app.get("/health", tags=["system"])
async def health(client: TMDbClient = Depends(get_tmdb_client), settings: Settings = Depends(get_settings)):
    return {"status": "ok", "env": settings.app_env, "credential_mode": client.credential_mode}


app.include_router(movies_api.router)
app.include_router(pages.router)
