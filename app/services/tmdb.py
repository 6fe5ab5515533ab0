"""Thin async wrapper around the TMDb API used by the proxy endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import logging

import httpx

from app.core.config import Settings


logger = logging.getLogger(__name__)

UNKNOWN_TMDB_ERROR = "Unknown TMDb error"


class TMDbError(Exception):
    """Base exception for TMDb-related failures."""


class TMDbConfigurationError(TMDbError):
    """Raised when neither an access token nor an API key is configured."""


@dataclass(slots=True)
class TMDbOk:
    data: Any


@dataclass(slots=True)
class TMDbNotFound:
    status_code: int = 404


@dataclass(slots=True)
class TMDbRejected:
    status_code: int
    message: str


@dataclass(slots=True)
class TMDbTransportError:
    message: str


TMDbResult = Union[TMDbOk, TMDbNotFound, TMDbRejected, TMDbTransportError]


def mask_secret(value: str | None) -> str:
    """Fingerprint a credential for logs without revealing it."""

    if not value:
        return "undefined"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-4:]}"


class TMDbClient:
    """TMDb HTTP client preferring bearer access tokens over legacy API keys."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        access_token: str | None = None,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "zh-CN",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = (api_key or "").strip() or None
        self.access_token = (access_token or "").strip() or None
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TMDbClient:
        return cls(
            api_key=settings.tmdb_api_key,
            access_token=settings.tmdb_access_token,
            base_url=settings.tmdb_base_url,
            language=settings.tmdb_language,
            timeout=settings.tmdb_timeout,
            transport=transport,
        )

    @property
    def credential_mode(self) -> str | None:
        if self.access_token:
            return "access_token"
        if self.api_key:
            return "api_key"
        return None

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        """Return (headers, query params) carrying the configured credential."""

        mode = self.credential_mode
        if mode == "access_token":
            return {"Authorization": f"Bearer {self.access_token}"}, {}
        if mode == "api_key":
            return {}, {"api_key": self.api_key}
        raise TMDbConfigurationError("TMDB_ACCESS_TOKEN or TMDB_API_KEY must be configured")

    async def popular_movies(self, page: str = "1") -> TMDbResult:
        """Fetch one page of ``/movie/popular``; ``page`` is forwarded as-is."""

        return await self._get("/movie/popular", params={"page": page})

    async def movie_details(self, movie_id: str) -> TMDbResult:
        """Fetch details and credits for a movie in a single request."""

        if not (movie_id.isascii() and movie_id.isdigit()):
            # TMDb ids are numeric; anything else would address another resource
            self._auth()
            logger.info("Rejecting non-numeric movie id %r without calling TMDb", movie_id)
            return TMDbNotFound()
        result = await self._get(
            f"/movie/{movie_id}",
            params={"append_to_response": "credits"},
        )
        if isinstance(result, TMDbRejected) and result.status_code == 404:
            return TMDbNotFound()
        return result

    async def _get(self, path: str, *, params: dict[str, Any]) -> TMDbResult:
        headers, query = self._auth()
        headers["Accept"] = "application/json"
        query["language"] = self.language
        query.update({k: v for k, v in params.items() if v is not None})
        url = f"{self.base_url}{path}"

        logger.info("TMDb GET %s params=%s auth=%s", path, params, self.credential_mode)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=query, headers=headers)
                if response.is_success:
                    return TMDbOk(response.json())
        except httpx.HTTPError as exc:
            logger.error("TMDb request to %s failed: %s", path, exc)
            return TMDbTransportError(str(exc) or exc.__class__.__name__)
        except ValueError as exc:
            logger.error("TMDb returned non-JSON body for %s: %s", path, exc)
            return TMDbTransportError("TMDb returned a non-JSON response")

        return self._rejected(path, response)

    def _rejected(self, path: str, response: httpx.Response) -> TMDbRejected:
        status_code = response.status_code
        try:
            body = response.json()
            message = body.get("status_message") or UNKNOWN_TMDB_ERROR
        except (ValueError, AttributeError):
            message = UNKNOWN_TMDB_ERROR
        logger.error("TMDb request to %s failed with status %s: %s", path, status_code, message)
        if status_code == 401:
            secret = self.access_token if self.credential_mode == "access_token" else self.api_key
            logger.error(
                "TMDb rejected the %s credential. Masked value: %s",
                self.credential_mode,
                mask_secret(secret),
            )
        return TMDbRejected(status_code=status_code, message=message)
