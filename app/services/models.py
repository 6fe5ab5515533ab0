"""Shared dataclasses for service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

POSTER_PLACEHOLDER = "/static/placeholder.svg"
PERSON_PLACEHOLDER = "/static/placeholder_person.svg"
CAST_DISPLAY_LIMIT = 10


def build_image_url(image_base: str, size: str, path: str | None, *, placeholder: str) -> str:
    if not path:
        return placeholder
    return f"{image_base.rstrip('/')}/{size}{path}"


def _format_rating(vote_average: float | None) -> str:
    # TMDb reports unrated titles as 0
    if not vote_average:
        return "N/A"
    return f"{vote_average:.1f}"


@dataclass(slots=True)
class MovieSummary:
    """One entry of the popular-movies list."""

    id: int
    title: str
    poster_path: str | None = None
    release_date: str | None = None
    vote_average: float | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MovieSummary:
        return cls(
            id=payload.get("id"),
            title=payload.get("title") or "",
            poster_path=payload.get("poster_path"),
            release_date=payload.get("release_date"),
            vote_average=payload.get("vote_average"),
        )

    @property
    def release_year(self) -> str:
        return self.release_date[:4] if self.release_date else "N/A"

    @property
    def rating_label(self) -> str:
        return _format_rating(self.vote_average)

    def poster_url(self, image_base: str, size: str = "w200") -> str:
        return build_image_url(image_base, size, self.poster_path, placeholder=POSTER_PLACEHOLDER)


@dataclass(slots=True)
class CastMember:
    name: str
    character: str | None = None
    profile_path: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CastMember:
        return cls(
            name=payload.get("name") or "",
            character=payload.get("character"),
            profile_path=payload.get("profile_path"),
        )

    def profile_url(self, image_base: str, size: str = "w185") -> str:
        return build_image_url(image_base, size, self.profile_path, placeholder=PERSON_PLACEHOLDER)


@dataclass(slots=True)
class MovieDetail:
    """Movie details with the cast embedded by ``append_to_response=credits``."""

    id: int
    title: str
    poster_path: str | None = None
    release_date: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    runtime: int | None = None
    genres: list[str] = field(default_factory=list)
    tagline: str | None = None
    overview: str | None = None
    homepage: str | None = None
    cast: list[CastMember] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MovieDetail:
        credits = payload.get("credits") or {}
        return cls(
            id=payload.get("id"),
            title=payload.get("title") or "",
            poster_path=payload.get("poster_path"),
            release_date=payload.get("release_date"),
            vote_average=payload.get("vote_average"),
            vote_count=payload.get("vote_count"),
            runtime=payload.get("runtime"),
            genres=[g["name"] for g in payload.get("genres") or [] if g.get("name")],
            tagline=payload.get("tagline") or None,
            overview=payload.get("overview"),
            homepage=payload.get("homepage") or None,
            cast=[CastMember.from_payload(c) for c in credits.get("cast") or []],
        )

    @property
    def release_year(self) -> str:
        return self.release_date[:4] if self.release_date else "N/A"

    @property
    def release_date_label(self) -> str:
        return self.release_date or "未知"

    @property
    def rating_label(self) -> str:
        return _format_rating(self.vote_average)

    @property
    def runtime_label(self) -> str:
        return f"{self.runtime} 分钟" if self.runtime else "未知时长"

    @property
    def genres_label(self) -> str:
        return ", ".join(self.genres) if self.genres else "未知类型"

    @property
    def overview_label(self) -> str:
        return self.overview or "暂无简介"

    @property
    def top_cast(self) -> list[CastMember]:
        return self.cast[:CAST_DISPLAY_LIMIT]

    def poster_url(self, image_base: str, size: str = "w300") -> str:
        return build_image_url(image_base, size, self.poster_path, placeholder=POSTER_PLACEHOLDER)


@dataclass(slots=True)
class PageResult:
    """Paginated popular-movies response (``results``, ``page``, ``total_pages``)."""

    results: list[MovieSummary]
    page: int
    total_pages: int

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        *,
        default_page: int = 1,
        default_total_pages: int = 1,
    ) -> PageResult:
        return cls(
            results=[MovieSummary.from_payload(item) for item in payload.get("results") or []],
            page=payload.get("page") or default_page,
            total_pages=payload.get("total_pages") or default_total_pages,
        )


@dataclass(slots=True)
class ErrorEnvelope:
    message: str
    tmdb_error: str | None = None
    error_details: str | None = None

    def as_dict(self) -> dict[str, str]:
        body = {"message": self.message}
        if self.tmdb_error is not None:
            body["tmdb_error"] = self.tmdb_error
        if self.error_details is not None:
            body["error_details"] = self.error_details
        return body
