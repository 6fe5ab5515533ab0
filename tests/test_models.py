from app.services.models import (
    CAST_DISPLAY_LIMIT,
    ErrorEnvelope,
    MovieDetail,
    MovieSummary,
    PageResult,
)

from conftest import details_payload, popular_payload

IMAGE_BASE = "https://image.tmdb.org/t/p/"


def test_summary_labels_and_poster():
    movie = MovieSummary.from_payload(popular_payload()["results"][0])

    assert movie.release_year == "2024"
    assert movie.rating_label == "7.6"
    assert movie.poster_url(IMAGE_BASE) == "https://image.tmdb.org/t/p/w200/poster0.jpg"


def test_summary_fallbacks():
    movie = MovieSummary.from_payload({"id": 5, "title": "X", "vote_average": 0})

    assert movie.release_year == "N/A"
    assert movie.rating_label == "N/A"
    assert movie.poster_url(IMAGE_BASE) == "/static/placeholder.svg"


def test_detail_from_payload_truncates_cast_for_display():
    movie = MovieDetail.from_payload(details_payload())

    assert movie.genres == ["剧情"]
    assert movie.runtime_label == "139 分钟"
    assert len(movie.cast) == 15
    assert len(movie.top_cast) == CAST_DISPLAY_LIMIT
    assert movie.top_cast[0].profile_url(IMAGE_BASE) == "/static/placeholder_person.svg"
    assert movie.poster_url(IMAGE_BASE) == "https://image.tmdb.org/t/p/w300/fight.jpg"


def test_detail_fallbacks():
    movie = MovieDetail.from_payload({"id": 1, "title": "空"})

    assert movie.runtime_label == "未知时长"
    assert movie.genres_label == "未知类型"
    assert movie.overview_label == "暂无简介"
    assert movie.release_date_label == "未知"
    assert movie.tagline is None and movie.homepage is None
    assert movie.top_cast == []


def test_page_result_defaults():
    result = PageResult.from_payload({}, default_page=3)

    assert result.results == []
    assert result.page == 3
    assert result.total_pages == 1


def test_error_envelope_omits_empty_fields():
    assert ErrorEnvelope(message="x").as_dict() == {"message": "x"}
    assert ErrorEnvelope(message="x", tmdb_error="y").as_dict() == {"message": "x", "tmdb_error": "y"}
