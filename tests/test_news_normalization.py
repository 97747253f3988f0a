from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.news_normalization import (
    FIELD_RULES,
    PLACEHOLDER_IMAGE_URL,
    PLACEHOLDER_URL,
    REMOVED_MARKER,
    UNKNOWN_SOURCE,
    ArticleShape,
    apply_field_rules,
    detect_shape,
    extract_candidates,
    is_publishable,
    normalize_articles,
)
from tests.fixtures import make_newsapi_article, make_newsdata_article

NOW = datetime(2024, 1, 20, 9, 0, tzinfo=timezone.utc)


def test_detect_shape_by_link_field():
    assert detect_shape(make_newsapi_article()) is ArticleShape.NEWSAPI
    assert detect_shape(make_newsdata_article()) is ArticleShape.NEWSDATA


def test_extract_candidates_from_either_envelope():
    assert len(extract_candidates({"articles": [make_newsapi_article()]})) == 1
    assert len(extract_candidates({"results": [make_newsdata_article(), "junk"]})) == 1
    assert extract_candidates({"status": "ok"}) == []
    assert extract_candidates(["not", "a", "mapping"]) == []


def test_newsapi_article_maps_all_fields():
    articles = normalize_articles({"articles": [make_newsapi_article()]}, category="weather", now=NOW)

    assert len(articles) == 1
    article = articles[0]
    assert article.title == "Storm season starts early"
    assert article.description == "Forecasters warn of an active season."
    assert article.url == "https://news.test/storm"
    assert article.image_url == "https://news.test/storm.jpg"
    assert article.published_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert article.source == "Weather Daily"
    assert article.category == "weather"
    assert article.id == "2024-01-15T10:30:00+00:00-0"


def test_newsdata_article_maps_all_fields():
    articles = normalize_articles({"results": [make_newsdata_article()]}, category="environment", now=NOW)

    article = articles[0]
    assert article.url == "https://newsdata.test/heatwave"
    assert article.image_url == "https://newsdata.test/heatwave.jpg"
    assert article.published_at == datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)
    assert article.source == "coastal_times"
    assert article.category == "environment"


def test_newsdata_prefers_source_name_over_id():
    record = make_newsdata_article()
    record["source_name"] = "Coastal Times"

    fields = apply_field_rules(record, ArticleShape.NEWSDATA, NOW)

    assert fields["source"] == "Coastal Times"


@pytest.mark.parametrize(
    "record, shape",
    [
        (make_newsapi_article(url_to_image=None, published_at=None, source_name=None), ArticleShape.NEWSAPI),
        (make_newsdata_article(image_url=None, pub_date=None, source_id=None), ArticleShape.NEWSDATA),
    ],
)
def test_field_fallbacks(record, shape):
    fields = apply_field_rules(record, shape, NOW)

    assert fields["image_url"] == PLACEHOLDER_IMAGE_URL
    assert fields["published_at"] == NOW
    assert fields["source"] == UNKNOWN_SOURCE


def test_url_fallback_rule_is_placeholder():
    record = make_newsapi_article(url=None)

    fields = apply_field_rules(record, ArticleShape.NEWSAPI, NOW)

    assert fields["url"] == PLACEHOLDER_URL


def test_unparseable_publish_time_falls_back_to_processing_time():
    fields = apply_field_rules(make_newsapi_article(published_at="yesterday-ish"), ArticleShape.NEWSAPI, NOW)

    assert fields["published_at"] == NOW


def test_title_and_description_rules_are_required():
    for rules in FIELD_RULES.values():
        required = {rule.target for rule in rules if rule.required}
        assert required == {"title", "description"}


@pytest.mark.parametrize(
    "record",
    [
        make_newsapi_article(title=None),
        make_newsapi_article(description=None),
        make_newsapi_article(title="   "),
        make_newsapi_article(title=REMOVED_MARKER),
        make_newsapi_article(description=REMOVED_MARKER),
        make_newsapi_article(url=None),
        make_newsdata_article(link=None),
        make_newsdata_article(description=""),
    ],
)
def test_incomplete_articles_are_not_publishable(record):
    assert is_publishable(record) is False


def test_filtering_keeps_upstream_order_and_reindexes_ids():
    payload = {
        "articles": [
            make_newsapi_article(title="A", url="https://news.test/a"),
            make_newsapi_article(title=REMOVED_MARKER),
            make_newsapi_article(title="B", url="https://news.test/b", published_at="2024-01-14T08:00:00Z"),
            make_newsapi_article(title="C", description=None),
        ]
    }

    articles = normalize_articles(payload, category="general", now=NOW)

    assert [a.title for a in articles] == ["A", "B"]
    assert articles[0].id.endswith("-0")
    assert articles[1].id == "2024-01-14T08:00:00+00:00-1"
    for article in articles:
        assert article.title and article.description
        assert REMOVED_MARKER not in (article.title, article.description)


def test_empty_listing_is_not_an_error():
    assert normalize_articles({"articles": []}, category="general", now=NOW) == []


def test_serialized_article_uses_wire_names():
    article = normalize_articles({"articles": [make_newsapi_article()]}, category="weather", now=NOW)[0]

    payload = article.model_dump(mode="json", by_alias=True)

    assert set(payload) == {"id", "title", "description", "url", "imageUrl", "publishedAt", "source", "category"}
    assert payload["publishedAt"].startswith("2024-01-15T10:30:00")
