import random

from article_search.services.search import query_builder
from article_search.services.search.index_mapping import (
    ARTICLE_MAPPING,
    DEFAULT_LAST_COMMENT,
    build_demo_articles,
    bulk_actions,
)


def test_mapping_supports_every_queried_field():
    properties = ARTICLE_MAPPING["properties"]

    assert properties[query_builder.FIELD_TITLE]["type"] == "text"
    assert properties[query_builder.FIELD_CONTENT]["type"] == "text"
    assert properties["category"]["fields"]["keyword"]["type"] == "keyword"
    assert properties[query_builder.FIELD_VIEW_COUNT]["type"] == "integer"
    assert properties[query_builder.FIELD_CREATE_TIME] == {"type": "date", "format": "epoch_millis"}
    assert properties[query_builder.PATH_COMMENT_INFO]["type"] == "nested"
    assert "commentCount" in properties["commentInfo"]["properties"]


def test_demo_articles_cover_three_categories():
    articles = build_demo_articles(rng=random.Random(7), now_ms=1700000000000)

    categories = [a.category for a in articles]
    assert categories.count("技术") == 3
    assert categories.count("设计") == 2
    assert categories.count("产品") == 2
    assert len({a.id for a in articles}) == len(articles)


def test_demo_articles_have_bounded_comment_counts():
    for article in build_demo_articles(rng=random.Random(1)):
        assert 0 <= article.comment_info.comment_count < 100
        assert article.comment_info.last_comment == DEFAULT_LAST_COMMENT


def test_bulk_actions_use_stored_field_names():
    articles = build_demo_articles(now_ms=1700000000000)
    action = bulk_actions("articles", articles)[1]

    assert action["_index"] == "articles"
    assert action["_id"] == articles[1].id
    assert action["_source"]["title"] == "Elasticsearch 深入浅出"
    assert action["_source"]["viewCount"] == 2000
    assert action["_source"]["createTime"] == 1700000000000
    assert set(action["_source"]["commentInfo"]) == {"commentCount", "lastComment"}
