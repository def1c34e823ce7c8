"""
Index definition and demo data for the articles index.

Used by ``scripts/setup_index.py``; the API itself never creates or seeds
the index.
"""

import random
import time
import uuid
from typing import Dict, List, Optional

from ...schemas.article_schemas import Article, CommentInfo

INDEX_SETTINGS = {
    "number_of_shards": 3,
    "number_of_replicas": 1,
}

ARTICLE_MAPPING = {
    "properties": {
        "id": {"type": "keyword"},
        "title": {"type": "text"},
        "content": {"type": "text"},
        "author": {"type": "text"},
        "category": {
            "type": "text",
            "fields": {"keyword": {"type": "keyword"}},
        },
        "viewCount": {"type": "integer"},
        "createTime": {"type": "date", "format": "epoch_millis"},
        "commentInfo": {
            "type": "nested",
            "properties": {
                "commentCount": {"type": "integer"},
                "lastComment": {"type": "text"},
            },
        },
    }
}

DEFAULT_LAST_COMMENT = "这是一个很好的文章！"

# (title, content, category, author, viewCount)
DEMO_ARTICLES = [
    ("Spring Boot 最佳实践",
     "Spring Boot 是一个流行的Java框架，本文将介绍其最佳实践和使用技巧...",
     "技术", "John Doe", 1500),
    ("Elasticsearch 深入浅出",
     "Elasticsearch是一个强大的搜索引擎，本文将详细讲解其核心概念...",
     "技术", "Jane Smith", 2000),
    ("Docker 容器化部署指南",
     "Docker让应用部署变得更简单，本文将介绍Docker的基本概念和实践...",
     "技术", "Mike Johnson", 1800),
    ("UI设计趋势2024",
     "2024年的UI设计将更注重用户体验，本文将分析最新的设计趋势...",
     "设计", "Lisa Wang", 1200),
    ("响应式设计实战",
     "如何打造完美的响应式网站？本文将分享实战经验和技巧...",
     "设计", "Tom Wilson", 900),
    ("产品经理成长之路",
     "作为一名产品经理，需要具备哪些核心能力？本文将为你解答...",
     "产品", "Sarah Chen", 2500),
    ("用户调研方法论",
     "好的产品离不开深入的用户调研，本文将介绍实用的调研方法...",
     "产品", "David Lee", 1700),
]


def build_demo_articles(rng: Optional[random.Random] = None,
                        now_ms: Optional[int] = None) -> List[Article]:
    """
    Build the demo articles with fresh ids.

    Args:
        rng: Random source for comment counts (module random when None)
        now_ms: Creation time in epoch milliseconds (current time when None)

    Returns:
        List[Article]: One article per entry of DEMO_ARTICLES
    """
    rng = rng or random.Random()
    created = now_ms if now_ms is not None else int(time.time() * 1000)
    articles = []
    for title, content, category, author, view_count in DEMO_ARTICLES:
        articles.append(Article(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            category=category,
            author=author,
            view_count=view_count,
            create_time=created,
            comment_info=CommentInfo(
                comment_count=rng.randrange(100),
                last_comment=DEFAULT_LAST_COMMENT,
            ),
        ))
    return articles


def bulk_actions(index: str, articles: List[Article]) -> List[Dict]:
    """Bulk index actions for ``elasticsearch.helpers.bulk``."""
    return [
        {"_index": index, "_id": article.id, "_source": article.to_document()}
        for article in articles
    ]
