"""
Response normalization for article searches.
Flattens raw hit and aggregation payloads into Article records and count maps.
"""

from typing import Any, Dict, List, Mapping

from ...schemas.article_schemas import Article
from .query_builder import CATEGORY_AGG_NAME, FIELD_CONTENT, FIELD_TITLE

HIGHLIGHTED_FIELDS = (FIELD_TITLE, FIELD_CONTENT)


def _hits(response: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    return (response.get("hits") or {}).get("hits") or []


def parse_hits(response: Mapping[str, Any]) -> List[Article]:
    """Deserialize each hit's stored document, keeping engine rank order."""
    return [
        Article.from_source(hit.get("_source") or {}, doc_id=hit.get("_id"))
        for hit in _hits(response)
    ]


def parse_highlighted_hits(response: Mapping[str, Any]) -> List[Article]:
    """
    Deserialize hits, replacing title/content with highlighted fragments.

    Only the first fragment of each field is kept; any later fragments are
    dropped.

    Args:
        response: Raw search response

    Returns:
        List[Article]: Articles in engine rank order
    """
    articles = []
    for hit in _hits(response):
        highlight = hit.get("highlight") or {}
        overrides = {}
        for field in HIGHLIGHTED_FIELDS:
            fragments = highlight.get(field)
            if fragments:
                overrides[field] = fragments[0]
        articles.append(
            Article.from_source(hit.get("_source") or {}, doc_id=hit.get("_id"), overrides=overrides)
        )
    return articles


def parse_category_buckets(response: Mapping[str, Any]) -> Dict[str, int]:
    """Map category label to document count. Absent buckets stay absent."""
    aggregation = (response.get("aggregations") or {}).get(CATEGORY_AGG_NAME) or {}
    return {
        str(bucket["key"]): bucket["doc_count"]
        for bucket in aggregation.get("buckets", [])
    }
