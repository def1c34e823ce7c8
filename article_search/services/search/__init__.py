"""
Search module for article services.
Handles query construction, engine calls, and response normalization.
"""

from .query_builder import ArticleQueryBuilder
from .search_engine import ArticleSearchService
from .response_normalizer import parse_hits, parse_highlighted_hits, parse_category_buckets

__all__ = [
    'ArticleQueryBuilder',
    'ArticleSearchService',
    'parse_hits',
    'parse_highlighted_hits',
    'parse_category_buckets'
]
