"""
Article search service.
Sends built queries to Elasticsearch and normalizes what comes back.
"""

from typing import Any, Dict, List, Mapping, Optional
from fastapi import BackgroundTasks

from ..base import BaseService
from ...schemas.article_schemas import Article
from ...utils.cache import CacheManager, MINUTE, hash_params
from .query_builder import ArticleQueryBuilder
from . import response_normalizer


class ArticleSearchService(BaseService):
    """
    Gateway to the articles index.

    Every operation is one engine call: build the body, submit it, flatten the
    result. Engine errors are logged and propagated unchanged.
    """

    def __init__(self, client, index: str,
                 query_builder: Optional[ArticleQueryBuilder] = None,
                 cache_manager: Optional[CacheManager] = None,
                 cache_ttl: int = MINUTE):
        """
        Initialize the search service.

        Args:
            client: Elasticsearch client exposing an async ``search``
            index: Name of the articles index
            query_builder: Query builder instance
            cache_manager: Optional result cache
            cache_ttl: Lifetime of cached results in seconds
        """
        super().__init__(cache_manager)
        self.client = client
        self.index = index
        self.query_builder = query_builder or ArticleQueryBuilder()
        self.cache_ttl = cache_ttl

    def get_service_name(self) -> str:
        """Get the service name."""
        return "article_search"

    async def _search(self, body: Dict[str, Any], context: str) -> Mapping[str, Any]:
        """Submit a request body to the engine and return the raw payload."""
        try:
            response = await self.client.search(index=self.index, **body)
        except Exception as e:
            self._handle_service_error(e, context)
        # ObjectApiResponse keeps the decoded JSON on .body
        return getattr(response, "body", response)

    async def _cached(self, operation: str, params: Dict[str, Any]):
        cache_key = self._generate_cache_key(operation, hash_params(params))
        return cache_key, await self._cache_get(cache_key)

    async def search_with_highlight(self, keyword: str,
                                    background_tasks: Optional[BackgroundTasks] = None) -> List[Article]:
        """
        Keyword search over title and content with highlighted fragments.

        Args:
            keyword: Search keyword
            background_tasks: Optional background tasks for caching

        Returns:
            List[Article]: Matching articles, highlighted where the engine returned fragments
        """
        cache_key, cached = await self._cached("search", {"keyword": keyword})
        if cached is not None:
            return [Article.model_validate(item) for item in cached]

        body = self.query_builder.keyword_search(keyword)
        payload = await self._search(body, f"Error searching articles with keyword: {keyword}")
        articles = response_normalizer.parse_highlighted_hits(payload)

        await self._store(cache_key, articles, background_tasks)
        return articles

    async def nested_query(self, min_comment_count: int,
                           background_tasks: Optional[BackgroundTasks] = None) -> List[Article]:
        """Articles whose comment count is at least ``min_comment_count``."""
        cache_key, cached = await self._cached(
            "nested", {"min_comment_count": min_comment_count}
        )
        if cached is not None:
            return [Article.model_validate(item) for item in cached]

        body = self.query_builder.nested_comment_search(min_comment_count)
        payload = await self._search(
            body, f"Error running nested query with min comment count: {min_comment_count}"
        )
        articles = response_normalizer.parse_hits(payload)

        await self._store(cache_key, articles, background_tasks)
        return articles

    async def aggregate_by_category(self,
                                    background_tasks: Optional[BackgroundTasks] = None) -> Dict[str, int]:
        """Document count per category over the whole collection."""
        cache_key, cached = await self._cached("categories", {})
        if cached is not None:
            return cached

        body = self.query_builder.category_aggregation()
        payload = await self._search(body, "Error aggregating articles by category")
        counts = response_normalizer.parse_category_buckets(payload)

        await self._cache_set(cache_key, counts, self.cache_ttl, background_tasks)
        return counts

    async def bool_query_with_score_control(self, keyword: str, category: str, min_view_count: int,
                                            background_tasks: Optional[BackgroundTasks] = None) -> List[Article]:
        """
        Filtered title search ranked by relevance, view count and recency.

        Args:
            keyword: Keyword the title must match
            category: Exact category to filter on
            min_view_count: Minimum view count to filter on
            background_tasks: Optional background tasks for caching

        Returns:
            List[Article]: Articles ordered by composite score
        """
        params = {"keyword": keyword, "category": category, "min_view_count": min_view_count}
        cache_key, cached = await self._cached("advanced", params)
        if cached is not None:
            return [Article.model_validate(item) for item in cached]

        body = self.query_builder.advanced_search(keyword, category, min_view_count)
        payload = await self._search(
            body,
            f"Error running advanced search (keyword={keyword}, category={category}, "
            f"min_view_count={min_view_count})"
        )
        articles = response_normalizer.parse_hits(payload)

        await self._store(cache_key, articles, background_tasks)
        return articles

    async def _store(self, cache_key: str, articles: List[Article],
                     background_tasks: Optional[BackgroundTasks]):
        if self.cache is None:
            return
        data = [article.to_document() for article in articles]
        await self._cache_set(cache_key, data, self.cache_ttl, background_tasks)
