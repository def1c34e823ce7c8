from typing import Any, Dict, Optional
from fastapi import Depends, Request
from elasticsearch import AsyncElasticsearch

from article_search.core.config import settings
from article_search.services.search import ArticleQueryBuilder, ArticleSearchService
from article_search.utils.cache import CacheManager


def search_client_options() -> Dict[str, Any]:
    """Connection options shared by the API client and the setup script"""
    options = {"request_timeout": settings.elasticsearch_timeout}
    if settings.elasticsearch_username:
        options["basic_auth"] = (settings.elasticsearch_username, settings.elasticsearch_password)
    return options


def create_search_client() -> AsyncElasticsearch:
    """
    Create the Elasticsearch client from settings

    Returns:
        An AsyncElasticsearch client; basic auth is used when a username is configured
    """
    return AsyncElasticsearch(settings.elasticsearch_url, **search_client_options())


def get_search_client(request: Request):
    """Dependency returning the client opened in the app lifespan"""
    return request.app.state.es


def get_cache_manager(request: Request) -> Optional[CacheManager]:
    """Dependency returning a cache manager, or None when caching is off"""
    redis_client = getattr(request.app.state, "redis", None)
    if redis_client is None:
        return None
    return CacheManager(redis_client, prefix="articles")


def get_article_search_service(
    client=Depends(get_search_client),
    cache: Optional[CacheManager] = Depends(get_cache_manager)
) -> ArticleSearchService:
    return ArticleSearchService(
        client,
        index=settings.article_index,
        query_builder=ArticleQueryBuilder(
            max_results=settings.search_max_results,
            category_bucket_size=settings.category_bucket_size
        ),
        cache_manager=cache,
        cache_ttl=settings.cache_ttl_seconds
    )
