from fastapi import APIRouter, Depends, Query, BackgroundTasks
from typing import Dict, List
import logging

from ..schemas.article_schemas import Article
from ..services.search import ArticleSearchService
from ..services.service_factory import get_article_search_service

router = APIRouter(prefix="/articles", tags=["Articles"])
logger = logging.getLogger(__name__)


@router.get("/search", response_model=List[Article])
async def search_articles(
    background_tasks: BackgroundTasks,
    keyword: str = Query(..., description="Keyword matched against title or content"),
    service: ArticleSearchService = Depends(get_article_search_service)
):
    """
    Keyword search over title and content.
    Title and content carry the first highlighted fragment when the engine returns one.
    """
    logger.info(f"Searching articles for '{keyword}'")
    return await service.search_with_highlight(keyword, background_tasks)


@router.get("/nested", response_model=List[Article])
async def nested_search(
    background_tasks: BackgroundTasks,
    min_comment_count: int = Query(..., alias="minCommentCount", description="Minimum comment count"),
    service: ArticleSearchService = Depends(get_article_search_service)
):
    """
    Articles whose nested comment count is at least minCommentCount.
    """
    return await service.nested_query(min_comment_count, background_tasks)


@router.get("/categories", response_model=Dict[str, int])
async def get_category_stats(
    background_tasks: BackgroundTasks,
    service: ArticleSearchService = Depends(get_article_search_service)
):
    """
    Article count per category across the whole collection.
    """
    return await service.aggregate_by_category(background_tasks)


@router.get("/advanced-search", response_model=List[Article])
async def advanced_search(
    background_tasks: BackgroundTasks,
    keyword: str = Query(..., description="Keyword the title must match"),
    category: str = Query(..., description="Exact category"),
    min_view_count: int = Query(..., alias="minViewCount", description="Minimum view count"),
    service: ArticleSearchService = Depends(get_article_search_service)
):
    """
    Filtered title search ranked by relevance, view count and recency.
    """
    logger.info(
        f"Advanced search keyword='{keyword}' category='{category}' min_view_count={min_view_count}"
    )
    return await service.bool_query_with_score_control(
        keyword, category, min_view_count, background_tasks
    )
