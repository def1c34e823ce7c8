"""
Query construction for the articles index.

Each builder returns the keyword arguments of a single search call
(``query``, ``highlight``, ``aggs``, ``size``) so the result can be handed
straight to ``AsyncElasticsearch.search``.
"""

from typing import Any, Dict, Optional

# Index field names
FIELD_TITLE = "title"
FIELD_CONTENT = "content"
FIELD_CATEGORY_KEYWORD = "category.keyword"
FIELD_VIEW_COUNT = "viewCount"
FIELD_CREATE_TIME = "createTime"
PATH_COMMENT_INFO = "commentInfo"
FIELD_COMMENT_COUNT = "commentInfo.commentCount"

# Highlighting
HIGHLIGHT_PRE_TAG = "<em>"
HIGHLIGHT_POST_TAG = "</em>"

# Aggregation
CATEGORY_AGG_NAME = "category_agg"

# Scoring
VIEW_COUNT_FACTOR = 1.2
VIEW_COUNT_MODIFIER = "log1p"
DECAY_ORIGIN = "now"
DECAY_SCALE = "30d"


class ArticleQueryBuilder:
    """
    Builds Elasticsearch request bodies for the article endpoints.

    Supported shapes:
    - keyword search over title and content with highlighting
    - nested range filter on comment count
    - terms aggregation by category
    - bool query wrapped in a function score (view count and recency)
    """

    def __init__(self, max_results: Optional[int] = None, category_bucket_size: Optional[int] = None):
        """
        Args:
            max_results: ``size`` sent with hit-returning queries; engine default when None
            category_bucket_size: number of buckets for the category aggregation
        """
        self.max_results = max_results
        self.category_bucket_size = category_bucket_size

    def _with_size(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.max_results is not None:
            body["size"] = self.max_results
        return body

    def keyword_search(self, keyword: str) -> Dict[str, Any]:
        """
        Match the keyword against title OR content and highlight both fields.

        An empty keyword is passed through untouched.
        """
        query = {
            "bool": {
                "should": [
                    {"match": {FIELD_TITLE: keyword}},
                    {"match": {FIELD_CONTENT: keyword}},
                ]
            }
        }
        highlight = {
            "pre_tags": [HIGHLIGHT_PRE_TAG],
            "post_tags": [HIGHLIGHT_POST_TAG],
            "fields": {
                FIELD_TITLE: {},
                FIELD_CONTENT: {},
            },
        }
        return self._with_size({"query": query, "highlight": highlight})

    def nested_comment_search(self, min_comment_count: int) -> Dict[str, Any]:
        """
        Restrict to documents whose nested comment count is >= the threshold.

        The nested clause does not contribute to scoring.
        """
        query = {
            "nested": {
                "path": PATH_COMMENT_INFO,
                "query": {
                    "range": {FIELD_COMMENT_COUNT: {"gte": min_comment_count}}
                },
                "score_mode": "none",
            }
        }
        return self._with_size({"query": query})

    def category_aggregation(self) -> Dict[str, Any]:
        """Zero-hit request bucketing the whole collection by exact category."""
        terms: Dict[str, Any] = {"field": FIELD_CATEGORY_KEYWORD}
        if self.category_bucket_size is not None:
            terms["size"] = self.category_bucket_size
        return {
            "size": 0,
            "aggs": {CATEGORY_AGG_NAME: {"terms": terms}},
        }

    def advanced_search(self, keyword: str, category: str, min_view_count: int) -> Dict[str, Any]:
        """
        Compound search with custom scoring.

        Title must match the keyword (scored). Category and minimum view count
        are non-scoring filters. The final score is
        base_score * log1p(1.2 * viewCount) * exp_decay(createTime, now, 30d).
        """
        bool_query = {
            "bool": {
                "must": [
                    {"match": {FIELD_TITLE: keyword}},
                ],
                "filter": [
                    {"term": {FIELD_CATEGORY_KEYWORD: category}},
                    {"range": {FIELD_VIEW_COUNT: {"gte": min_view_count}}},
                ],
            }
        }
        query = {
            "function_score": {
                "query": bool_query,
                "functions": [
                    {
                        "field_value_factor": {
                            "field": FIELD_VIEW_COUNT,
                            "modifier": VIEW_COUNT_MODIFIER,
                            "factor": VIEW_COUNT_FACTOR,
                        }
                    },
                    {
                        "exp": {
                            FIELD_CREATE_TIME: {
                                "origin": DECAY_ORIGIN,
                                "scale": DECAY_SCALE,
                            }
                        }
                    },
                ],
                "score_mode": "multiply",
                "boost_mode": "multiply",
            }
        }
        return self._with_size({"query": query})
