"""
Shared fixtures: an in-memory stand-in for the Elasticsearch client and a fake Redis.

InMemorySearchEngine understands only the request shapes the query builder
produces (match, bool, term, range, nested, function_score, terms aggs).
"""

import math
import re
import fnmatch

import pytest
from fastapi.testclient import TestClient

from main import app
from article_search.services.service_factory import get_search_client, get_cache_manager


def _tokens(text):
    return [token for token in str(text).lower().split() if token]


def _get_path(doc, dotted):
    value = doc
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _field_value(doc, field):
    # category.keyword is the exact value of category
    if field.endswith(".keyword"):
        field = field[: -len(".keyword")]
    return _get_path(doc, field)


class InMemorySearchEngine:
    """Evaluates builder-shaped requests against a list of stored documents"""

    def __init__(self, documents=None):
        self.documents = list(documents or [])
        self.calls = []

    async def search(self, index=None, query=None, highlight=None, aggs=None, size=None):
        self.calls.append({
            "index": index, "query": query, "highlight": highlight, "aggs": aggs, "size": size
        })
        scored = []
        for doc_id, doc in enumerate(self.documents):
            score = self._score(query, doc) if query else 1.0
            if score is not None:
                scored.append((score, doc_id, doc))
        scored.sort(key=lambda item: (-item[0], item[1]))

        limit = 10 if size is None else size
        hits = []
        for score, doc_id, doc in scored[:limit]:
            hit = {"_index": index, "_id": str(doc_id), "_score": score, "_source": doc}
            if highlight:
                fragments = self._highlight(query, doc, highlight)
                if fragments:
                    hit["highlight"] = fragments
            hits.append(hit)

        response = {"hits": {"total": {"value": len(scored)}, "hits": hits}}
        if aggs:
            response["aggregations"] = self._aggregate(aggs, [doc for _, _, doc in scored])
        return response

    def _score(self, query, doc):
        """Relevance score, or None when the document does not match"""
        kind, spec = next(iter(query.items()))
        if kind == "match":
            field, keyword = next(iter(spec.items()))
            text = str(_field_value(doc, field) or "").lower()
            hits = sum(1 for token in _tokens(keyword) if token in text)
            return float(hits) if hits else None
        if kind == "term":
            field, value = next(iter(spec.items()))
            return 1.0 if _field_value(doc, field) == value else None
        if kind == "range":
            field, bounds = next(iter(spec.items()))
            value = _field_value(doc, field)
            if value is None or value < bounds.get("gte", value):
                return None
            return 1.0
        if kind == "nested":
            inner = self._score(spec["query"], doc)
            if inner is None:
                return None
            return 1.0 if spec.get("score_mode") == "none" else inner
        if kind == "bool":
            score = 0.0
            for clause in spec.get("must", []):
                clause_score = self._score(clause, doc)
                if clause_score is None:
                    return None
                score += clause_score
            for clause in spec.get("filter", []):
                if self._score(clause, doc) is None:
                    return None
            should = spec.get("should", [])
            if should:
                should_scores = [self._score(clause, doc) for clause in should]
                matched = [s for s in should_scores if s is not None]
                if not matched and not spec.get("must"):
                    return None
                score += sum(matched)
            return score or 1.0
        if kind == "function_score":
            base = self._score(spec["query"], doc)
            if base is None:
                return None
            for function in spec.get("functions", []):
                if "field_value_factor" in function:
                    fvf = function["field_value_factor"]
                    value = _field_value(doc, fvf["field"]) or 0
                    base *= math.log10(1 + fvf.get("factor", 1) * value)
            return base
        raise ValueError(f"Unsupported query: {kind}")

    def _collect_matches(self, query, out):
        kind, spec = next(iter(query.items()))
        if kind == "match":
            field, keyword = next(iter(spec.items()))
            out.setdefault(field, []).extend(_tokens(keyword))
        elif kind == "bool":
            for clause in spec.get("should", []) + spec.get("must", []):
                self._collect_matches(clause, out)
        return out

    def _highlight(self, query, doc, highlight):
        pre = highlight["pre_tags"][0]
        post = highlight["post_tags"][0]
        terms = self._collect_matches(query, {})
        fragments = {}
        for field in highlight["fields"]:
            text = _field_value(doc, field)
            if not text or not terms.get(field):
                continue
            pattern = "|".join(re.escape(term) for term in terms[field])
            marked, count = re.subn(
                pattern, lambda m: f"{pre}{m.group(0)}{post}", str(text), flags=re.IGNORECASE
            )
            if count:
                fragments[field] = [marked]
        return fragments

    def _aggregate(self, aggs, documents):
        result = {}
        for name, spec in aggs.items():
            terms = spec["terms"]
            counts = {}
            for doc in documents:
                value = _field_value(doc, terms["field"])
                if value is not None:
                    counts[value] = counts.get(value, 0) + 1
            buckets = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
            result[name] = {
                "doc_count_error_upper_bound": 0,
                "sum_other_doc_count": sum(c for _, c in buckets[terms.get("size", 10):]),
                "buckets": [
                    {"key": key, "doc_count": count}
                    for key, count in buckets[: terms.get("size", 10)]
                ],
            }
        return result


class FailingSearchClient:
    """Client whose every search raises the given exception"""

    def __init__(self, error):
        self.error = error
        self.calls = 0

    async def search(self, **kwargs):
        self.calls += 1
        raise self.error


class FakeRedis:
    """Minimal async Redis stand-in backed by a dict"""

    def __init__(self):
        self.store = {}
        self.expiry = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def keys(self, pattern):
        return [key for key in self.store if fnmatch.fnmatch(key, pattern)]

    async def ping(self):
        return True


def make_document(title, category, view_count, comment_count=0, content="", **extra):
    document = {
        "id": extra.pop("id", title),
        "title": title,
        "content": content,
        "author": extra.pop("author", "Jane Smith"),
        "category": category,
        "viewCount": view_count,
        "createTime": extra.pop("createTime", 1700000000000),
        "commentInfo": {"commentCount": comment_count, "lastComment": "这是一个很好的文章！"},
    }
    document.update(extra)
    return document


@pytest.fixture
def sample_documents():
    return [
        make_document("Spring Boot 最佳实践", "技术", 1500, comment_count=12,
                      content="Spring Boot 是一个流行的Java框架"),
        make_document("Elasticsearch 深入浅出", "技术", 2000, comment_count=48,
                      content="Elasticsearch是一个强大的搜索引擎"),
        make_document("UI设计趋势2024", "设计", 1200, comment_count=5,
                      content="2024年的UI设计将更注重用户体验"),
        make_document("产品经理成长之路", "产品", 2500, comment_count=77,
                      content="作为一名产品经理，需要具备哪些核心能力"),
    ]


@pytest.fixture
def engine(sample_documents):
    return InMemorySearchEngine(sample_documents)


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_search_client] = lambda: engine
    app.dependency_overrides[get_cache_manager] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
