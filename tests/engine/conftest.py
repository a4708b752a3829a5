"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable

import pytest

from recommender.engine.config import load_config
from recommender.engine.types import ArticleInput, CmsSource, IndexedContent, StaticSource


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


def make_raw_item(
    id: str,
    title: str,
    keywords: Iterable[str] | None = None,
    *,
    type: str = "cms",
    url: str | None = None,
    collection_id: str | None = "posts",
    published_at: str | None = "2024-01-01T00:00:00Z",
    **extra: Any,
) -> Dict[str, Any]:
    item: Dict[str, Any] = {
        "id": id,
        "url": url or f"https://example.com/{id}",
        "title": title,
        "slug": id,
        "keywords": list(keywords or []),
        "type": type,
        "published_at": published_at,
    }
    if collection_id is not None:
        item["collection_id"] = collection_id
    item.update(extra)
    return item


def make_page(
    id: str,
    title: str,
    keywords: Iterable[str] | None = None,
    *,
    kind: str = "cms",
    word_count: int | None = None,
    collection_id: str | None = "posts",
    content: str = "",
) -> IndexedContent:
    keyword_list = list(keywords or [])
    if kind == "cms":
        source = CmsSource(item_id=id, collection_id=collection_id)
    else:
        source = StaticSource()
    return IndexedContent(
        id=f"scan_{id}",
        page_url=f"https://example.com/{id}",
        title=title,
        content=content,
        keywords=keyword_list,
        topics=keyword_list[:3],
        word_count=word_count if word_count is not None else (1500 if kind == "cms" else 500),
        source=source,
        metadata={"type": kind},
    )


def make_article(content: str, title: str, keywords: Iterable[str]) -> ArticleInput:
    return ArticleInput(content=content, title=title, keywords=list(keywords))
