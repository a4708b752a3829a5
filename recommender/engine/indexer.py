"""Normalization of raw site-scan records into indexed candidate pages."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from .config import EngineConfig, load_config
from .text import words
from .types import CmsSource, IndexedContent, PageSource, StaticSource

log = logging.getLogger(__name__)


def index_corpus(raw_items: Iterable[Any], config: EngineConfig | None = None) -> List[IndexedContent]:
    """Convert a corpus snapshot into ``IndexedContent`` records.

    Malformed records never fail the batch: optional fields fall back to
    defaults and records that cannot be linked at all (no id or url) are
    skipped. The first record wins when ids collide.
    """

    engine_config = config or load_config(None)
    indexed: List[IndexedContent] = []
    seen_ids: set[str] = set()
    skipped = 0

    for item in raw_items or []:
        if not isinstance(item, Mapping):
            skipped += 1
            continue
        page = index_item(item, engine_config)
        if page is None or page.id in seen_ids:
            skipped += 1
            continue
        seen_ids.add(page.id)
        indexed.append(page)

    if skipped:
        log.debug("Skipped %d unusable corpus records", skipped)
    return indexed


def index_item(item: Mapping[str, Any], config: EngineConfig) -> IndexedContent | None:
    raw_id = _text(item.get("id"))
    url = _text(item.get("url"))
    if not raw_id or not url:
        return None

    kind = _text(item.get("type")).lower()
    if kind not in {"cms", "static"}:
        kind = "static"

    keywords = _keywords(item.get("keywords"))
    content = _text(item.get("content"))
    if content:
        word_count = len(words(content))
    else:
        word_count = config.estimated_word_count(kind)

    collection_id = _text(item.get("collection_id") or item.get("collectionId")) or None
    source: PageSource
    if kind == "cms":
        source = CmsSource(item_id=raw_id, collection_id=collection_id)
    else:
        source = StaticSource()

    metadata = {
        "type": kind,
        "published_at": _text(item.get("published_at")) or None,
        "slug": _text(item.get("slug")),
    }
    if collection_id:
        metadata["collection_id"] = collection_id

    return IndexedContent(
        id=f"scan_{raw_id}",
        page_url=url,
        title=_text(item.get("title")),
        content=content,
        keywords=keywords,
        topics=keywords[: int(config.get("topics_per_page", 3))],
        word_count=max(word_count, 0),
        source=source,
        metadata=metadata,
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value).strip()
    return ""


def _keywords(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    result = []
    for keyword in value:
        if isinstance(keyword, str) and keyword.strip():
            result.append(keyword.strip())
    return result
