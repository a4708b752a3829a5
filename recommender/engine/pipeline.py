"""Coordinator for the interlinking analysis."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Sequence

from .anchors import choose_anchor
from .config import EngineConfig, load_config
from .enrichment import FetchFullContent, enrich
from .indexer import index_corpus
from .scoring import score
from .text import jaccard, visible_text
from .types import (
    AnalysisOptions,
    ArticleInput,
    IndexedContent,
    InvalidInputError,
    LinkOpportunity,
    LinkSuggestion,
)

log = logging.getLogger(__name__)


def analyze_interlinking(
    content: str,
    title: str,
    keywords: Sequence[str],
    raw_corpus: Iterable[Mapping[str, Any]],
    options: AnalysisOptions | None = None,
    fetch_full_content: FetchFullContent | None = None,
    config: EngineConfig | None = None,
) -> List[LinkSuggestion]:
    """Return ranked link suggestions for a freshly written article.

    Raises :class:`InvalidInputError` before any work is done when the
    article or options are malformed. An empty list means no linking
    opportunity was found.
    """

    article = build_article(content, title, keywords)
    opts = options or AnalysisOptions()
    validate_options(opts)
    engine_config = config or load_config(None)

    if opts.max_links == 0:
        return []

    corpus = index_corpus(raw_corpus, engine_config)
    log.info(
        "Analyzing interlinking for %r: %d keywords, %d candidates, enrichment=%s",
        article.title,
        len(article.keywords),
        len(corpus),
        opts.enable_enrichment,
    )

    enrichment_ready = opts.enable_enrichment and opts.enrich_top_n > 0 and fetch_full_content is not None
    if opts.enable_enrichment and not enrichment_ready:
        log.info("Enrichment requested but no content fetcher is available; using phase-1 scores")

    opportunities = analyze(article, corpus, opts, engine_config)

    if enrichment_ready and opportunities:
        opportunities = enrich(opportunities, article, fetch_full_content, opts.enrich_top_n, engine_config)

    suggestions = to_suggestions(opportunities)
    log.info(
        "Interlinking analysis complete: %d suggestions (%d cms, %d static)",
        len(suggestions),
        sum(1 for item in suggestions if item.kind == "cms"),
        sum(1 for item in suggestions if item.kind == "static"),
    )
    return suggestions


def analyze(
    article: ArticleInput,
    corpus: Sequence[IndexedContent],
    options: AnalysisOptions,
    config: EngineConfig | None = None,
) -> List[LinkOpportunity]:
    """Score, filter, sort and cap the corpus into link opportunities."""

    max_links = options.max_links
    if max_links <= 0 or not corpus:
        return []

    engine_config = config or load_config(None)
    topics = article_topics(article.keywords, engine_config)
    article_text = visible_text(article.content)
    article_title = article.title.strip().lower()

    opportunities: List[LinkOpportunity] = []
    seen_ids: set[str] = set()
    seen_urls: set[str] = set()

    for candidate in corpus:
        if candidate.id in seen_ids or candidate.page_url in seen_urls:
            continue
        if article_title and candidate.title.strip().lower() == article_title:
            continue

        result = score(article, candidate, engine_config)
        if result.relevance <= 0.0:
            continue

        anchor_text, context = choose_anchor(article_text, candidate)
        opportunity = LinkOpportunity(
            target=candidate,
            anchor_text=anchor_text,
            relevance_score=result.relevance,
            authority_score=result.authority,
            reason=score_reason(article, candidate, topics, result.relevance),
            context=context,
            relevance_weight=engine_config.weight("link_value", "relevance"),
            authority_weight=engine_config.weight("link_value", "authority"),
        )
        if opportunity.link_value < options.min_relevance_score:
            continue

        opportunities.append(opportunity)
        seen_ids.add(candidate.id)
        seen_urls.add(candidate.page_url)

    opportunities.sort(key=lambda item: (item.link_value, item.target.word_count), reverse=True)
    return opportunities[:max_links]


def article_topics(keywords: Iterable[str], config: EngineConfig | None = None) -> List[str]:
    """Deduplicated, length-filtered and capped topics from the article keywords."""

    engine_config = config or load_config(None)
    min_length = int(engine_config.get("article_topic_min_length", 4))
    limit = int(engine_config.get("article_topic_limit", 5))

    topics: List[str] = []
    seen: set[str] = set()
    for keyword in keywords:
        normalized = keyword.strip().lower()
        if len(normalized) < min_length or normalized in seen:
            continue
        seen.add(normalized)
        topics.append(normalized)
        if len(topics) >= limit:
            break
    return topics


def score_reason(
    article: ArticleInput,
    candidate: IndexedContent,
    topics: Sequence[str],
    relevance: float,
) -> str:
    """Return a human-friendly explanation of why the candidate was picked."""

    fragments = []
    if relevance > 0.7:
        fragments.append("Highly relevant content")

    keyword_overlap = jaccard(article.keywords, candidate.keywords)
    if keyword_overlap > 0.3:
        fragments.append(f"Shares keywords: {', '.join(candidate.keywords[:2])}")

    candidate_topics = {topic.lower() for topic in candidate.topics}
    shared = [topic for topic in topics if topic in candidate_topics]
    if shared:
        fragments.append(f"Shares topics: {', '.join(shared[:2])}")

    if candidate.word_count > 2000:
        fragments.append("Comprehensive content")

    return "; ".join(fragments) if fragments else "Related content"


def to_suggestions(opportunities: Iterable[LinkOpportunity]) -> List[LinkSuggestion]:
    suggestions = []
    for opportunity in opportunities:
        percent = int(round(max(min(opportunity.link_value, 1.0), 0.0) * 100))
        suggestions.append(
            LinkSuggestion(
                anchor_text=opportunity.anchor_text,
                url=opportunity.target.page_url,
                kind=opportunity.target.kind,
                relevance_score_percent=percent,
                context=opportunity.context,
            )
        )
    return suggestions


def build_article(content: Any, title: Any, keywords: Any) -> ArticleInput:
    """Validate the caller's article fields and return an ``ArticleInput``."""

    errors = []
    if not isinstance(content, str) or not content.strip():
        errors.append("content is required")
    if not isinstance(title, str) or not title.strip():
        errors.append("title is required")
    if isinstance(keywords, str) or not isinstance(keywords, (list, tuple)):
        errors.append("keywords must be a list of strings")
    elif not all(isinstance(keyword, str) for keyword in keywords):
        errors.append("keywords must be a list of strings")
    if errors:
        raise InvalidInputError("; ".join(errors))
    return ArticleInput(content=content, title=title, keywords=[keyword.strip() for keyword in keywords if keyword.strip()])


def validate_options(options: AnalysisOptions) -> None:
    errors = []
    if not isinstance(options.max_links, int) or options.max_links < 0:
        errors.append("max_links must be a non-negative integer")
    if not isinstance(options.enrich_top_n, int) or options.enrich_top_n < 0:
        errors.append("enrich_top_n must be a non-negative integer")
    threshold = options.min_relevance_score
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0.0 <= threshold <= 1.0:
        errors.append("min_relevance_score must be between 0 and 1")
    if errors:
        raise InvalidInputError("; ".join(errors))
