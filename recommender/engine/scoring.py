"""Lexical relevance and authority scoring."""

from __future__ import annotations

from .config import EngineConfig
from .text import jaccard, significant_words, visible_text, words
from .types import ArticleInput, IndexedContent, Score


def _clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    return max(min(value, maximum), minimum)


def authority_score(candidate: IndexedContent, config: EngineConfig) -> float:
    """Saturating function of the page length."""

    norm = float(config.get("authority_word_count_norm", 2000) or 2000)
    return _clamp(max(candidate.word_count, 0) / norm)


def phase1_relevance(article: ArticleInput, candidate: IndexedContent, config: EngineConfig) -> float:
    """Keyword and title overlap, usable before any content is fetched."""

    keyword_overlap = jaccard(article.keywords, candidate.keywords)
    title_overlap = jaccard(words(article.title), words(candidate.title))
    return _clamp(
        config.weight("phase1", "keywords") * keyword_overlap
        + config.weight("phase1", "title") * title_overlap
    )


def score(article: ArticleInput, candidate: IndexedContent, config: EngineConfig) -> Score:
    """Return phase-1 relevance and authority for a single candidate."""

    return Score(
        relevance=phase1_relevance(article, candidate, config),
        authority=authority_score(candidate, config),
    )


def link_value(relevance: float, authority: float, config: EngineConfig) -> float:
    return (
        config.weight("link_value", "relevance") * relevance
        + config.weight("link_value", "authority") * authority
    )


def enriched_relevance(article: ArticleInput, target: IndexedContent, config: EngineConfig) -> float:
    """Three-factor relevance once the target's full text is known."""

    min_length = int(config.get("significant_word_min_length", 4))
    limit = int(config.get("significant_word_limit", 100))

    keyword_overlap = jaccard(article.keywords, target.keywords)
    title_overlap = jaccard(words(article.title), words(target.title))
    content_overlap = jaccard(
        significant_words(visible_text(article.content), min_length, limit),
        significant_words(target.content, min_length, limit),
    )
    return _clamp(
        config.weight("enriched", "keywords") * keyword_overlap
        + config.weight("enriched", "title") * title_overlap
        + config.weight("enriched", "content") * content_overlap
    )
