"""Anchor text selection."""

from __future__ import annotations

from typing import List, Tuple

from .text import compile_phrase, extract_context_snippet, normalize_phrase
from .types import IndexedContent


def candidate_phrases(target: IndexedContent) -> List[str]:
    """Return the keyword and title fragments that may serve as anchor text."""

    phrases: List[str] = []
    seen: set[str] = set()
    title = target.title.strip()
    options = list(target.keywords)
    if title:
        options.extend([title, _head_terms(title), _tail_terms(title)])

    for phrase in options:
        cleaned = " ".join(phrase.split())
        key = normalize_phrase(cleaned)
        if not key or key in seen:
            continue
        seen.add(key)
        phrases.append(cleaned)
    return phrases


def choose_anchor(article_text: str, target: IndexedContent) -> Tuple[str, str]:
    """Return ``(anchor_text, context)`` for the target.

    The anchor is the shortest fragment found as a whole word or phrase in the
    article, spelled the way the article spells it. Without a match the
    target title is used and the context is a generic pointer.
    """

    best: Tuple[int, str, str] | None = None
    for phrase in candidate_phrases(target):
        if best is not None and len(phrase) >= best[0]:
            continue
        match = compile_phrase(phrase).search(article_text)
        if not match:
            continue
        best = (len(phrase), match.group(0), extract_context_snippet(article_text, match))

    if best is not None:
        return best[1], best[2]

    fallback = target.title.strip() or target.page_url
    topic = target.topics[0] if target.topics else (target.keywords[0] if target.keywords else "this topic")
    return fallback, f"For more information about {topic}, see {fallback}."


def _head_terms(title: str) -> str:
    words = title.split()
    if len(words) <= 4:
        return title
    return " ".join(words[:4])


def _tail_terms(title: str) -> str:
    words = title.split()
    if len(words) <= 4:
        return title
    return " ".join(words[-3:])
