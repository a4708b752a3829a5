"""Shared text utilities for the interlinking engine."""

from __future__ import annotations

import re
from typing import Iterable, List

from bs4 import BeautifulSoup  # type: ignore

_TAG_RE = re.compile(r"<[^>]+>")

# Word boundary regex template used when compiling phrase matchers
WORD_BOUNDARY = r"(?<![A-Za-z0-9_]){term}(?![A-Za-z0-9_])"


def compile_phrase(phrase: str) -> re.Pattern[str]:
    """Return a case-insensitive whole-word matcher for ``phrase``."""

    return re.compile(WORD_BOUNDARY.format(term=re.escape(phrase)), flags=re.IGNORECASE)


def looks_like_html(content: str) -> bool:
    return bool(content) and _TAG_RE.search(content) is not None


def visible_text(content: str) -> str:
    """Return the human-visible text of an article that may contain HTML."""

    if not content:
        return ""
    if not looks_like_html(content):
        return content
    return BeautifulSoup(content, "html.parser").get_text(" ")


def words(text: str) -> List[str]:
    """Whitespace split, lower-cased."""

    return text.lower().split()


def significant_words(text: str, min_length: int = 4, limit: int = 100) -> List[str]:
    """Return the first ``limit`` words of at least ``min_length`` characters."""

    selected = [word for word in words(text) if len(word) >= min_length]
    return selected[:limit]


def normalize_phrase(phrase: str) -> str:
    """Return a lowercase, single-space version of ``phrase`` for lookups."""

    return re.sub(r"\s+", " ", phrase.strip().lower())


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Return case-insensitive Jaccard similarity; 0.0 when either side is empty."""

    set_a = {item.lower() for item in set_a}
    set_b = {item.lower() for item in set_b}
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def extract_context_snippet(text: str, match: re.Match[str], window: int = 45) -> str:
    """Return a trimmed snippet of ``text`` surrounding the match."""

    start = max(0, match.start() - window)
    end = min(len(text), match.end() + window)
    snippet = text[start:end].strip()
    return re.sub(r"\s+", " ", snippet)
