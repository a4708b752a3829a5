"""Insertion of recommended links into the article body."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from html import escape
from typing import Iterable, List, Tuple, Union

from bs4 import BeautifulSoup, NavigableString  # type: ignore

from .text import compile_phrase, extract_context_snippet, looks_like_html, normalize_phrase
from .types import InsertedLink, InsertionResult, LinkOpportunity, LinkSuggestion

log = logging.getLogger(__name__)

# Tags inside which links should never be inserted
SKIP_TAGS: set[str] = {"a", "code", "pre", "h1", "h2", "h3", "h4", "h5", "h6", "script", "style"}

Linkable = Union[LinkSuggestion, LinkOpportunity]


@dataclass(frozen=True)
class _AnchorMatcher:
    """Compiled regex and metadata for a single anchor replacement."""

    pattern: re.Pattern[str]
    key: str
    url: str
    anchor_text: str


def insert_links(content: str, suggestions: Iterable[Linkable], max_links: int) -> InsertionResult:
    """Wrap the first unlinked occurrence of each anchor text in a hyperlink.

    Suggestions are consumed in ranked order. One whose anchor text does not
    occur in the visible text is skipped without using up one of the
    ``max_links`` slots. Text inside existing links, code blocks, headings
    and tag attributes is never touched. Plain-text bodies are spliced in
    place so every character outside the inserted links is kept verbatim.
    """

    if not content or max_links <= 0:
        return InsertionResult(content=content, inserted=[])

    matchers = _build_matchers(suggestions)
    if not matchers:
        return InsertionResult(content=content, inserted=[])

    if not looks_like_html(content):
        return _insert_into_text(content, matchers, max_links)

    soup = BeautifulSoup(content, "html.parser")
    inserted: List[InsertedLink] = []
    linked_keys: set[str] = set()
    linked_urls: set[str] = set()

    for matcher in matchers:
        if len(inserted) >= max_links:
            break
        if matcher.key in linked_keys or matcher.url in linked_urls:
            continue
        link = _wrap_first(soup, matcher)
        if link is None:
            continue
        linked_keys.add(matcher.key)
        linked_urls.add(matcher.url)
        inserted.append(link)

    log.debug("Inserted %d of %d suggested links", len(inserted), len(matchers))
    if not inserted:
        return InsertionResult(content=content, inserted=[])
    return InsertionResult(content=str(soup), inserted=inserted)


def _insert_into_text(content: str, matchers: List[_AnchorMatcher], max_links: int) -> InsertionResult:
    """Splice links into a plain-text body, leaving every other character as is."""

    spans: List[Tuple[int, int, str]] = []
    inserted: List[InsertedLink] = []
    linked_keys: set[str] = set()
    linked_urls: set[str] = set()

    for matcher in matchers:
        if len(inserted) >= max_links:
            break
        if matcher.key in linked_keys or matcher.url in linked_urls:
            continue
        match = next(
            (
                found
                for found in matcher.pattern.finditer(content)
                if not any(found.start() < end and start < found.end() for start, end, _ in spans)
            ),
            None,
        )
        if match is None:
            continue
        spans.append((match.start(), match.end(), _anchor_markup(matcher.url, match.group(0))))
        linked_keys.add(matcher.key)
        linked_urls.add(matcher.url)
        inserted.append(
            InsertedLink(
                anchor_text=match.group(0),
                url=matcher.url,
                context=extract_context_snippet(content, match) or None,
            )
        )

    if not inserted:
        return InsertionResult(content=content, inserted=[])

    pieces: List[str] = []
    cursor = 0
    for start, end, markup in sorted(spans):
        pieces.append(content[cursor:start])
        pieces.append(markup)
        cursor = end
    pieces.append(content[cursor:])
    log.debug("Inserted %d of %d suggested links into plain text", len(inserted), len(matchers))
    return InsertionResult(content="".join(pieces), inserted=inserted)


def _anchor_markup(url: str, text: str) -> str:
    return f'<a href="{escape(url, quote=True)}" target="_blank" rel="noopener noreferrer">{text}</a>'


def _build_matchers(suggestions: Iterable[Linkable]) -> List[_AnchorMatcher]:
    matchers: List[_AnchorMatcher] = []
    for item in suggestions:
        if isinstance(item, LinkOpportunity):
            anchor_text, url = item.anchor_text, item.target.page_url
        else:
            anchor_text, url = item.anchor_text, item.url
        display = re.sub(r"\s+", " ", (anchor_text or "").strip())
        if not display or not url:
            continue
        matchers.append(
            _AnchorMatcher(
                pattern=compile_phrase(display),
                key=normalize_phrase(display),
                url=url,
                anchor_text=display,
            )
        )
    return matchers


def _wrap_first(soup: BeautifulSoup, matcher: _AnchorMatcher) -> InsertedLink | None:
    for text_node in list(soup.descendants):
        if not isinstance(text_node, NavigableString) or _should_skip(text_node):
            continue
        original = str(text_node)
        if not original.strip():
            continue
        match = matcher.pattern.search(original)
        if not match:
            continue

        anchor = soup.new_tag("a", href=matcher.url)
        anchor["target"] = "_blank"
        anchor["rel"] = ["noopener", "noreferrer"]
        anchor.string = match.group(0)

        after = original[match.end():]
        before = original[: match.start()]
        text_node.insert_after(anchor)
        if after:
            anchor.insert_after(after)
        if before:
            text_node.replace_with(before)
        else:
            text_node.extract()

        return InsertedLink(
            anchor_text=match.group(0),
            url=matcher.url,
            context=extract_context_snippet(original, match) or None,
        )
    return None


def _should_skip(node: NavigableString) -> bool:
    """Return ``True`` for comments and text inside tags that must stay unlinked."""

    if type(node) is not NavigableString:
        return True
    parent = node.parent
    while parent is not None and getattr(parent, "name", None):
        if parent.name and parent.name.lower() in SKIP_TAGS:
            return True
        parent = parent.parent
    return False
