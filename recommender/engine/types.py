"""Typed data structures shared by the interlinking engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

SourceKind = Literal["cms", "static"]


class InvalidInputError(ValueError):
    """Raised when the caller supplies a malformed article or options."""


@dataclass(frozen=True)
class CmsSource:
    """Page backed by a CMS collection item."""

    item_id: str
    collection_id: Optional[str] = None
    kind: SourceKind = field(default="cms", init=False)

    def fetch_ref(self) -> Optional[Tuple[str, str]]:
        if not self.collection_id:
            return None
        return self.collection_id, self.item_id


@dataclass(frozen=True)
class StaticSource:
    """Static page discovered by the site scan; never fetched."""

    kind: SourceKind = field(default="static", init=False)

    def fetch_ref(self) -> None:
        return None


PageSource = Union[CmsSource, StaticSource]


@dataclass
class IndexedContent:
    """Normalized candidate page.

    ``content`` stays empty until the enrichment phase fetches the real body,
    at which point ``content`` and ``word_count`` are replaced in place.
    """

    id: str
    page_url: str
    title: str
    content: str
    keywords: List[str]
    topics: List[str]
    word_count: int
    source: PageSource
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> SourceKind:
        return self.source.kind


@dataclass(frozen=True)
class ArticleInput:
    """The freshly written article links are recommended for."""

    content: str
    title: str
    keywords: List[str]


@dataclass(frozen=True)
class AnalysisOptions:
    """Per-call options for an interlinking analysis."""

    max_links: int = 5
    enable_enrichment: bool = False
    enrich_top_n: int = 10
    min_relevance_score: float = 0.3


@dataclass(frozen=True)
class Score:
    relevance: float
    authority: float


@dataclass(frozen=True)
class FetchedContent:
    """Full text returned by the content API for one CMS item."""

    content: str
    word_count: int


@dataclass
class LinkOpportunity:
    """Scored candidate link that has not been finalized yet."""

    target: IndexedContent
    anchor_text: str
    relevance_score: float
    authority_score: float
    reason: str
    context: str = ""
    relevance_weight: float = 0.6
    authority_weight: float = 0.4

    @property
    def link_value(self) -> float:
        return self.relevance_score * self.relevance_weight + self.authority_score * self.authority_weight

    def add_reason(self, note: str) -> None:
        if not note:
            return
        self.reason = f"{self.reason}; {note}" if self.reason else note

    def improve_relevance(self, score: float, note: str) -> bool:
        """Raise the relevance score if ``score`` beats it, recording why."""

        if score <= self.relevance_score:
            return False
        self.relevance_score = min(score, 1.0)
        self.add_reason(note)
        return True


@dataclass(frozen=True)
class LinkSuggestion:
    """Final suggestion handed back to the calling application."""

    anchor_text: str
    url: str
    kind: SourceKind
    relevance_score_percent: int
    context: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "anchor_text": self.anchor_text,
            "url": self.url,
            "type": self.kind,
            "relevance_score": self.relevance_score_percent,
            "context": self.context,
        }


@dataclass(frozen=True)
class InsertedLink:
    """Details about a link that was inserted into the article body."""

    anchor_text: str
    url: str
    context: str | None = None


@dataclass(frozen=True)
class InsertionResult:
    content: str
    inserted: List[InsertedLink]
