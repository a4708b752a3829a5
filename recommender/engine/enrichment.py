"""Second-pass refinement of the ranked opportunities using full page text.

Only the head of the phase-1 ranking is considered. Full content is fetched
for eligible CMS pages through a bounded thread pool; each fetch is limited by
its own timeout and the whole phase by an overall deadline. A failing
candidate keeps its phase-1 score and never aborts the batch.

A running thread cannot be interrupted, so ``fetch_timeout`` only discards a
result that arrives late. The fetch callable is expected to bound its own
I/O; ``WebflowContentFetcher`` does so with the same timeout at the socket.
A fetch that hangs anyway holds its worker until the overall deadline.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import EngineConfig, load_config
from .scoring import enriched_relevance
from .text import words
from .types import ArticleInput, FetchedContent, LinkOpportunity

log = logging.getLogger(__name__)

FetchFullContent = Callable[[str, str], Optional[FetchedContent]]

ENRICHED_NOTE = "Enhanced with full content analysis"


class EnrichmentTimeout(Exception):
    """A single content fetch overran its time budget."""


def enrich(
    opportunities: Sequence[LinkOpportunity],
    article: ArticleInput,
    fetch_full_content: FetchFullContent,
    top_n: int,
    config: EngineConfig | None = None,
) -> List[LinkOpportunity]:
    """Return the opportunities with the top ``top_n`` refined by full text."""

    engine_config = config or load_config(None)
    ranked = list(opportunities)
    if top_n <= 0 or not ranked:
        return ranked

    head = ranked[:top_n]
    tail = ranked[top_n:]

    jobs: Dict[str, Tuple[LinkOpportunity, Tuple[str, str]]] = {}
    for opportunity in head:
        ref = opportunity.target.source.fetch_ref()
        if ref is None or opportunity.target.id in jobs:
            continue
        jobs[opportunity.target.id] = (opportunity, ref)

    if not jobs:
        return ranked

    log.info("Enriching %d of %d top candidates with full content", len(jobs), len(head))
    fetched = _fetch_all({target_id: ref for target_id, (_, ref) in jobs.items()}, fetch_full_content, top_n, engine_config)

    improved = 0
    for target_id, content in fetched.items():
        opportunity = jobs[target_id][0]
        if _apply(opportunity, content, article, engine_config):
            improved += 1

    if improved:
        head.sort(key=lambda item: (item.link_value, item.target.word_count), reverse=True)

    log.info(
        "Enrichment complete: %d fetched, %d improved, %d failed or pending",
        len(fetched),
        improved,
        len(jobs) - len(fetched),
    )
    return head + tail


def _fetch_all(
    jobs: Dict[str, Tuple[str, str]],
    fetch_full_content: FetchFullContent,
    top_n: int,
    config: EngineConfig,
) -> Dict[str, FetchedContent]:
    max_workers = max(1, min(len(jobs), top_n, int(config.enrichment("max_workers", 4))))
    fetch_timeout = float(config.enrichment("fetch_timeout", 8.0))
    deadline = float(config.enrichment("deadline", 20.0))

    results: Dict[str, FetchedContent] = {}
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="enrich")
    try:
        futures: Dict[Future, str] = {
            executor.submit(_timed_fetch, fetch_full_content, ref, fetch_timeout): target_id
            for target_id, ref in jobs.items()
        }
        try:
            for future in as_completed(futures, timeout=deadline):
                target_id = futures[future]
                try:
                    content = future.result()
                except Exception as exc:  # noqa: BLE001 - isolate per-candidate failures
                    log.warning("Failed to enrich candidate %s, keeping phase-1 score: %s", target_id, exc)
                    continue
                if content is None:
                    log.warning("No content returned for candidate %s, keeping phase-1 score", target_id)
                    continue
                results[target_id] = content
        except FuturesTimeoutError:
            pending = sum(1 for future in futures if not future.done())
            log.warning("Enrichment deadline of %.1fs expired with %d fetches pending", deadline, pending)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return results


def _timed_fetch(
    fetch_full_content: FetchFullContent,
    ref: Tuple[str, str],
    timeout: float,
) -> FetchedContent | None:
    started = time.monotonic()
    result = fetch_full_content(*ref)
    elapsed = time.monotonic() - started
    if elapsed > timeout:
        raise EnrichmentTimeout(f"fetch took {elapsed:.2f}s, limit is {timeout:.2f}s")
    return _coerce(result)


def _coerce(result: Any) -> FetchedContent | None:
    if result is None or isinstance(result, FetchedContent):
        return result
    if isinstance(result, Mapping) and isinstance(result.get("content"), str):
        word_count = result.get("word_count", result.get("wordCount", 0))
        if not isinstance(word_count, int) or isinstance(word_count, bool):
            raise ValueError(f"malformed word count: {word_count!r}")
        return FetchedContent(content=result["content"], word_count=word_count)
    raise ValueError(f"malformed content response: {type(result).__name__}")


def _apply(
    opportunity: LinkOpportunity,
    fetched: FetchedContent,
    article: ArticleInput,
    config: EngineConfig,
) -> bool:
    target = opportunity.target
    target.content = fetched.content
    if fetched.word_count > 0:
        target.word_count = fetched.word_count
    else:
        target.word_count = len(words(fetched.content))

    score = enriched_relevance(article, target, config)
    return opportunity.improve_relevance(score, ENRICHED_NOTE)
