"""Full-content fetching for CMS items used by the enrichment phase."""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from typing import Any, Dict
from urllib.parse import quote

from bs4 import BeautifulSoup  # type: ignore

from .types import FetchedContent

log = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.webflow.com/v2"

# Field names that commonly hold the article body in a collection schema
BODY_FIELDS = ("post-body", "content", "body", "article-body", "post-content")

CONTENT_CHAR_LIMIT = 1000


class WebflowContentFetcher:
    """Callable ``(collection_id, item_id) -> FetchedContent | None``.

    Any transport, HTTP or decoding problem results in ``None`` so the
    enrichment phase can keep the phase-1 score for that candidate.
    """

    def __init__(self, api_token: str, *, api_base: str = DEFAULT_API_BASE, timeout: float = 8.0) -> None:
        self.api_token = api_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def __call__(self, collection_id: str, item_id: str) -> FetchedContent | None:
        url = f"{self.api_base}/collections/{quote(collection_id, safe='')}/items/{quote(item_id, safe='')}"
        request = urllib.request.Request(
            url,
            headers={
                "Authorization": f"Bearer {self.api_token}",
                "Accept": "application/json",
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            log.debug("Content API returned %s for %s/%s", exc.code, collection_id, item_id)
            return None
        except (urllib.error.URLError, OSError, ValueError) as exc:
            log.debug("Error fetching content for %s/%s: %s", collection_id, item_id, exc)
            return None

        return parse_item(payload)


def parse_item(payload: Any) -> FetchedContent | None:
    """Extract plain text and word count from a collection item payload."""

    if not isinstance(payload, dict):
        return None
    field_data: Dict[str, Any] = payload.get("fieldData") or {}
    if not isinstance(field_data, dict):
        return None

    body = ""
    for name in BODY_FIELDS:
        value = field_data.get(name)
        if isinstance(value, str) and value.strip():
            body = value
            break

    text = html_to_text(body)
    word_count = len(text.split()) if text else 0
    return FetchedContent(content=text[:CONTENT_CHAR_LIMIT], word_count=word_count)


def html_to_text(html: str) -> str:
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    return re.sub(r"\s+", " ", soup.get_text(" ")).strip()
