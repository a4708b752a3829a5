"""JSON views exposing the interlinking engine to the dashboard.

``analyze_interlinking`` returns ranked suggestions without touching the
article; ``insert_links`` rewrites the article body with a chosen set of
suggestions. Keeping them separate lets the dashboard preview suggestions
before committing to them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .engine.config import EngineConfig, load_config
from .engine.enrichment import FetchFullContent
from .engine.fetch import DEFAULT_API_BASE, WebflowContentFetcher
from .engine.pipeline import analyze_interlinking as run_analysis
from .engine.placement import insert_links as run_insertion
from .engine.types import InvalidInputError
from .forms import AnalyzeInterlinkingForm, InsertLinksForm

log = logging.getLogger(__name__)


def _interlinking_settings() -> Dict[str, Any]:
    return getattr(settings, 'INTERLINKING', {})


def engine_config() -> EngineConfig:
    """Load the engine tuning from the configured YAML file, if any."""

    return load_config(_interlinking_settings().get('CONFIG_PATH'))


def content_fetcher(config: EngineConfig) -> FetchFullContent | None:
    """Build the content API client used for enrichment, when credentials exist."""

    options = _interlinking_settings()
    token = options.get('WEBFLOW_API_TOKEN')
    if not token:
        return None
    return WebflowContentFetcher(
        token,
        api_base=options.get('WEBFLOW_API_BASE') or DEFAULT_API_BASE,
        timeout=float(config.enrichment('fetch_timeout', 8.0)),
    )


def _load_json(request: HttpRequest) -> Dict[str, Any] | None:
    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except (UnicodeDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def _message(text: str) -> Dict[str, Any]:
    return {'__all__': [{'message': text, 'code': 'invalid'}]}


def _error(errors: Any, status: int = 400) -> JsonResponse:
    return JsonResponse({'errors': errors}, status=status)


@csrf_exempt
@require_POST
def analyze_interlinking(request: HttpRequest) -> JsonResponse:
    """Rank link suggestions for the posted article against its site corpus."""

    payload = _load_json(request)
    if payload is None:
        return _error(_message('Request body must be a JSON object.'))

    form = AnalyzeInterlinkingForm(payload)
    if not form.is_valid():
        return _error(form.errors.get_json_data())

    config = engine_config()
    options = form.to_options()
    fetcher = content_fetcher(config) if options.enable_enrichment else None
    try:
        suggestions = run_analysis(
            form.cleaned_data['content'],
            form.cleaned_data['title'],
            form.cleaned_data['keywords'],
            form.cleaned_data['corpus'],
            options=options,
            fetch_full_content=fetcher,
            config=config,
        )
    except InvalidInputError as exc:
        return _error(_message(str(exc)))

    return JsonResponse(
        {
            'suggestions': [suggestion.as_dict() for suggestion in suggestions],
            'count': len(suggestions),
        }
    )


@csrf_exempt
@require_POST
def insert_links(request: HttpRequest) -> JsonResponse:
    """Insert the posted suggestions into the posted article body."""

    payload = _load_json(request)
    if payload is None:
        return _error(_message('Request body must be a JSON object.'))

    form = InsertLinksForm(payload)
    if not form.is_valid():
        return _error(form.errors.get_json_data())

    result = run_insertion(
        form.cleaned_data['content'],
        form.cleaned_data['suggestions'],
        form.max_links_or_default(),
    )
    log.info('Inserted %d links into article body', len(result.inserted))
    return JsonResponse(
        {
            'content': result.content,
            'inserted': [
                {'anchor_text': item.anchor_text, 'url': item.url, 'context': item.context}
                for item in result.inserted
            ],
        }
    )
