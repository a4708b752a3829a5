"""Forms validating the JSON payloads of the interlinking endpoints.

Validation happens here, before any scoring work, so malformed requests are
rejected with actionable field errors while an empty suggestion list stays a
normal response.
"""

from __future__ import annotations

from django import forms

from .engine.types import AnalysisOptions, LinkSuggestion

DEFAULT_OPTIONS = AnalysisOptions()


class AnalyzeInterlinkingForm(forms.Form):
    """Article fields, corpus snapshot and per-call analysis options."""

    content = forms.CharField(strip=False, help_text='Article body, plain text or HTML.')
    title = forms.CharField(max_length=300)
    keywords = forms.JSONField(required=False, help_text='List of article keywords.')
    corpus = forms.JSONField(required=False, help_text='Site scan records to recommend links from.')
    max_links = forms.IntegerField(required=False, min_value=0, max_value=25)
    enable_enrichment = forms.BooleanField(required=False)
    enrich_top_n = forms.IntegerField(required=False, min_value=0, max_value=50)
    min_relevance_score = forms.FloatField(required=False, min_value=0.0, max_value=1.0)

    def clean_keywords(self) -> list[str]:
        if 'keywords' not in self.data:
            raise forms.ValidationError('This field is required.')
        value = self.cleaned_data.get('keywords')
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise forms.ValidationError('Keywords must be a list of strings.')
        return value

    def clean_corpus(self) -> list[dict]:
        value = self.cleaned_data.get('corpus')
        if value is None:
            return []
        if not isinstance(value, list):
            raise forms.ValidationError('Corpus must be a list of page records.')
        return value

    def to_options(self) -> AnalysisOptions:
        data = self.cleaned_data
        return AnalysisOptions(
            max_links=_or_default(data.get('max_links'), DEFAULT_OPTIONS.max_links),
            enable_enrichment=bool(data.get('enable_enrichment')),
            enrich_top_n=_or_default(data.get('enrich_top_n'), DEFAULT_OPTIONS.enrich_top_n),
            min_relevance_score=_or_default(data.get('min_relevance_score'), DEFAULT_OPTIONS.min_relevance_score),
        )


class InsertLinksForm(forms.Form):
    """Article body plus the suggestions to weave into it."""

    content = forms.CharField(strip=False)
    suggestions = forms.JSONField(required=False)
    max_links = forms.IntegerField(required=False, min_value=0, max_value=25)

    def clean_suggestions(self) -> list[LinkSuggestion]:
        value = self.cleaned_data.get('suggestions')
        if value is None:
            return []
        if not isinstance(value, list):
            raise forms.ValidationError('Suggestions must be a list.')

        url_field = forms.URLField()
        parsed: list[LinkSuggestion] = []
        for index, item in enumerate(value, start=1):
            if not isinstance(item, dict):
                raise forms.ValidationError(f'Suggestion {index} must be an object.')
            anchor_text = item.get('anchor_text')
            if not isinstance(anchor_text, str) or not anchor_text.strip():
                raise forms.ValidationError(f'Suggestion {index} is missing anchor_text.')
            try:
                cleaned_url = url_field.clean(item.get('url'))
            except forms.ValidationError as exc:
                raise forms.ValidationError(
                    f'Suggestion {index} has an invalid URL: {exc.messages[0]}'
                ) from exc
            kind = item.get('type') if item.get('type') in ('cms', 'static') else 'cms'
            score = item.get('relevance_score')
            parsed.append(
                LinkSuggestion(
                    anchor_text=anchor_text.strip(),
                    url=cleaned_url,
                    kind=kind,
                    relevance_score_percent=int(score) if isinstance(score, (int, float)) else 0,
                    context=str(item.get('context') or ''),
                )
            )
        return parsed

    def max_links_or_default(self) -> int:
        return _or_default(self.cleaned_data.get('max_links'), DEFAULT_OPTIONS.max_links)


def _or_default(value, default):
    return default if value is None else value
