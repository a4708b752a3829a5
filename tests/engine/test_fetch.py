"""Content API client tests."""

from __future__ import annotations

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

from recommender.engine.fetch import WebflowContentFetcher, html_to_text, parse_item


def _response(payload):
    resp = MagicMock()
    resp.read.return_value = json.dumps(payload).encode("utf-8")
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


def test_parse_item_prefers_known_body_fields():
    payload = {
        "fieldData": {
            "name": "Python basics",
            "summary": "ignored",
            "post-body": "<h2>Intro</h2><p>Python   basics for <strong>new</strong> developers.</p>",
        }
    }

    fetched = parse_item(payload)

    assert fetched.content == "Intro Python basics for new developers."
    assert fetched.word_count == 6


def test_parse_item_truncates_content_but_counts_all_words():
    body = "<p>" + " ".join(["word"] * 600) + "</p>"

    fetched = parse_item({"fieldData": {"content": body}})

    assert fetched.word_count == 600
    assert len(fetched.content) == 1000


def test_parse_item_rejects_malformed_payloads():
    assert parse_item(["not", "a", "dict"]) is None
    assert parse_item({"fieldData": "nope"}) is None
    empty = parse_item({"fieldData": {}})
    assert empty.content == "" and empty.word_count == 0


@patch("recommender.engine.fetch.urllib.request.urlopen")
def test_fetcher_requests_item_with_token(mock_urlopen):
    mock_urlopen.return_value = _response({"fieldData": {"body": "<p>Hello python world</p>"}})
    fetcher = WebflowContentFetcher("secret-token", api_base="https://api.example.com/v2/", timeout=3.0)

    fetched = fetcher("col 1", "item-9")

    assert fetched.content == "Hello python world"
    request = mock_urlopen.call_args.args[0]
    assert request.full_url == "https://api.example.com/v2/collections/col%201/items/item-9"
    assert request.get_header("Authorization") == "Bearer secret-token"
    assert mock_urlopen.call_args.kwargs["timeout"] == 3.0


@patch("recommender.engine.fetch.urllib.request.urlopen")
def test_fetcher_returns_none_on_http_error(mock_urlopen):
    mock_urlopen.side_effect = urllib.error.HTTPError(
        "https://api.example.com", 404, "Not Found", {}, io.BytesIO(b"")
    )

    assert WebflowContentFetcher("token")("col", "missing") is None


@patch("recommender.engine.fetch.urllib.request.urlopen")
def test_fetcher_returns_none_on_network_or_decode_error(mock_urlopen):
    mock_urlopen.side_effect = TimeoutError("timed out")
    assert WebflowContentFetcher("token")("col", "slow") is None

    mock_urlopen.side_effect = None
    bad = MagicMock()
    bad.read.return_value = b"not json"
    bad.__enter__.return_value = bad
    bad.__exit__.return_value = False
    mock_urlopen.return_value = bad
    assert WebflowContentFetcher("token")("col", "garbled") is None


def test_html_to_text_decodes_entities_and_collapses_whitespace():
    assert html_to_text("<div><p>Fish &amp; chips</p>\n\n<p>on <em>Fridays</em></p></div>") == "Fish & chips on Fridays"
    assert html_to_text("") == ""
