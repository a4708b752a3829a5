"""Relevance and authority scoring tests."""

from __future__ import annotations

import pytest

from recommender.engine.scoring import enriched_relevance, link_value, score

from .conftest import make_article, make_page


def test_phase1_score_combines_keyword_and_title_overlap(engine_config):
    article = make_article("Body", "Python tutorial", ["python", "tutorial"])
    candidate = make_page("p1", "Python basics", ["python", "basics"])

    result = score(article, candidate, engine_config)

    # keywords: 1/3, title words: {python} / {python, tutorial, basics} = 1/3
    assert result.relevance == pytest.approx(0.6 * (1 / 3) + 0.4 * (1 / 3))
    assert result.authority == pytest.approx(1500 / 2000)


def test_authority_saturates(engine_config):
    article = make_article("Body", "Title", ["python"])
    long_page = make_page("long", "Python", ["python"], word_count=8000)
    short_page = make_page("short", "Python", ["python"], word_count=100)

    assert score(article, long_page, engine_config).authority == 1.0
    assert score(article, short_page, engine_config).authority == pytest.approx(0.05)


def test_score_without_overlap_is_zero(engine_config):
    article = make_article("Body", "Gardening tips", ["tomatoes"])
    candidate = make_page("p1", "Python basics", ["python"])

    assert score(article, candidate, engine_config).relevance == 0.0


def test_link_value_weights(engine_config):
    assert link_value(0.5, 1.0, engine_config) == pytest.approx(0.7)
    engine_config.raw["weights"]["link_value"] = {"relevance": 1.0, "authority": 0.0}
    assert link_value(0.5, 1.0, engine_config) == pytest.approx(0.5)


def test_enriched_relevance_uses_content_overlap(engine_config):
    article = make_article(
        "<p>Learning python requires practice with functions and loops</p>",
        "Python tutorial",
        ["python", "tutorial"],
    )
    target = make_page(
        "p1",
        "Python basics",
        ["python", "basics"],
        content="Practice python functions and loops every single day",
    )

    relevance = enriched_relevance(article, target, engine_config)

    # article significant: learning python requires practice with functions loops
    # target significant: practice python functions loops every single
    content_overlap = 4 / 9
    expected = 0.4 * (1 / 3) + 0.2 * (1 / 3) + 0.4 * content_overlap
    assert relevance == pytest.approx(expected)
