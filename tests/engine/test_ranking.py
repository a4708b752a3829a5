"""Ranking, filtering and cap tests for the interlinking analysis."""

from __future__ import annotations

import pytest

from recommender.engine.pipeline import analyze, article_topics
from recommender.engine.types import AnalysisOptions

from .conftest import make_article, make_page


def _corpus():
    return [
        make_page("python-basics", "Python Basics", ["python", "basics"]),
        make_page("python-tutorial", "Python Tutorial for Beginners", ["python", "tutorial", "beginners"]),
        make_page("django-intro", "Django Introduction", ["django", "python", "web"], kind="static"),
        make_page("gardening", "Gardening Tips", ["tomatoes", "soil"]),
        make_page("loops", "Loops in Python", ["python", "loops", "tutorial"], word_count=2600),
    ]


def test_concrete_python_scenario(engine_config):
    article = make_article(
        "This python tutorial covers the basics of python programming.",
        "Python tutorial",
        ["python", "tutorial"],
    )
    candidate = make_page("python-basics", "Python basics", ["python", "basics"])

    opportunities = analyze(article, [candidate], AnalysisOptions(max_links=5, min_relevance_score=0.1), engine_config)

    assert len(opportunities) == 1
    opportunity = opportunities[0]
    assert opportunity.target is candidate
    assert opportunity.relevance_score == pytest.approx(0.6 * (1 / 3) + 0.4 * (1 / 3))
    assert opportunity.authority_score == pytest.approx(0.75)
    assert opportunity.link_value == pytest.approx(0.6 * opportunity.relevance_score + 0.4 * 0.75)
    assert opportunity.anchor_text == "python"
    assert "python tutorial" in opportunity.context


def test_results_sorted_capped_and_above_threshold(engine_config):
    article = make_article(
        "A python tutorial with loops, basics and a django introduction.",
        "Learning Python",
        ["python", "tutorial", "loops"],
    )
    options = AnalysisOptions(max_links=3, min_relevance_score=0.35)

    opportunities = analyze(article, _corpus(), options, engine_config)

    assert len(opportunities) <= 3
    values = [item.link_value for item in opportunities]
    assert values == sorted(values, reverse=True)
    assert all(value >= options.min_relevance_score for value in values)
    assert "scan_gardening" not in {item.target.id for item in opportunities}


@pytest.mark.parametrize("max_links", [0, 1, 2, 10])
def test_cap_is_respected(engine_config, max_links):
    article = make_article("python tutorial loops", "Python", ["python", "tutorial"])

    opportunities = analyze(article, _corpus(), AnalysisOptions(max_links=max_links, min_relevance_score=0.0), engine_config)

    assert len(opportunities) <= max_links


def test_empty_corpus_and_zero_links_return_nothing(engine_config):
    article = make_article("python", "Python", ["python"])

    assert analyze(article, [], AnalysisOptions(), engine_config) == []
    assert analyze(article, _corpus(), AnalysisOptions(max_links=0), engine_config) == []


def test_all_candidates_below_threshold(engine_config):
    article = make_article("python", "Python", ["python"])

    assert analyze(article, _corpus(), AnalysisOptions(min_relevance_score=0.99), engine_config) == []


def test_ties_prefer_longer_pages(engine_config):
    article = make_article("python guide", "Python guide", ["python"])
    shorter = make_page("short", "Python", ["python"], word_count=3000)
    longer = make_page("long", "Python", ["python"], word_count=5000)

    opportunities = analyze(article, [shorter, longer], AnalysisOptions(min_relevance_score=0.0), engine_config)

    assert opportunities[0].link_value == pytest.approx(opportunities[1].link_value)
    assert [item.target.id for item in opportunities] == ["scan_long", "scan_short"]


def test_pages_without_lexical_overlap_are_ignored(engine_config):
    article = make_article("python", "Python tutorial", ["python"])
    heavy = make_page("heavy", "Composting guide", ["compost"], word_count=10000)

    assert analyze(article, [heavy], AnalysisOptions(min_relevance_score=0.0), engine_config) == []


def test_skips_article_itself_and_duplicate_urls(engine_config):
    article = make_article("python tutorial", "Python Tutorial", ["python", "tutorial"])
    itself = make_page("self", "python tutorial", ["python", "tutorial"])
    first = make_page("a", "Python Basics", ["python"])
    duplicate = make_page("b", "Python Basics Again", ["python"])
    duplicate.page_url = first.page_url

    opportunities = analyze(article, [itself, first, duplicate], AnalysisOptions(min_relevance_score=0.0), engine_config)

    assert [item.target.id for item in opportunities] == ["scan_a"]


def test_anchor_prefers_shortest_fragment_in_article(engine_config):
    article = make_article(
        "Our Django Introduction explains views. Django is a python web framework.",
        "Building web apps",
        ["web", "django"],
    )
    candidate = make_page("django-intro", "Django Introduction", ["django introduction", "django"])

    opportunity = analyze(article, [candidate], AnalysisOptions(min_relevance_score=0.0), engine_config)[0]

    assert opportunity.anchor_text == "Django"


def test_anchor_falls_back_to_title(engine_config):
    article = make_article("Nothing relevant is written here.", "Python tutorial", ["python"])
    candidate = make_page("p1", "Python Basics", ["python"])

    opportunity = analyze(article, [candidate], AnalysisOptions(min_relevance_score=0.0), engine_config)[0]

    assert opportunity.anchor_text == "Python Basics"
    assert opportunity.context.startswith("For more information about python")


def test_reason_explains_the_match(engine_config):
    article = make_article("python loops tutorial", "Python loops", ["python", "loops", "tutorial"])
    candidate = make_page("loops", "Loops in Python", ["python", "loops", "tutorial"], word_count=2600)

    opportunity = analyze(article, [candidate], AnalysisOptions(min_relevance_score=0.0), engine_config)[0]

    assert "Shares keywords: python, loops" in opportunity.reason
    assert "Shares topics: python, loops" in opportunity.reason
    assert "Comprehensive content" in opportunity.reason


def test_article_topics_dedupe_filter_and_cap():
    keywords = ["SEO", "Python", "python ", "web", "Django", "flask", "loops", "testing", "async"]

    assert article_topics(keywords) == ["python", "django", "flask", "loops", "testing"]
