"""
Unit tests for response parsers.
"""

import pytest

from pagelens.insights import (
    Fallback,
    Parsed,
    parse_bullets,
    parse_entities,
    parse_keywords,
    parse_list,
    parse_paragraph_summary,
    parse_sentiment,
)
from pagelens.protocols import Entities, KeywordScore, Sentiment


class TestParseList:
    def test_trims_and_caps(self):
        outcome = parse_list(" a , b,, c ,d,e,f,g,h,i ", max_items=7)

        assert isinstance(outcome, Parsed)
        assert outcome.value == ("a", "b", "c", "d", "e", "f", "g")

    def test_empty_response_falls_back(self):
        outcome = parse_list(" , ,", max_items=4)

        assert isinstance(outcome, Fallback)
        assert outcome.value == ()
        assert not outcome.ok


class TestParseSentiment:
    def test_label_and_confidence(self):
        outcome = parse_sentiment("Positive\nConfidence: 92")

        assert outcome.ok
        assert outcome.value.sentiment is Sentiment.POSITIVE
        assert outcome.value.confidence == 92

    def test_confidence_defaults_to_70(self):
        outcome = parse_sentiment("negative")
        assert outcome.value.sentiment is Sentiment.NEGATIVE
        assert outcome.value.confidence == 70

    def test_confidence_clamped(self):
        assert parse_sentiment("neutral confidence: 250").value.confidence == 100

    def test_unlabelled_response_is_neutral_fallback(self):
        outcome = parse_sentiment("I cannot tell.")

        assert isinstance(outcome, Fallback)
        assert outcome.value.sentiment is Sentiment.NEUTRAL
        assert outcome.value.confidence == 70


class TestParseEntities:
    def test_labeled_lines(self):
        text = "People: Ada Lovelace, Alan Turing\nOrganizations: none\nLocations: London\nTechnologies: Python"
        outcome = parse_entities(text)

        assert outcome.ok
        assert outcome.value == Entities(
            people=("Ada Lovelace", "Alan Turing"),
            organizations=(),
            locations=("London",),
            technologies=("Python",),
        )

    def test_markdown_and_bullets_tolerated(self):
        text = "- **People**: Grace Hopper\n* **Technologies:** COBOL, FORTRAN"
        outcome = parse_entities(text)

        assert outcome.value.people == ("Grace Hopper",)
        assert outcome.value.technologies == ("COBOL", "FORTRAN")
        assert outcome.value.locations == ()

    def test_caps_each_kind(self):
        outcome = parse_entities("Locations: a, b, c, d, e, f, g", max_per_kind=5)
        assert outcome.value.locations == ("a", "b", "c", "d", "e")

    def test_no_labels_falls_back_to_empty(self):
        outcome = parse_entities("Sorry, I found nothing of note.")

        assert isinstance(outcome, Fallback)
        assert outcome.value == Entities()


class TestParseKeywords:
    def test_keyword_lines(self):
        text = "1. machine learning: 95\n- data: 80%\nnot a keyword line\nscale: 120"
        outcome = parse_keywords(text)

        assert outcome.value == (
            KeywordScore("machine learning", 95),
            KeywordScore("data", 80),
            KeywordScore("scale", 100),
        )

    def test_fractional_relevance_rounds_half_up(self):
        outcome = parse_keywords("asyncio: 72.5\nevent loop: 40.4")

        assert outcome.value == (KeywordScore("asyncio", 73), KeywordScore("event loop", 40))

    def test_capped(self):
        text = "\n".join(f"kw{i}: {i}" for i in range(20))
        assert len(parse_keywords(text, max_keywords=10).value) == 10

    def test_nothing_parseable(self):
        outcome = parse_keywords("no keywords here")
        assert isinstance(outcome, Fallback)
        assert outcome.value == ()


class TestParseBullets:
    def test_markers_removed(self):
        outcome = parse_bullets("- one\n* two\n• three\n1. four\n2) five\nsix", max_items=5)
        assert outcome.value == ("one", "two", "three", "four", "five")

    def test_blank_response(self):
        assert isinstance(parse_bullets("\n  \n"), Fallback)


class TestParseParagraphSummary:
    def test_summary_and_importance(self):
        outcome = parse_paragraph_summary("Summary: Asyncio runs many tasks.\nImportance: 85")

        assert outcome.ok
        assert outcome.value.summary == "Asyncio runs many tasks."
        assert outcome.value.importance == 85

    def test_missing_importance_defaults(self):
        outcome = parse_paragraph_summary("Just a sentence.")

        assert isinstance(outcome, Fallback)
        assert outcome.value.summary == "Just a sentence."
        assert outcome.value.importance == 50

    @pytest.mark.parametrize("text", ["", "Importance: 30"])
    def test_empty_summary(self, text):
        outcome = parse_paragraph_summary(text)
        assert isinstance(outcome, Fallback)
        assert outcome.value.summary == ""
