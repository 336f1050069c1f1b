"""
Model builders and fake collaborators.
"""

from datetime import datetime, timezone
from typing import Dict, Optional
from unittest.mock import AsyncMock

from pagelens.protocols import Headings, PageMetadata, Paragraph, ScrapedData

SAMPLE_URL = "https://example.com/articles/python"


def words(count: int, word: str = "word") -> str:
    return " ".join([word] * count)


def build_page(
    *,
    url: str = SAMPLE_URL,
    title: str = "",
    headings: Optional[Dict[str, list]] = None,
    paragraphs: Optional[list] = None,
    links: Optional[list] = None,
    images: Optional[list] = None,
    metadata: Optional[PageMetadata] = None,
) -> ScrapedData:
    """Build ScrapedData from plain values; paragraph strings become Paragraphs."""
    return ScrapedData(
        url=url,
        title=title,
        headings=Headings.from_mapping(headings or {}),
        paragraphs=tuple(Paragraph(text=text) if isinstance(text, str) else text for text in (paragraphs or [])),
        links=tuple(links or ()),
        images=tuple(images or ()),
        metadata=metadata or PageMetadata(),
        scraped_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


CANNED_RESPONSES = {
    "summary": "This page explains asynchronous programming in Python.",
    "topics": "asyncio, event loop, coroutines, tasks, concurrency",
    "sentiment": "positive\nConfidence: 85",
    "categories": "Technology, Education",
    "entities": (
        "People: Guido van Rossum\n"
        "Organizations: Python Software Foundation\n"
        "Locations: none\n"
        "Technologies: Python, asyncio"
    ),
    "keywords": "asyncio: 95\nevent loop: 80\ncoroutines: 70",
    "quality": "- Clear structure\n- Add code examples\n- Expand the conclusion",
    "competitive": "1. Add benchmarks\n2. Include diagrams",
    "paragraph": "Summary: A condensed sentence.\nImportance: 80",
}

_PROMPT_MARKERS = (
    ("concise 2-3 sentence summary", "summary"),
    ("key topics", "topics"),
    ("overall sentiment", "sentiment"),
    ("Categorize the following", "categories"),
    ("named entities", "entities"),
    ("most important keywords", "keywords"),
    ("Assess the quality", "quality"),
    ("compete for the same audience", "competitive"),
    ("Summarize the following paragraph", "paragraph"),
)


def prompt_kind(prompt: str) -> str:
    for marker, kind in _PROMPT_MARKERS:
        if marker in prompt:
            return kind
    raise AssertionError(f"unexpected prompt: {prompt[:60]}")


class FakeTextGenerator:
    """Answers every prompt kind with a canned response.

    ``failures`` maps a prompt kind to an exception raised instead;
    ``overrides`` replaces the canned text for a kind.
    """

    def __init__(self, failures: Optional[Dict[str, Exception]] = None, overrides: Optional[Dict[str, str]] = None):
        self.failures = failures or {}
        self.responses = {**CANNED_RESPONSES, **(overrides or {})}
        self.generate = AsyncMock(side_effect=self._respond)

    async def _respond(self, prompt: str) -> str:
        kind = prompt_kind(prompt)
        if kind in self.failures:
            raise self.failures[kind]
        return self.responses[kind]

    def calls_for(self, kind: str) -> int:
        return sum(1 for call in self.generate.call_args_list if prompt_kind(call.args[0]) == kind)
