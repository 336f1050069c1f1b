"""
Parsers for free-text responses of the text-generation service.

Every parser is a pure function returning a tagged outcome: ``Parsed`` when
the response had the expected shape, ``Fallback`` with a default value and a
reason otherwise. Untyped data never leaves this module. When the wording of
a prompt changes, only the matching parser has to follow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Generic, List, Tuple, TypeVar, Union

from ..analytics.analyzer import round_half_up
from ..protocols import Entities, KeywordScore, Sentiment

T = TypeVar("T")

DEFAULT_CONFIDENCE = 70
DEFAULT_IMPORTANCE = 50


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Fallback(Generic[T]):
    value: T
    reason: str
    ok: ClassVar[bool] = False


ParseOutcome = Union[Parsed[T], Fallback[T]]


@dataclass(frozen=True)
class SentimentReading:
    sentiment: Sentiment
    confidence: int


@dataclass(frozen=True)
class ParagraphSummary:
    summary: str
    importance: int


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, round_half_up(value))))


def parse_list(text: str, max_items: int) -> ParseOutcome[Tuple[str, ...]]:
    """Comma-separated values, trimmed, empties dropped, capped."""
    items = tuple(item.strip() for item in text.split(",") if item.strip())[:max_items]
    if not items:
        return Fallback((), "no comma-separated values in response")
    return Parsed(items)


_CONFIDENCE = re.compile(r"confidence:\s*(\d+)", re.IGNORECASE)


def parse_sentiment(text: str) -> ParseOutcome[SentimentReading]:
    lowered = text.lower()
    match = _CONFIDENCE.search(text)
    confidence = _clamp(int(match.group(1))) if match else DEFAULT_CONFIDENCE

    if "positive" in lowered:
        return Parsed(SentimentReading(Sentiment.POSITIVE, confidence))
    if "negative" in lowered:
        return Parsed(SentimentReading(Sentiment.NEGATIVE, confidence))
    reading = SentimentReading(Sentiment.NEUTRAL, confidence)
    if "neutral" in lowered:
        return Parsed(reading)
    return Fallback(reading, "no sentiment label in response")


_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
_ENTITY_LINE = re.compile(r"^\**(people|organizations|locations|technologies)\**\s*:\s*(.*)$", re.IGNORECASE)


def _split_values(value: str, limit: int) -> Tuple[str, ...]:
    return tuple(item.strip(" *") for item in value.split(",") if item.strip(" *"))[:limit]


def parse_entities(text: str, max_per_kind: int = 5) -> ParseOutcome[Entities]:
    """Four labeled lines; a value mentioning "none" means no entities of that kind."""
    found = {}
    for line in text.splitlines():
        match = _ENTITY_LINE.match(_BULLET.sub("", line).strip())
        if not match:
            continue
        kind, value = match.group(1).lower(), match.group(2).strip()
        found[kind] = () if "none" in value.lower() else _split_values(value, max_per_kind)

    if not found:
        return Fallback(Entities(), "no labeled entity lines in response")
    return Parsed(Entities(**found))


_KEYWORD_LINE = re.compile(r"^(.+?)\s*:\s*(\d+(?:\.\d+)?)\s*%?$")


def parse_keywords(text: str, max_keywords: int = 10) -> ParseOutcome[Tuple[KeywordScore, ...]]:
    """Lines of ``keyword: number``; malformed lines are skipped."""
    keywords: List[KeywordScore] = []
    for line in text.splitlines():
        match = _KEYWORD_LINE.match(_BULLET.sub("", line).strip())
        if not match:
            continue
        keyword = match.group(1).strip(" *\"'")
        if not keyword:
            continue
        keywords.append(KeywordScore(keyword=keyword, relevance=_clamp(float(match.group(2)))))
        if len(keywords) == max_keywords:
            break

    if not keywords:
        return Fallback((), "no keyword lines in response")
    return Parsed(tuple(keywords))


def parse_bullets(text: str, max_items: int = 5) -> ParseOutcome[Tuple[str, ...]]:
    """One insight per line, list markers removed."""
    items = []
    for line in text.splitlines():
        item = _BULLET.sub("", line).strip()
        if item:
            items.append(item)
    if not items:
        return Fallback((), "empty response")
    return Parsed(tuple(items[:max_items]))


_SUMMARY_LINE = re.compile(r"^\s*summary\s*:\s*(.*)$", re.IGNORECASE)
_IMPORTANCE_LINE = re.compile(r"^\s*importance\s*:\s*(\d+)", re.IGNORECASE)


def parse_paragraph_summary(text: str) -> ParseOutcome[ParagraphSummary]:
    summary_lines = []
    importance = None
    for line in text.splitlines():
        importance_match = _IMPORTANCE_LINE.match(line)
        if importance_match:
            importance = _clamp(int(importance_match.group(1)))
            continue
        summary_match = _SUMMARY_LINE.match(line)
        summary_lines.append(summary_match.group(1) if summary_match else line)

    summary = " ".join(part.strip() for part in summary_lines if part.strip())
    if not summary:
        return Fallback(ParagraphSummary("", DEFAULT_IMPORTANCE), "empty summary")
    if importance is None:
        return Fallback(ParagraphSummary(summary, DEFAULT_IMPORTANCE), "no importance score")
    return Parsed(ParagraphSummary(summary, importance))
