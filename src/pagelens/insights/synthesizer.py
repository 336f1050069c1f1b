"""
Insight synthesis: fills AIAnalysis from a text-generation collaborator.

All prompts are independent and issued concurrently. Only the summary is
mandatory; every other field falls back to an empty or neutral default when
its call fails or its response cannot be parsed.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple, TypeVar

import structlog

from ..analytics.analyzer import count_words
from ..analytics.readability import flesch_reading_ease
from ..config.config import InsightConfig
from ..errors import AnalysisFailure
from ..observability.metrics import METRICS
from ..protocols import AIAnalysis, Entities, Paragraph, ScrapedData, Sentiment, TextGeneratorProtocol
from . import prompts
from .digest import prepare_content_text
from .parsers import (
    DEFAULT_CONFIDENCE,
    DEFAULT_IMPORTANCE,
    Fallback,
    ParseOutcome,
    SentimentReading,
    parse_bullets,
    parse_entities,
    parse_keywords,
    parse_list,
    parse_paragraph_summary,
    parse_sentiment,
)
from .rules import content_quality_score, seo_insights

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Importance drop per position for paragraphs that are only truncated.
IMPORTANCE_STEP = 5


class InsightSynthesizer:
    """Generates qualitative fields for a page."""

    def __init__(self, generator: TextGeneratorProtocol, config: Optional[InsightConfig] = None) -> None:
        self.generator = generator
        self.config = config or InsightConfig()
        self.logger = logger.bind(component="InsightSynthesizer")

    async def analyze(self, data: ScrapedData) -> AIAnalysis:
        """Run every insight prompt and merge the results by field.

        Raises:
            AnalysisFailure: the digest could not be prepared or the summary call failed
        """
        try:
            digest = prepare_content_text(data, self.config.digest_paragraphs)
        except Exception as e:
            raise AnalysisFailure(f"AI analysis failed: could not prepare content ({e})") from e

        long_digest = digest[: self.config.prompt_char_budget]
        short_digest = digest[: self.config.short_prompt_char_budget]

        calls: Dict[str, Awaitable[str]] = {
            "summary": self.generator.generate(prompts.SUMMARY_PROMPT.format(content=long_digest)),
            "topics": self.generator.generate(prompts.TOPICS_PROMPT.format(content=long_digest)),
            "sentiment": self.generator.generate(prompts.SENTIMENT_PROMPT.format(content=short_digest)),
            "categories": self.generator.generate(prompts.CATEGORIES_PROMPT.format(content=short_digest)),
            "entities": self.generator.generate(prompts.ENTITIES_PROMPT.format(content=long_digest)),
            "keywords": self.generator.generate(
                prompts.KEYWORDS_PROMPT.format(limit=self.config.max_keywords, content=long_digest)
            ),
            "quality": self.generator.generate(prompts.QUALITY_PROMPT.format(content=long_digest)),
            "competitive": self.generator.generate(prompts.COMPETITIVE_PROMPT.format(content=long_digest)),
        }
        results = await asyncio.gather(*calls.values(), return_exceptions=True)
        responses: Dict[str, Any] = dict(zip(calls.keys(), results))

        summary = responses["summary"]
        if isinstance(summary, BaseException):
            self.logger.error(
                "Summary generation failed",
                url=data.url,
                error=str(summary),
                error_type=type(summary).__name__,
            )
            raise AnalysisFailure(f"AI analysis failed: {summary}") from summary

        cfg = self.config
        topics = self._field("topics", responses, lambda text: parse_list(text, cfg.max_topics), ())
        categories = self._field("categories", responses, lambda text: parse_list(text, cfg.max_categories), ())
        sentiment = self._field(
            "sentiment", responses, parse_sentiment, SentimentReading(Sentiment.NEUTRAL, DEFAULT_CONFIDENCE)
        )
        entities = self._field(
            "entities", responses, lambda text: parse_entities(text, cfg.max_entities_per_kind), Entities()
        )
        keywords = self._field("keywords", responses, lambda text: parse_keywords(text, cfg.max_keywords), ())
        quality_insights = self._field("quality", responses, lambda text: parse_bullets(text, cfg.max_insights), ())
        competitive = self._field("competitive", responses, lambda text: parse_bullets(text, cfg.max_insights), ())

        total_words = count_words(data.paragraphs)

        self.logger.info(
            "Insight synthesis complete",
            url=data.url,
            topics=len(topics),
            categories=len(categories),
            keywords=len(keywords),
        )

        return AIAnalysis(
            content_summary=summary.strip(),
            key_topics=topics,
            seo_insights=seo_insights(data, keywords, total_words),
            content_categories=categories,
            sentiment=sentiment.sentiment,
            sentiment_confidence=sentiment.confidence,
            readability_score=flesch_reading_ease(digest),
            entities=entities,
            keywords=keywords,
            content_quality_score=content_quality_score(data, total_words),
            content_quality_insights=quality_insights,
            competitive_insights=competitive,
        )

    def _field(
        self,
        name: str,
        responses: Dict[str, Any],
        parser: Callable[[str], ParseOutcome[T]],
        default: T,
    ) -> T:
        response = responses[name]
        if isinstance(response, BaseException):
            self.logger.warning(
                "Insight generation failed, using default",
                field=name,
                error=str(response),
                error_type=type(response).__name__,
            )
            METRICS["insight_fallbacks"].labels(field=name).inc()
            return default

        outcome = parser(response)
        if isinstance(outcome, Fallback):
            self.logger.warning("Insight response not parseable, using default", field=name, reason=outcome.reason)
            METRICS["insight_fallbacks"].labels(field=name).inc()
        return outcome.value

    async def summarize_paragraphs(self, paragraphs: Sequence[Paragraph]) -> Tuple[Paragraph, ...]:
        """Attach summaries and importance scores to every paragraph.

        Only the leading paragraphs are sent for generation; short ones
        summarise to themselves and the rest are truncated.
        """
        cfg = self.config
        head = paragraphs[: cfg.summarized_paragraphs]
        tail = paragraphs[cfg.summarized_paragraphs :]

        summarized = await asyncio.gather(*(self._summarize_one(paragraph) for paragraph in head))

        truncated = [
            replace(
                paragraph,
                summary=self._truncate(paragraph.text),
                importance=max(0, DEFAULT_IMPORTANCE - IMPORTANCE_STEP * (offset + 1)),
            )
            for offset, paragraph in enumerate(tail)
        ]
        return tuple(summarized) + tuple(truncated)

    async def _summarize_one(self, paragraph: Paragraph) -> Paragraph:
        if len(paragraph.text) < self.config.min_summary_length:
            return replace(paragraph, summary=paragraph.text, importance=DEFAULT_IMPORTANCE)

        prompt = prompts.PARAGRAPH_PROMPT.format(content=paragraph.text[: self.config.paragraph_char_budget])
        try:
            response = await self.generator.generate(prompt)
        except Exception as e:
            self.logger.warning("Paragraph summary failed, truncating", error=str(e), error_type=type(e).__name__)
            METRICS["insight_fallbacks"].labels(field="paragraph_summary").inc()
            return replace(paragraph, summary=self._truncate(paragraph.text), importance=DEFAULT_IMPORTANCE)

        outcome = parse_paragraph_summary(response)
        summary = outcome.value.summary or self._truncate(paragraph.text)
        return replace(paragraph, summary=summary, importance=outcome.value.importance)

    def _truncate(self, text: str) -> str:
        limit = self.config.truncation_length
        return text[:limit] + ("..." if len(text) > limit else "")
