"""Generated insights: digest, prompts, tagged parsers and the synthesizer."""

from __future__ import annotations

from .digest import prepare_content_text
from .gemini import GeminiTextGenerator
from .parsers import (
    Fallback,
    ParagraphSummary,
    Parsed,
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
from .synthesizer import InsightSynthesizer

__all__ = [
    "prepare_content_text",
    "GeminiTextGenerator",
    "Fallback",
    "Parsed",
    "ParseOutcome",
    "ParagraphSummary",
    "SentimentReading",
    "parse_bullets",
    "parse_entities",
    "parse_keywords",
    "parse_list",
    "parse_paragraph_summary",
    "parse_sentiment",
    "content_quality_score",
    "seo_insights",
    "InsightSynthesizer",
]
