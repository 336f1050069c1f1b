"""Deterministic page analytics: structure, SEO score and readability."""

from __future__ import annotations

from .analyzer import (
    WORDS_PER_MINUTE,
    analyze_headings,
    analyze_images,
    analyze_links,
    count_words,
    generate_analytics,
    is_broken_link,
    reading_time,
    round_half_up,
)
from .readability import NEUTRAL_SCORE, count_syllables, flesch_reading_ease
from .seo import calculate_seo_score

__all__ = [
    "WORDS_PER_MINUTE",
    "NEUTRAL_SCORE",
    "analyze_headings",
    "analyze_images",
    "analyze_links",
    "count_words",
    "generate_analytics",
    "is_broken_link",
    "reading_time",
    "round_half_up",
    "count_syllables",
    "flesch_reading_ease",
    "calculate_seo_score",
]
