"""
Locally computed insight fields: SEO findings and the content quality score.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..analytics.analyzer import count_words
from ..protocols import KeywordScore, ScrapedData, SEOInsights


def seo_insights(
    data: ScrapedData,
    keywords: Optional[Sequence[KeywordScore]] = None,
    total_words: Optional[int] = None,
) -> SEOInsights:
    title = data.title
    description = data.metadata.description
    headings = data.headings
    if total_words is None:
        total_words = count_words(data.paragraphs)

    if not title or len(title) < 30:
        title_quality = "Too short - should be 30-60 characters"
    elif len(title) > 60:
        title_quality = "Too long - should be 30-60 characters"
    else:
        title_quality = "Good"

    if not description:
        meta_quality = "Missing - add a meta description"
    elif len(description) < 120:
        meta_quality = "Too short - should be 120-160 characters"
    elif len(description) > 160:
        meta_quality = "Too long - should be 120-160 characters"
    else:
        meta_quality = "Good"

    if not headings.h1:
        heading_structure = "Missing H1 tag - add one H1 per page"
    elif len(headings.h1) > 1:
        heading_structure = "Multiple H1 tags - use only one H1 per page"
    else:
        heading_structure = "Good"

    if total_words == 0:
        keyword_density = "No content to analyze"
    elif keywords:
        top = keywords[0].keyword
        text = " ".join(paragraph.text for paragraph in data.paragraphs).lower()
        occurrences = text.count(top.lower())
        density = occurrences / total_words * 100
        keyword_density = f'"{top}" appears {occurrences} times ({density:.1f}% of {total_words} words)'
    else:
        keyword_density = f"Approximately {total_words} words analyzed"

    recommendations = []
    if len(title) < 30 or len(title) > 60:
        recommendations.append("Optimize title length to 30-60 characters")
    if not description:
        recommendations.append("Add a meta description (120-160 characters)")
    if len(headings.h1) != 1:
        recommendations.append("Use exactly one H1 tag per page")
    if not headings.h2:
        recommendations.append("Add H2 headings to structure your content")
    if not data.metadata.og_title or not data.metadata.og_description:
        recommendations.append("Add Open Graph meta tags for social sharing")
    if len(data.paragraphs) < 3:
        recommendations.append("Add more content - aim for at least 300 words")

    return SEOInsights(
        title_quality=title_quality,
        meta_description_quality=meta_quality,
        heading_structure=heading_structure,
        keyword_density=keyword_density,
        recommendations=tuple(recommendations),
    )


def content_quality_score(data: ScrapedData, total_words: Optional[int] = None) -> int:
    """0-100 from content volume, heading structure and media/link presence."""
    if total_words is None:
        total_words = count_words(data.paragraphs)

    score = 0

    if total_words >= 1000:
        score += 30
    elif total_words >= 500:
        score += 25
    elif total_words >= 300:
        score += 20
    elif total_words >= 100:
        score += 10

    total_headings = data.headings.total
    if total_headings >= 5:
        score += 20
    elif total_headings >= 2:
        score += 15
    elif total_headings >= 1:
        score += 10

    if len(data.paragraphs) >= 5:
        score += 20
    elif data.paragraphs:
        score += 10

    if data.images:
        score += 15
    if data.links:
        score += 15

    return min(100, score)
