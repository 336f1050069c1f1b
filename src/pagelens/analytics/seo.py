"""
Additive SEO scoring.

Each signal contributes a fixed number of points; the sum is capped at 100.
The point table is part of the public contract and must not drift:

    title present 10, length 30-60 +10 else +5
    meta description present 10, length 120-160 +10 else +5
    proper heading hierarchy 15, else exactly one H1 10, else any H1 5
    any H2 +5
    no images 5; images 5 base, +10 at >=80% alt coverage, +5 at >=50%
    words >=300 15, >=150 10, >=50 5
    og:title and og:description 10, either one 5
"""

from __future__ import annotations

from typing import Optional

from ..protocols import HeadingAnalysis, ImageAnalysis, ScrapedData
from .analyzer import analyze_headings, analyze_images, count_words

MAX_SCORE = 100


def _title_points(title: str) -> int:
    if not title:
        return 0
    return 10 + (10 if 30 <= len(title) <= 60 else 5)


def _description_points(description: Optional[str]) -> int:
    if not description:
        return 0
    return 10 + (10 if 120 <= len(description) <= 160 else 5)


def _heading_points(headings: HeadingAnalysis) -> int:
    if headings.has_proper_hierarchy:
        points = 15
    elif headings.h1_count == 1:
        points = 10
    elif headings.h1_count > 0:
        points = 5
    else:
        points = 0
    if headings.h2_count > 0:
        points += 5
    return points


def _image_points(images: ImageAnalysis) -> int:
    if images.total_images == 0:
        # no images is acceptable
        return 5
    points = 5
    if images.alt_text_coverage >= 80:
        points += 10
    elif images.alt_text_coverage >= 50:
        points += 5
    return points


def _content_points(total_words: int) -> int:
    if total_words >= 300:
        return 15
    if total_words >= 150:
        return 10
    if total_words >= 50:
        return 5
    return 0


def _open_graph_points(og_title: Optional[str], og_description: Optional[str]) -> int:
    if og_title and og_description:
        return 10
    if og_title or og_description:
        return 5
    return 0


def calculate_seo_score(
    data: ScrapedData,
    image_analysis: Optional[ImageAnalysis] = None,
    heading_analysis: Optional[HeadingAnalysis] = None,
    *,
    total_words: Optional[int] = None,
) -> int:
    """Score a page from 0 to 100.

    Precomputed analyses may be passed in to avoid recomputation; they must
    describe ``data``.
    """
    if image_analysis is None:
        image_analysis = analyze_images(data.images)
    if heading_analysis is None:
        heading_analysis = analyze_headings(data.headings)
    if total_words is None:
        total_words = count_words(data.paragraphs)

    score = (
        _title_points(data.title)
        + _description_points(data.metadata.description)
        + _heading_points(heading_analysis)
        + _image_points(image_analysis)
        + _content_points(total_words)
        + _open_graph_points(data.metadata.og_title, data.metadata.og_description)
    )
    return max(0, min(MAX_SCORE, score))
