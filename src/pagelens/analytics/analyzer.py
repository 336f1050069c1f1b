"""
Structural analytics over ScrapedData.

Pure functions: no I/O, total over every well-formed input.
"""

from __future__ import annotations

import math
from typing import Iterable

from ..protocols import (
    AnalyticsData,
    HeadingAnalysis,
    Headings,
    Image,
    ImageAnalysis,
    Link,
    LinkAnalysis,
    Paragraph,
    ScrapedData,
)

WORDS_PER_MINUTE = 225

# Substrings that mark an href produced by a broken template.
_BROKEN_HREF_MARKERS = ("undefined", "null")


def round_half_up(value: float) -> int:
    """Half-up rounding for scores: 12.5 -> 13 where ``round`` gives 12."""
    return math.floor(value + 0.5)


def count_words(paragraphs: Iterable[Paragraph]) -> int:
    """Canonical word count: non-empty whitespace-separated tokens over all paragraphs."""
    return sum(len(paragraph.text.split()) for paragraph in paragraphs)


def reading_time(total_words: int) -> int:
    return math.ceil(total_words / WORDS_PER_MINUTE)


def is_broken_link(link: Link) -> bool:
    """Heuristic only; no reachability check is made."""
    if not link.text:
        return True
    if link.href == "#":
        return True
    return any(marker in link.href for marker in _BROKEN_HREF_MARKERS)


def analyze_links(links: Iterable[Link]) -> LinkAnalysis:
    links = list(links)
    return LinkAnalysis(
        total_links=len(links),
        internal_links=sum(1 for link in links if link.is_internal),
        external_links=sum(1 for link in links if link.is_external),
        broken_links=sum(1 for link in links if is_broken_link(link)),
    )


def analyze_images(images: Iterable[Image]) -> ImageAnalysis:
    images = list(images)
    total = len(images)
    with_alt = sum(1 for image in images if image.alt and image.alt.strip())
    coverage = round_half_up(with_alt / total * 100) if total > 0 else 0
    return ImageAnalysis(
        total_images=total,
        images_with_alt=with_alt,
        images_without_alt=total - with_alt,
        alt_text_coverage=coverage,
    )


def analyze_headings(headings: Headings) -> HeadingAnalysis:
    h1_count = len(headings.h1)
    h2_count = len(headings.h2)
    total = headings.total
    # a lone H1 is still a proper hierarchy
    proper = h1_count == 1 and (h2_count > 0 or total == 1)
    return HeadingAnalysis(
        h1_count=h1_count,
        h2_count=h2_count,
        h3_count=len(headings.h3),
        h4_count=len(headings.h4),
        h5_count=len(headings.h5),
        h6_count=len(headings.h6),
        total_headings=total,
        has_proper_hierarchy=proper,
    )


def generate_analytics(data: ScrapedData) -> AnalyticsData:
    """Compute every structural metric and the SEO score for a page."""
    from .seo import calculate_seo_score

    total_words = count_words(data.paragraphs)
    link_analysis = analyze_links(data.links)
    image_analysis = analyze_images(data.images)
    heading_analysis = analyze_headings(data.headings)

    return AnalyticsData(
        total_words=total_words,
        reading_time=reading_time(total_words),
        link_analysis=link_analysis,
        image_analysis=image_analysis,
        heading_analysis=heading_analysis,
        seo_score=calculate_seo_score(data, image_analysis, heading_analysis, total_words=total_words),
    )
