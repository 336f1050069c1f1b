"""
Result assembler: the only place a ScrapeResult is composed.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from .protocols import AIAnalysis, AnalyticsData, ScrapedData, ScrapeResult, SEOInsights

SKIPPED_SUMMARY = "AI analysis skipped"
NOT_ANALYZED = "Not analyzed"


def skipped_analysis() -> AIAnalysis:
    """Placeholder used when AI analysis is disabled; every mandatory field is set."""
    return AIAnalysis(
        content_summary=SKIPPED_SUMMARY,
        key_topics=(),
        seo_insights=SEOInsights(
            title_quality=NOT_ANALYZED,
            meta_description_quality=NOT_ANALYZED,
            heading_structure=NOT_ANALYZED,
            keyword_density=NOT_ANALYZED,
            recommendations=(),
        ),
        content_categories=(),
    )


def assemble_result(
    data: ScrapedData,
    analytics: AnalyticsData,
    ai_analysis: Optional[AIAnalysis],
    *,
    include_ai_analysis: bool = True,
    result_id: Optional[str] = None,
) -> ScrapeResult:
    """Compose the final record.

    With ``include_ai_analysis`` false the given analysis is ignored and the
    skipped placeholder is used.
    """
    if not include_ai_analysis or ai_analysis is None:
        ai_analysis = skipped_analysis()
    return ScrapeResult(
        id=result_id or str(uuid4()),
        data=data,
        ai_analysis=ai_analysis,
        analytics=analytics,
    )
