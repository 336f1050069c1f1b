"""
Core contracts and dataclasses for PageLens.

This module defines the data model shared by every stage of a page analysis
run and the collaborator protocols the pipeline depends on.

Architecture Overview:
- Extraction normalizer turns a DOM query result into ScrapedData
- Pure analyzers derive AnalyticsData (links, images, headings, SEO score)
- Insight synthesis fills AIAnalysis through a text-generation collaborator
- The result assembler composes an immutable ScrapeResult
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple

# ============================================================================
# Enums and Constants
# ============================================================================


class HeadingLevel(Enum):
    """Fixed set of heading levels collected from a page."""

    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"


class Sentiment(Enum):
    """Overall sentiment of the page content."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ErrorSeverity(Enum):
    """Error severity levels for structured error handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ============================================================================
# Scraped page model
# ============================================================================


@dataclass(frozen=True)
class Headings:
    """Heading texts per level, in document order."""

    h1: Tuple[str, ...] = ()
    h2: Tuple[str, ...] = ()
    h3: Tuple[str, ...] = ()
    h4: Tuple[str, ...] = ()
    h5: Tuple[str, ...] = ()
    h6: Tuple[str, ...] = ()

    def by_level(self, level: HeadingLevel) -> Tuple[str, ...]:
        return getattr(self, level.value)

    def items(self) -> List[Tuple[HeadingLevel, Tuple[str, ...]]]:
        return [(level, self.by_level(level)) for level in HeadingLevel]

    @property
    def total(self) -> int:
        return sum(len(texts) for _, texts in self.items())

    @classmethod
    def from_mapping(cls, mapping: Dict[str, List[str]]) -> Headings:
        return cls(**{level.value: tuple(mapping.get(level.value, ())) for level in HeadingLevel})


@dataclass(frozen=True)
class Paragraph:
    """A retained paragraph with its optional generated summary."""

    text: str
    summary: Optional[str] = None
    importance: Optional[int] = None


@dataclass(frozen=True)
class Link:
    """An anchor resolved against the page URL."""

    text: str
    href: str
    is_internal: bool
    is_external: bool


@dataclass(frozen=True)
class Image:
    """An image resolved against the page URL."""

    src: str
    alt: str
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class PageMetadata:
    """Document-level metadata read from <meta> tags."""

    description: Optional[str] = None
    keywords: Optional[str] = None
    author: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None


@dataclass(frozen=True)
class ScrapedData:
    """Normalized content of one rendered page."""

    url: str
    title: str = ""
    headings: Headings = field(default_factory=Headings)
    paragraphs: Tuple[Paragraph, ...] = ()
    links: Tuple[Link, ...] = ()
    images: Tuple[Image, ...] = ()
    metadata: PageMetadata = field(default_factory=PageMetadata)
    scraped_at: Optional[datetime] = None


# ============================================================================
# Derived analytics
# ============================================================================


@dataclass(frozen=True)
class LinkAnalysis:
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    broken_links: int = 0


@dataclass(frozen=True)
class ImageAnalysis:
    total_images: int = 0
    images_with_alt: int = 0
    images_without_alt: int = 0
    alt_text_coverage: int = 0  # percentage 0-100


@dataclass(frozen=True)
class HeadingAnalysis:
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    h4_count: int = 0
    h5_count: int = 0
    h6_count: int = 0
    total_headings: int = 0
    has_proper_hierarchy: bool = False


@dataclass(frozen=True)
class AnalyticsData:
    """Deterministic structural analytics for a page."""

    total_words: int
    reading_time: int  # minutes
    link_analysis: LinkAnalysis
    image_analysis: ImageAnalysis
    heading_analysis: HeadingAnalysis
    seo_score: int  # 0-100

    def __post_init__(self) -> None:
        if not 0 <= self.seo_score <= 100:
            raise ValueError("SEO score must be between 0 and 100")


# ============================================================================
# Generated insights
# ============================================================================


@dataclass(frozen=True)
class SEOInsights:
    title_quality: str
    meta_description_quality: str
    heading_structure: str
    keyword_density: str
    recommendations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Entities:
    people: Tuple[str, ...] = ()
    organizations: Tuple[str, ...] = ()
    locations: Tuple[str, ...] = ()
    technologies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class KeywordScore:
    keyword: str
    relevance: int  # 0-100


@dataclass(frozen=True)
class AIAnalysis:
    """Qualitative analysis; optional fields degrade to None."""

    content_summary: str
    key_topics: Tuple[str, ...]
    seo_insights: SEOInsights
    content_categories: Tuple[str, ...]
    sentiment: Optional[Sentiment] = None
    sentiment_confidence: Optional[int] = None
    readability_score: Optional[int] = None
    entities: Optional[Entities] = None
    keywords: Optional[Tuple[KeywordScore, ...]] = None
    content_quality_score: Optional[int] = None
    content_quality_insights: Optional[Tuple[str, ...]] = None
    competitive_insights: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ScrapeResult:
    """Final, immutable record of one analysis run."""

    id: str
    data: ScrapedData
    ai_analysis: AIAnalysis
    analytics: AnalyticsData

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase wire shape consumed by exports and the web UI."""
        return {
            "id": self.id,
            "data": to_wire(self.data),
            "aiAnalysis": to_wire(self.ai_analysis),
            "analytics": to_wire(self.analytics),
        }


# ============================================================================
# Wire rendering
# ============================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_wire(value: Any) -> Any:
    """Convert model dataclasses to JSON-ready structures with camelCase keys."""
    if isinstance(value, PageMetadata):
        # absent meta tags are omitted rather than rendered as null
        return {_camel(f.name): getattr(value, f.name) for f in fields(value) if getattr(value, f.name) is not None}
    if hasattr(value, "__dataclass_fields__"):
        return {_camel(f.name): to_wire(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


# ============================================================================
# Collaborator Protocols
# ============================================================================


@dataclass(frozen=True)
class RenderedPage:
    """HTML snapshot of a page after best-effort load completion."""

    url: str
    html: str


class RendererProtocol(Protocol):
    """Renders a URL and returns a DOM snapshot."""

    async def render(
        self,
        url: str,
        *,
        wait_for_selector: Optional[str] = None,
        timeout_ms: int = 60000,
    ) -> RenderedPage:
        """Fetch and render a single page, raising ExtractionFailure on error."""
        ...


class TextGeneratorProtocol(Protocol):
    """Free-form text generation service; treated as unreliable."""

    async def generate(self, prompt: str) -> str:
        """Return generated text for the prompt."""
        ...


class ResultStoreProtocol(Protocol):
    """Keeps finished results addressable by id and cached by URL."""

    def put(self, result: ScrapeResult) -> None:
        ...

    def get(self, result_id: str) -> Optional[ScrapeResult]:
        ...

    def cache(self, url: str, result: ScrapeResult, ttl_seconds: Optional[int] = None) -> None:
        ...

    def get_cached(self, url: str) -> Optional[ScrapeResult]:
        ...


__all__ = [
    # Enums
    "HeadingLevel",
    "Sentiment",
    "ErrorSeverity",
    # Page model
    "Headings",
    "Paragraph",
    "Link",
    "Image",
    "PageMetadata",
    "ScrapedData",
    # Analytics
    "LinkAnalysis",
    "ImageAnalysis",
    "HeadingAnalysis",
    "AnalyticsData",
    # Insights
    "SEOInsights",
    "Entities",
    "KeywordScore",
    "AIAnalysis",
    "ScrapeResult",
    # Collaborators
    "RenderedPage",
    "RendererProtocol",
    "TextGeneratorProtocol",
    "ResultStoreProtocol",
    # Utilities
    "to_wire",
]
