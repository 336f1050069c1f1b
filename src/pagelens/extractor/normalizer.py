"""
Extraction normalizer: turns a raw DOM query result into ScrapedData.

URL resolution failures never fail the extraction; the affected field keeps
its raw value.
"""

from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

import structlog

from ..protocols import Headings, Image, Link, PageMetadata, Paragraph, ScrapedData
from .models import RawAnchor, RawImage, RawMeta, RawPage

logger = structlog.get_logger(__name__)

# Paragraphs at or below this trimmed length are navigation/UI noise.
MIN_PARAGRAPH_LENGTH = 20


def resolve_url(raw: str, base: str) -> str:
    """Resolve ``raw`` against ``base``; an unresolvable value is returned as is."""
    raw = raw.strip()
    if not raw:
        return ""
    try:
        return urljoin(base, raw)
    except ValueError:
        logger.debug("URL resolution failed", raw=raw, base=base)
        return raw


def _hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def is_internal_link(href: str, page_url: str) -> bool:
    """True iff both hostnames parse and match exactly."""
    link_host = _hostname(href)
    page_host = _hostname(page_url)
    if not link_host or not page_host:
        return False
    return link_host == page_host


def _dimension(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(str(value).strip().removesuffix("px"))
    except ValueError:
        return None
    return parsed if parsed > 0 else None


class ExtractionNormalizer:
    """Builds the canonical ScrapedData model for one page."""

    def __init__(self, min_paragraph_length: int = MIN_PARAGRAPH_LENGTH) -> None:
        self.min_paragraph_length = min_paragraph_length

    def normalize(self, page_url: str, raw: RawPage, base_url: Optional[str] = None) -> ScrapedData:
        """
        Normalize a raw query result; ``scraped_at`` is left for the caller.

        Relative references resolve against ``base_url`` (the final rendered
        URL after redirects) when given; links are always classified against
        ``page_url``.
        """
        base = base_url or page_url
        return ScrapedData(
            url=page_url,
            title=(raw.title or "").strip(),
            headings=self.normalize_headings(raw.headings),
            paragraphs=tuple(self.normalize_paragraphs(raw.paragraphs)),
            links=tuple(self.normalize_links(raw.anchors, page_url, base_url=base)),
            images=tuple(self.normalize_images(raw.images, base)),
            metadata=self.normalize_metadata(raw.metas),
        )

    def normalize_headings(self, headings: dict) -> Headings:
        # empty strings survive: the element existed
        return Headings.from_mapping(
            {level: [(text or "").strip() for text in texts] for level, texts in headings.items()}
        )

    def normalize_paragraphs(self, texts: Iterable[str]) -> List[Paragraph]:
        paragraphs = []
        for text in texts:
            trimmed = (text or "").strip()
            if len(trimmed) > self.min_paragraph_length:
                paragraphs.append(Paragraph(text=trimmed))
        return paragraphs

    def normalize_links(
        self, anchors: Iterable[RawAnchor], page_url: str, base_url: Optional[str] = None
    ) -> List[Link]:
        links = []
        for anchor in anchors:
            href = resolve_url(anchor.get("href") or "", base_url or page_url)
            if not href or href == "#":
                continue
            internal = is_internal_link(href, page_url)
            links.append(
                Link(
                    text=(anchor.get("text") or "").strip(),
                    href=href,
                    is_internal=internal,
                    is_external=not internal,
                )
            )
        return links

    def normalize_images(self, images: Iterable[RawImage], page_url: str) -> List[Image]:
        normalized = []
        for image in images:
            src = resolve_url(image.get("src") or "", page_url)
            if not src or src.startswith("data:"):
                continue
            normalized.append(
                Image(
                    src=src,
                    alt=image.get("alt") or "",
                    width=_dimension(image.get("width")),
                    height=_dimension(image.get("height")),
                )
            )
        return normalized

    def normalize_metadata(self, metas: Iterable[RawMeta]) -> PageMetadata:
        metas = list(metas)

        def lookup(key: str) -> Optional[str]:
            for meta in metas:
                if meta.get("name") == key or meta.get("property") == key:
                    content = meta.get("content")
                    return content if content else None
            return None

        return PageMetadata(
            description=lookup("description"),
            keywords=lookup("keywords"),
            author=lookup("author"),
            og_title=lookup("og:title"),
            og_description=lookup("og:description"),
            og_image=lookup("og:image"),
        )
