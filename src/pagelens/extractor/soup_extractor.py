"""
BeautifulSoup-based DOM query over a rendered HTML snapshot.
"""

from __future__ import annotations

import asyncio

import structlog
from bs4 import BeautifulSoup

from ..errors import ExtractionFailure
from ..protocols import HeadingLevel
from .models import RawAnchor, RawImage, RawMeta, RawPage
from .protocols import DomExtractor

logger = structlog.get_logger(__name__)


class SoupDomExtractor(DomExtractor):
    """Collects headings, paragraphs, anchors, images and meta tags."""

    name = "soup"

    def __init__(self, parser: str = "html.parser") -> None:
        # built-in parser for maximum compatibility
        self.parser = parser

    async def extract(self, html: str, *, url: str | None = None) -> RawPage:
        """Query the HTML snapshot.

        Args:
            html: Rendered HTML of the page
            url: Optional page URL for context

        Returns:
            RawPage with text contents and raw attribute values
        """
        if not html.strip():
            logger.warning("Empty HTML snapshot", url=url)
            return RawPage()

        try:
            # BeautifulSoup parsing is CPU-bound
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self._extract_sync, html)
        except Exception as e:
            logger.error("DOM query failed", url=url, error=str(e), error_type=type(e).__name__)
            raise ExtractionFailure.unexpected(f"DOM query failed: {e}") from e

    def _extract_sync(self, html: str) -> RawPage:
        soup = BeautifulSoup(html, self.parser)

        title_tag = soup.find("title")
        title = title_tag.get_text().strip() if title_tag else ""

        headings = {
            level.value: [tag.get_text().strip() for tag in soup.find_all(level.value)] for level in HeadingLevel
        }

        paragraphs = [tag.get_text().strip() for tag in soup.find_all("p")]

        anchors: list[RawAnchor] = [
            {"text": tag.get_text().strip(), "href": str(tag.get("href", ""))} for tag in soup.find_all("a", href=True)
        ]

        images: list[RawImage] = []
        for tag in soup.find_all("img"):
            images.append(
                {
                    "src": str(tag.get("src") or ""),
                    "alt": str(tag.get("alt") or ""),
                    "width": tag.get("width"),
                    "height": tag.get("height"),
                }
            )

        metas: list[RawMeta] = [
            {"name": tag.get("name"), "property": tag.get("property"), "content": tag.get("content")}
            for tag in soup.find_all("meta")
        ]

        return RawPage(
            title=title,
            headings=headings,
            paragraphs=paragraphs,
            anchors=anchors,
            images=images,
            metas=metas,
        )
