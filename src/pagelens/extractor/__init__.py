"""
PageLens Content Extraction Module

Turns a rendered page into the canonical ScrapedData model:
1. Renderer adapters fetch an HTML snapshot (static HTTP or headless browser)
2. SoupDomExtractor queries headings, paragraphs, anchors, images and meta tags
3. ExtractionNormalizer resolves URLs, classifies links and filters noise
"""

from .models import RawAnchor, RawImage, RawMeta, RawPage
from .normalizer import ExtractionNormalizer, is_internal_link, resolve_url
from .protocols import DomExtractor
from .renderers import HttpRenderer, PlaywrightRenderer
from .soup_extractor import SoupDomExtractor

__all__ = [
    "RawAnchor",
    "RawImage",
    "RawMeta",
    "RawPage",
    "DomExtractor",
    "SoupDomExtractor",
    "ExtractionNormalizer",
    "resolve_url",
    "is_internal_link",
    "HttpRenderer",
    "PlaywrightRenderer",
]
