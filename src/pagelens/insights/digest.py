"""
Bounded content digest sent with every generation prompt.
"""

from __future__ import annotations

from ..protocols import ScrapedData


def prepare_content_text(data: ScrapedData, max_paragraphs: int = 10) -> str:
    """Title, non-empty heading groups and the leading paragraphs, blank-line separated."""
    parts = []

    if data.title:
        parts.append(f"Title: {data.title}")

    for level, texts in data.headings.items():
        if texts:
            parts.append(f"{level.value.upper()}: {', '.join(texts)}")

    paragraph_text = " ".join(paragraph.text for paragraph in data.paragraphs[:max_paragraphs])
    if paragraph_text:
        parts.append(f"Content: {paragraph_text}")

    return "\n\n".join(parts)
