"""
Primitive structures produced by querying a rendered DOM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TypedDict


class RawAnchor(TypedDict):
    text: str
    href: str


class RawImage(TypedDict):
    src: str
    alt: str
    width: Optional[str]
    height: Optional[str]


class RawMeta(TypedDict):
    name: Optional[str]
    property: Optional[str]
    content: Optional[str]


@dataclass(slots=True)
class RawPage:
    """Unnormalized query result for one page.

    Values are taken as the DOM reports them: heading and paragraph texts are
    element text content, hrefs and srcs are attribute values that may still be
    relative.
    """

    title: str = ""
    headings: Dict[str, List[str]] = field(default_factory=dict)
    paragraphs: List[str] = field(default_factory=list)
    anchors: List[RawAnchor] = field(default_factory=list)
    images: List[RawImage] = field(default_factory=list)
    metas: List[RawMeta] = field(default_factory=list)
