"""
Protocols for pluggable DOM query strategies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import RawPage


@runtime_checkable
class DomExtractor(Protocol):
    """Pluggable HTML-to-RawPage query strategy."""

    name: str

    async def extract(self, html: str, *, url: str | None = None) -> RawPage:
        """Query a rendered HTML snapshot.

        Args:
            html: Rendered HTML of the page
            url: Optional page URL for context

        Returns:
            RawPage with the unnormalized query result
        """
        ...
