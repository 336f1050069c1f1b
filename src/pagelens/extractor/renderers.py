"""
Renderer adapters: fetch a URL and hand back an HTML snapshot.

Both adapters own an explicitly started handle (HTTP session or browser) that
the container creates once and closes on shutdown.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import aiohttp
import structlog

from ..config.config import RendererConfig
from ..errors import ExtractionFailure
from ..protocols import RenderedPage

logger = structlog.get_logger(__name__)


class HttpRenderer:
    """Static renderer: returns the served HTML without executing scripts."""

    def __init__(self, config: RendererConfig, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={"User-Agent": self.config.user_agent})
            self._owns_session = True
            logger.info("HTTP renderer session initialized")

    async def close(self) -> None:
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None
        logger.info("HTTP renderer closed")

    async def __aenter__(self) -> HttpRenderer:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def render(
        self,
        url: str,
        *,
        wait_for_selector: Optional[str] = None,
        timeout_ms: int = 60000,
    ) -> RenderedPage:
        if self.session is None:
            await self.initialize()
        assert self.session is not None

        if wait_for_selector:
            logger.debug("Static renderer ignores wait_for_selector", url=url, selector=wait_for_selector)

        try:
            async with asyncio.timeout(timeout_ms / 1000):
                async with self.session.get(url, allow_redirects=True) as response:
                    html = await response.text(errors="replace")
                    final_url = str(response.url)
                    if response.status >= 400:
                        logger.warning("Page served an error status", url=url, status=response.status)
        except asyncio.TimeoutError as e:
            raise ExtractionFailure.timeout() from e
        except aiohttp.ClientError as e:
            logger.warning("Page unreachable", url=url, error=str(e), error_type=type(e).__name__)
            raise ExtractionFailure.unreachable(str(e)) from e

        return RenderedPage(url=final_url, html=html)


class PlaywrightRenderer:
    """Headless Chromium renderer for script-heavy pages."""

    def __init__(self, config: RendererConfig) -> None:
        self.config = config
        self._playwright: Any = None
        self._browser: Any = None

    async def initialize(self) -> None:
        """Launch the browser."""
        if self._browser is not None:
            return
        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        logger.info("Browser launched", headless=self.config.headless)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed")

    async def __aenter__(self) -> PlaywrightRenderer:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def render(
        self,
        url: str,
        *,
        wait_for_selector: Optional[str] = None,
        timeout_ms: int = 60000,
    ) -> RenderedPage:
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        await self.initialize()
        page = await self._browser.new_page(user_agent=self.config.user_agent)
        try:
            try:
                await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
            except PlaywrightTimeoutError:
                # heavy sites never reach network idle
                logger.info("Retrying with domcontentloaded strategy", url=url)
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms // 2)
                await page.wait_for_timeout(self.config.settle_ms)

            if wait_for_selector:
                await page.wait_for_selector(wait_for_selector, timeout=self.config.selector_timeout_ms)

            return RenderedPage(url=page.url, html=await page.content())
        except PlaywrightTimeoutError as e:
            raise ExtractionFailure.timeout() from e
        except PlaywrightError as e:
            if "net::ERR" in str(e):
                raise ExtractionFailure.unreachable(str(e).splitlines()[0]) from e
            raise ExtractionFailure.unexpected(str(e).splitlines()[0]) from e
        finally:
            await page.close()
