"""
Dependency container for PageLens.

Builds every collaborator explicitly from configuration. Construction
problems (an unknown renderer backend, a generator that rejects its
credentials) surface from ``initialize`` rather than on first use.
"""

from __future__ import annotations

import inspect
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, List, Optional
from uuid import uuid4

import structlog

from .config import Config
from .extractor import ExtractionNormalizer, HttpRenderer, PlaywrightRenderer, SoupDomExtractor
from .insights import GeminiTextGenerator, InsightSynthesizer
from .pipeline import AnalysisPipeline
from .protocols import RendererProtocol, TextGeneratorProtocol
from .storage import InMemoryResultStore


class PageLensContainer:
    """
    Owns the renderer, text generator, result store and pipeline.

    ``renderer`` and ``text_generator`` may be injected, which is how tests
    swap in fakes; injected collaborators are not closed on shutdown.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        config_path: Optional[Path] = None,
        *,
        renderer: Optional[RendererProtocol] = None,
        text_generator: Optional[TextGeneratorProtocol] = None,
    ) -> None:
        self.config_path = config_path
        self.config: Optional[Config] = config
        self.logger = structlog.get_logger(self.__class__.__name__)

        self._injected_renderer = renderer
        self._injected_generator = text_generator
        self.renderer: Optional[RendererProtocol] = None
        self.text_generator: Optional[TextGeneratorProtocol] = None
        self.store: Optional[InMemoryResultStore] = None
        self._pipeline: Optional[AnalysisPipeline] = None
        self._shutdown_handlers: List[Callable[[], Any]] = []

        self.container_id = str(uuid4())
        self.is_running = False

    @property
    def pipeline(self) -> AnalysisPipeline:
        if self._pipeline is None:
            raise RuntimeError("Container must be initialized before the pipeline is used")
        return self._pipeline

    async def initialize(self) -> None:
        """Load configuration and construct all collaborators."""
        if self.is_running:
            return
        if self.config is None:
            self.load_config()
        assert self.config is not None

        self.renderer = self._injected_renderer or self._build_renderer()
        initialize = getattr(self.renderer, "initialize", None)
        if self._injected_renderer is None and callable(initialize):
            await initialize()

        self.text_generator = self._injected_generator or self._build_text_generator()
        synthesizer = (
            InsightSynthesizer(self.text_generator, self.config.insights) if self.text_generator is not None else None
        )

        self.store = InMemoryResultStore(self.config.storage)
        self._pipeline = AnalysisPipeline(
            renderer=self.renderer,
            extractor=SoupDomExtractor(),
            normalizer=ExtractionNormalizer(),
            synthesizer=synthesizer,
            store=self.store,
            renderer_config=self.config.renderer,
        )
        self.is_running = True

        self.logger.info(
            "Dependency container initialized",
            container_id=self.container_id,
            renderer=self.config.renderer.backend,
            ai_enabled=synthesizer is not None,
            config_path=str(self.config_path) if self.config_path else "default",
        )

    def load_config(self) -> None:
        if self.config_path and self.config_path.exists():
            self.config = Config.from_yaml(self.config_path)
        else:
            self.config = Config()

    def _build_renderer(self) -> RendererProtocol:
        assert self.config is not None
        backend = self.config.renderer.backend
        if backend == "http":
            return HttpRenderer(self.config.renderer)
        if backend == "playwright":
            return PlaywrightRenderer(self.config.renderer)
        raise ValueError(f"Unknown renderer backend: {backend}")

    def _build_text_generator(self) -> Optional[TextGeneratorProtocol]:
        assert self.config is not None
        insights = self.config.insights
        if not insights.api_key:
            self.logger.warning("No Gemini API key configured; AI analysis is disabled")
            return None
        return GeminiTextGenerator(insights.api_key, insights.model)

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[PageLensContainer]:
        """Context manager for proper lifecycle management."""
        try:
            await self.initialize()
            yield self
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Close owned collaborators and run shutdown handlers."""
        if not self.is_running:
            return

        self.logger.info("Shutting down dependency container", container_id=self.container_id)

        for handler in self._shutdown_handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler()
                else:
                    handler()
            except Exception as e:
                self.logger.error("Error in shutdown handler", error=str(e))

        close = getattr(self.renderer, "close", None)
        if self._injected_renderer is None and callable(close):
            try:
                await close()
            except Exception as e:
                self.logger.error("Error closing renderer", error=str(e))

        self.is_running = False
        self.logger.info("Dependency container shutdown complete")

    def add_shutdown_handler(self, handler: Callable[[], Any]) -> None:
        self._shutdown_handlers.append(handler)

    def get_health_status(self) -> Dict[str, Any]:
        """Get health status of the managed components."""
        return {
            "container_id": self.container_id,
            "is_running": self.is_running,
            "config_loaded": self.config is not None,
            "renderer": self.config.renderer.backend if self.config else None,
            "ai_enabled": self.text_generator is not None,
            "active_jobs": len(self._pipeline.active_jobs) if self._pipeline else 0,
            "stored_results": len(self.store) if self.store else 0,
        }
