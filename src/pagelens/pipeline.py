"""
Pipeline orchestration for PageLens.

One run analyses one page: render, extract, normalise, summarise, score,
synthesise, assemble and store. Runs are independent and may overlap; each
carries its own job id that can be cancelled between stages.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

from .analytics import generate_analytics
from .assembler import assemble_result
from .config.config import RendererConfig
from .errors import AnalysisFailure, ExtractionFailure, PageLensError, ScrapeCancelled
from .extractor.normalizer import ExtractionNormalizer
from .extractor.protocols import DomExtractor
from .insights.synthesizer import InsightSynthesizer
from .observability.metrics import METRICS
from .protocols import RendererProtocol, ResultStoreProtocol, ScrapedData, ScrapeResult
from .validation import ScrapeRequest, validate_request

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[str, str, int], None]


class PipelineStage(Enum):
    """Pipeline processing stages, reported through the progress callback."""

    VALIDATE = "validate"
    CACHE = "cache"
    RENDER = "render"
    EXTRACT = "extract"
    SUMMARIZE = "summarize"
    ANALYTICS = "analytics"
    INSIGHTS = "insights"
    COMPLETE = "complete"


@dataclass(frozen=True)
class RunOutcome:
    """A finished run and whether it was answered from the URL cache."""

    result: ScrapeResult
    cached: bool = False


class AnalysisPipeline:
    """
    Single-page analysis orchestrator.

    The synthesizer is optional; without one only runs with AI analysis
    disabled can succeed.
    """

    def __init__(
        self,
        renderer: RendererProtocol,
        extractor: DomExtractor,
        normalizer: ExtractionNormalizer,
        synthesizer: Optional[InsightSynthesizer],
        store: ResultStoreProtocol,
        renderer_config: Optional[RendererConfig] = None,
    ) -> None:
        self.renderer = renderer
        self.extractor = extractor
        self.normalizer = normalizer
        self.synthesizer = synthesizer
        self.store = store
        self.renderer_config = renderer_config or RendererConfig()
        self.logger = structlog.get_logger(self.__class__.__name__)

        # job id -> still wanted
        self._active_jobs: Dict[str, bool] = {}

    @property
    def active_jobs(self) -> List[str]:
        return [job_id for job_id, wanted in self._active_jobs.items() if wanted]

    def cancel(self, job_id: str) -> bool:
        """Flag a running job; returns False when the job is unknown or finished."""
        if job_id not in self._active_jobs:
            return False
        self._active_jobs[job_id] = False
        self.logger.info("Cancellation requested", job_id=job_id)
        return True

    async def run(
        self,
        request: ScrapeRequest | Dict[str, Any],
        progress: Optional[ProgressCallback] = None,
        job_id: Optional[str] = None,
    ) -> RunOutcome:
        """
        Analyse one page.

        Raises:
            ValidationFailure: the request is malformed
            ExtractionFailure: rendering or extraction failed
            AnalysisFailure: insight synthesis failed or is unavailable
            ScrapeCancelled: the job was cancelled between stages
        """
        start_time = time.monotonic()
        report = _Reporter(progress)

        report(PipelineStage.VALIDATE, "Validating request", 0)
        request = validate_request(request)
        options = request.options

        if options.use_cache:
            cached = self.store.get_cached(request.url)
            if cached is not None:
                self.logger.info("Cache hit", url=request.url, result_id=cached.id)
                METRICS["cache_hits"].inc()
                METRICS["analyses"].labels(outcome="cached").inc()
                report(PipelineStage.COMPLETE, "Served from cache", 100)
                return RunOutcome(result=cached, cached=True)

        if options.include_ai_analysis and self.synthesizer is None:
            raise AnalysisFailure("AI analysis requested but no text generator is configured")

        job_id = job_id or str(uuid4())
        self._active_jobs[job_id] = True
        bind_contextvars(job_id=job_id)

        try:
            result = await self._run_job(job_id, request, report)
        except ScrapeCancelled:
            METRICS["analyses"].labels(outcome="cancelled").inc()
            self.logger.info("Analysis cancelled", url=request.url)
            raise
        except PageLensError as e:
            METRICS["analyses"].labels(outcome="failed").inc()
            self.logger.error(
                "Analysis failed",
                url=request.url,
                error=e.message,
                status_code=e.status_code,
                category=e.category.value,
            )
            raise
        finally:
            self._active_jobs.pop(job_id, None)
            unbind_contextvars("job_id")

        duration = time.monotonic() - start_time
        METRICS["analysis_duration"].observe(duration)
        METRICS["analyses"].labels(outcome="success").inc()

        self.store.put(result)
        if options.use_cache:
            self.store.cache(request.url, result)

        self.logger.info("Analysis complete", url=request.url, result_id=result.id, duration=round(duration, 3))
        report(PipelineStage.COMPLETE, "Analysis complete", 100)
        return RunOutcome(result=result)

    async def _run_job(self, job_id: str, request: ScrapeRequest, report: _Reporter) -> ScrapeResult:
        options = request.options
        data = await self._scrape(request, report)
        self._check_cancelled(job_id)

        if options.include_ai_analysis and data.paragraphs:
            report(PipelineStage.SUMMARIZE, "Summarizing paragraphs", 40)
            data = replace(data, paragraphs=await self._synthesizer().summarize_paragraphs(data.paragraphs))
        self._check_cancelled(job_id)

        report(PipelineStage.ANALYTICS, "Computing analytics", 60)
        analytics = generate_analytics(data)

        ai_analysis = None
        if options.include_ai_analysis:
            report(PipelineStage.INSIGHTS, "Generating insights", 75)
            ai_analysis = await self._synthesizer().analyze(data)

        return assemble_result(
            data,
            analytics,
            ai_analysis,
            include_ai_analysis=options.include_ai_analysis,
            result_id=job_id,
        )

    async def _scrape(self, request: ScrapeRequest, report: _Reporter) -> ScrapedData:
        options = request.options
        timeout_ms = options.timeout or self.renderer_config.timeout_ms

        try:
            report(PipelineStage.RENDER, "Loading page", 10)
            page = await self.renderer.render(
                request.url,
                wait_for_selector=options.wait_for_selector,
                timeout_ms=timeout_ms,
            )

            report(PipelineStage.EXTRACT, "Extracting content", 25)
            raw = await self.extractor.extract(page.html, url=page.url)
            data = self.normalizer.normalize(request.url, raw, base_url=page.url or request.url)
        except PageLensError:
            raise
        except Exception as e:
            self.logger.error("Unexpected extraction error", url=request.url, error=str(e), exc_info=True)
            raise ExtractionFailure.unexpected(str(e)) from e

        self.logger.debug(
            "Page extracted",
            url=request.url,
            paragraphs=len(data.paragraphs),
            links=len(data.links),
            images=len(data.images),
        )
        return replace(data, scraped_at=datetime.now(timezone.utc))

    def _synthesizer(self) -> InsightSynthesizer:
        if self.synthesizer is None:
            raise RuntimeError("Insight synthesis requested without a synthesizer")
        return self.synthesizer

    def _check_cancelled(self, job_id: str) -> None:
        if not self._active_jobs.get(job_id, False):
            raise ScrapeCancelled()


class _Reporter:
    """Calls the progress callback; a failing callback never aborts a run."""

    def __init__(self, callback: Optional[ProgressCallback]) -> None:
        self.callback = callback

    def __call__(self, stage: PipelineStage, message: str, percent: int) -> None:
        if self.callback is None:
            return
        try:
            self.callback(stage.value, message, percent)
        except Exception as e:
            logger.warning("Progress callback failed", stage=stage.value, error=str(e))


__all__ = ["AnalysisPipeline", "PipelineStage", "ProgressCallback", "RunOutcome"]
