"""
Unit tests for the AnalysisPipeline with fake renderer and text generator.
"""

from unittest.mock import AsyncMock

import pytest

from pagelens.errors import AnalysisFailure, ExtractionFailure, ScrapeCancelled, ValidationFailure
from pagelens.extractor import ExtractionNormalizer, SoupDomExtractor
from pagelens.insights import InsightSynthesizer
from pagelens.pipeline import AnalysisPipeline, PipelineStage
from pagelens.protocols import RenderedPage
from pagelens.storage import InMemoryResultStore
from tests.helpers import FakeTextGenerator, histogram_observes, metric_delta, prompt_kind, words
from tests.helpers.builders import CANNED_RESPONSES

ANALYSES = "pagelens_analyses_total"

LONG_PARAGRAPH_HTML = f"""
<html><head><title>Long read</title></head>
<body><h1>Long read</h1><p>{words(40, "paragraph")}</p><p>{words(40, "another")}</p></body></html>
"""


def make_pipeline(renderer, generator=None, store=None):
    return AnalysisPipeline(
        renderer=renderer,
        extractor=SoupDomExtractor(),
        normalizer=ExtractionNormalizer(),
        synthesizer=InsightSynthesizer(generator) if generator is not None else None,
        store=InMemoryResultStore() if store is None else store,
    )


class TestRun:
    @pytest.mark.asyncio
    async def test_full_run(self, fake_renderer, fake_generator, sample_url):
        pipeline = make_pipeline(fake_renderer, fake_generator)

        with metric_delta(ANALYSES, {"outcome": "success"}), histogram_observes("pagelens_analysis_duration_seconds"):
            outcome = await pipeline.run({"url": sample_url})

        result = outcome.result
        assert not outcome.cached
        assert result.data.url == sample_url
        assert result.data.scraped_at is not None
        assert result.data.title == "Understanding Python Async Programming Today"
        assert len(result.data.paragraphs) == 3
        # short paragraphs summarise to themselves
        assert all(p.summary == p.text and p.importance == 50 for p in result.data.paragraphs)
        assert result.ai_analysis.content_summary == CANNED_RESPONSES["summary"]
        assert result.analytics.total_words > 0
        assert pipeline.store.get(result.id) is result
        assert pipeline.store.get_cached(sample_url) is result
        assert pipeline.active_jobs == []

        fake_renderer.render.assert_awaited_once_with(sample_url, wait_for_selector=None, timeout_ms=60000)

    @pytest.mark.asyncio
    async def test_options_forwarded_to_renderer(self, fake_renderer, sample_url):
        pipeline = make_pipeline(fake_renderer)

        await pipeline.run(
            {
                "url": sample_url,
                "options": {"timeout": 5000, "waitForSelector": "#app", "includeAIAnalysis": False},
            }
        )

        fake_renderer.render.assert_awaited_once_with(sample_url, wait_for_selector="#app", timeout_ms=5000)

    @pytest.mark.asyncio
    async def test_without_ai(self, fake_renderer, fake_generator, sample_url):
        pipeline = make_pipeline(fake_renderer, fake_generator)

        outcome = await pipeline.run({"url": sample_url, "options": {"includeAIAnalysis": False}})

        ai = outcome.result.ai_analysis
        assert ai.content_summary == "AI analysis skipped"
        assert ai.content_categories == ()
        assert ai.seo_insights.recommendations == ()
        assert all(p.summary is None for p in outcome.result.data.paragraphs)
        fake_generator.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_ai_requested_without_generator(self, fake_renderer, sample_url):
        pipeline = make_pipeline(fake_renderer)

        with pytest.raises(AnalysisFailure):
            await pipeline.run({"url": sample_url})

        fake_renderer.render.assert_not_called()

    @pytest.mark.asyncio
    async def test_paragraph_summaries_before_analytics(self):
        renderer = AsyncMock()
        renderer.render.return_value = RenderedPage(url="https://example.com/long", html=LONG_PARAGRAPH_HTML)
        generator = FakeTextGenerator()
        pipeline = make_pipeline(renderer, generator)

        outcome = await pipeline.run({"url": "https://example.com/long"})

        paragraphs = outcome.result.data.paragraphs
        assert [p.summary for p in paragraphs] == ["A condensed sentence.", "A condensed sentence."]
        assert [p.importance for p in paragraphs] == [80, 80]
        assert outcome.result.analytics.total_words == 80


    @pytest.mark.asyncio
    async def test_links_classified_against_requested_url_after_redirect(self):
        renderer = AsyncMock()
        renderer.render.return_value = RenderedPage(
            url="https://www.example.com/",
            html='<a href="https://example.com/about">About</a><a href="/team">Team</a><img src="logo.png" alt="Logo">',
        )
        pipeline = make_pipeline(renderer)

        outcome = await pipeline.run({"url": "https://example.com/", "options": {"includeAIAnalysis": False}})

        data = outcome.result.data
        assert data.url == "https://example.com/"
        about, team = data.links
        assert about.is_internal and not about.is_external
        # relative references resolve against the final document URL
        assert team.href == "https://www.example.com/team"
        assert data.images[0].src == "https://www.example.com/logo.png"
        assert outcome.result.analytics.link_analysis.internal_links == 1


class TestCache:
    @pytest.mark.asyncio
    async def test_second_run_served_from_cache(self, fake_renderer, fake_generator, sample_url):
        pipeline = make_pipeline(fake_renderer, fake_generator)
        first = await pipeline.run({"url": sample_url})

        with metric_delta("pagelens_cache_hits_total"):
            second = await pipeline.run({"url": sample_url})

        assert second.cached
        assert second.result is first.result
        fake_renderer.render.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_bypassed(self, fake_renderer, fake_generator, sample_url):
        pipeline = make_pipeline(fake_renderer, fake_generator)
        options = {"useCache": False}

        first = await pipeline.run({"url": sample_url, "options": options})
        second = await pipeline.run({"url": sample_url, "options": options})

        assert not second.cached
        assert first.result.id != second.result.id
        assert fake_renderer.render.await_count == 2
        assert pipeline.store.cache_stats()["total"] == 0
        assert len(pipeline.store.history()) == 2


class TestFailures:
    @pytest.mark.asyncio
    async def test_invalid_request_never_renders(self, fake_renderer):
        pipeline = make_pipeline(fake_renderer, FakeTextGenerator())

        with pytest.raises(ValidationFailure):
            await pipeline.run({"url": "not a url"})

        fake_renderer.render.assert_not_called()

    @pytest.mark.asyncio
    async def test_renderer_failure_propagates(self, fake_renderer, sample_url):
        fake_renderer.render.side_effect = ExtractionFailure.timeout()
        pipeline = make_pipeline(fake_renderer, FakeTextGenerator())

        with metric_delta(ANALYSES, {"outcome": "failed"}):
            with pytest.raises(ExtractionFailure) as exc_info:
                await pipeline.run({"url": sample_url})

        assert exc_info.value.status_code == 408
        assert pipeline.active_jobs == []
        assert pipeline.store.history() == []

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, fake_renderer, sample_url):
        fake_renderer.render.side_effect = RuntimeError("socket exploded")
        pipeline = make_pipeline(fake_renderer, FakeTextGenerator())

        with pytest.raises(ExtractionFailure) as exc_info:
            await pipeline.run({"url": sample_url})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Scraping failed: socket exploded"

    @pytest.mark.asyncio
    async def test_summary_failure_fails_run(self, fake_renderer, sample_url):
        generator = FakeTextGenerator(failures={"summary": RuntimeError("quota")})
        pipeline = make_pipeline(fake_renderer, generator)

        with pytest.raises(AnalysisFailure):
            await pipeline.run({"url": sample_url})

        assert pipeline.store.get_cached(sample_url) is None


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_unknown_job(self, fake_renderer):
        assert make_pipeline(fake_renderer).cancel("nope") is False

    @pytest.mark.asyncio
    async def test_cancel_after_extraction(self, fake_renderer, fake_generator, sample_html, sample_url):
        pipeline = make_pipeline(fake_renderer, fake_generator)

        async def render_then_cancel(url, **kwargs):
            assert pipeline.active_jobs == ["job-1"]
            assert pipeline.cancel("job-1") is True
            return RenderedPage(url=url, html=sample_html)

        fake_renderer.render.side_effect = render_then_cancel

        with metric_delta(ANALYSES, {"outcome": "cancelled"}):
            with pytest.raises(ScrapeCancelled) as exc_info:
                await pipeline.run({"url": sample_url}, job_id="job-1")

        assert exc_info.value.status_code == 499
        assert exc_info.value.message == "Scraping cancelled"
        fake_generator.generate.assert_not_called()
        assert pipeline.store.history() == []
        assert pipeline.cancel("job-1") is False

    @pytest.mark.asyncio
    async def test_cancel_during_paragraph_summaries(self):
        renderer = AsyncMock()
        renderer.render.return_value = RenderedPage(url="https://example.com/long", html=LONG_PARAGRAPH_HTML)
        generator = FakeTextGenerator()
        pipeline = make_pipeline(renderer, generator)

        async def respond(prompt):
            if prompt_kind(prompt) == "paragraph":
                pipeline.cancel("job-2")
            return CANNED_RESPONSES[prompt_kind(prompt)]

        generator.generate.side_effect = respond

        with pytest.raises(ScrapeCancelled):
            await pipeline.run({"url": "https://example.com/long"}, job_id="job-2")

        assert generator.calls_for("summary") == 0


class TestProgress:
    @pytest.mark.asyncio
    async def test_stages_reported_in_order(self, fake_renderer, fake_generator, sample_url):
        events = []
        pipeline = make_pipeline(fake_renderer, fake_generator)

        def record(stage, message, percent):
            events.append((stage, percent))

        await pipeline.run({"url": sample_url}, progress=record)

        stages = [stage for stage, _ in events]
        assert stages[0] == PipelineStage.VALIDATE.value
        assert stages[-1] == PipelineStage.COMPLETE.value
        assert PipelineStage.RENDER.value in stages
        assert PipelineStage.INSIGHTS.value in stages
        percents = [percent for _, percent in events]
        assert percents == sorted(percents)
        assert percents[-1] == 100

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_abort(self, fake_renderer, fake_generator, sample_url):
        def broken(stage, message, percent):
            raise RuntimeError("ui gone")

        outcome = await make_pipeline(fake_renderer, fake_generator).run({"url": sample_url}, progress=broken)

        assert outcome.result.id


class DictStore:
    """Minimal store satisfying ResultStoreProtocol."""

    def __init__(self):
        self.results = {}
        self.cached = {}

    def put(self, result):
        self.results[result.id] = result

    def get(self, result_id):
        return self.results.get(result_id)

    def cache(self, url, result, ttl_seconds=None):
        self.cached[url] = result

    def get_cached(self, url):
        return self.cached.get(url)


class TestCollaborators:
    @pytest.mark.asyncio
    async def test_any_result_store_protocol_implementation(self, fake_renderer, sample_url):
        store = DictStore()
        pipeline = make_pipeline(fake_renderer, store=store)

        first = await pipeline.run({"url": sample_url, "options": {"includeAIAnalysis": False}})
        second = await pipeline.run({"url": sample_url, "options": {"includeAIAnalysis": False}})

        assert store.get(first.result.id) is first.result
        assert second.cached
        assert second.result is first.result

    def test_missing_synthesizer_raises_runtime_error(self, fake_renderer):
        with pytest.raises(RuntimeError):
            make_pipeline(fake_renderer)._synthesizer()
