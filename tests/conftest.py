"""
Shared test configuration for PageLens.

Provides sample pages and fake collaborators so that no test touches the
network or a real text-generation service.
"""

from unittest.mock import AsyncMock

import pytest

from pagelens.config import Config
from pagelens.protocols import Image, Link, PageMetadata, RenderedPage, ScrapedData
from tests.helpers import FakeTextGenerator, build_page, words
from tests.helpers.builders import SAMPLE_URL

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Sample content
# ============================================================================

SAMPLE_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Understanding Python Async Programming Today</title>
    <meta name="description" content="A practical introduction to asyncio, event loops and structured concurrency for working Python developers who want faster services.">
    <meta name="keywords" content="python, asyncio">
    <meta name="author" content="">
    <meta property="og:title" content="Python Async Programming">
    <meta property="og:description" content="Learn asyncio step by step">
</head>
<body>
    <h1>Python Async Programming</h1>
    <h2>Event loops</h2>
    <h2>Tasks and futures</h2>
    <h3></h3>
    <p>Short intro.</p>
    <p>   Asyncio lets a single thread juggle thousands of network connections efficiently.   </p>
    <p>The event loop schedules coroutines and resumes them when their awaited operations complete.</p>
    <p>Tasks wrap coroutines so that they run concurrently with the code that created them.</p>
    <a href="/docs">Documentation</a>
    <a href="https://other.org/page">Elsewhere</a>
    <a href="">Empty</a>
    <a href="https://example.com/undefined">Broken template</a>
    <a>No href at all</a>
    <img src="/img/loop.png" alt="Event loop diagram" width="640" height="480">
    <img src="diagram.svg" alt="">
    <img src="data:image/png;base64,AAAA" alt="inline">
</body>
</html>
"""


@pytest.fixture
def sample_html() -> str:
    """Provide sample HTML content for testing."""
    return SAMPLE_HTML


@pytest.fixture
def sample_url() -> str:
    return SAMPLE_URL


@pytest.fixture
def rich_page() -> ScrapedData:
    """A well-formed page: one H1, two H2, five described images, 400 words."""
    return build_page(
        title="A" * 45,
        headings={"h1": ["Only H1"], "h2": ["A", "B"]},
        paragraphs=[words(100, "alpha"), words(100, "beta"), words(100, "gamma"), words(100, "delta")],
        links=[
            Link(text="Home", href="https://example.com/", is_internal=True, is_external=False),
            Link(text="Other", href="https://other.org/", is_internal=False, is_external=True),
        ],
        images=[Image(src=f"https://example.com/{i}.png", alt=f"Image {i}") for i in range(5)],
        metadata=PageMetadata(description="D" * 140, og_title="OG title", og_description="OG description"),
    )


# ============================================================================
# Fake collaborators
# ============================================================================


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def fake_renderer(sample_html, sample_url) -> AsyncMock:
    renderer = AsyncMock()
    renderer.render.return_value = RenderedPage(url=sample_url, html=sample_html)
    return renderer


@pytest.fixture
def test_config() -> Config:
    """Configuration with an API key so AI analysis is available."""
    config = Config()
    config.insights.api_key = "test-key"
    return config
