"""Test helpers shared across unit and integration tests."""

from .builders import FakeTextGenerator, build_page, prompt_kind, words
from .metric_delta import histogram_observes, metric_delta, sample_value

__all__ = [
    "FakeTextGenerator",
    "build_page",
    "prompt_kind",
    "words",
    "histogram_observes",
    "metric_delta",
    "sample_value",
]
