"""
Defines Prometheus metrics for the application.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Importing the module more than once (test collection, reloads) must not
# register the same collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing

        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)


METRICS: Dict[str, Any] = {
    "analyses": Counter(
        "pagelens_analyses_total",
        "Page analysis runs by outcome",
        ["outcome"],
    ),
    "analysis_duration": Histogram(
        "pagelens_analysis_duration_seconds",
        "Wall-clock duration of a full analysis run",
        buckets=(0.5, 1, 2.5, 5, 10, 20, 30, 60, 120),
    ),
    "insight_fallbacks": Counter(
        "pagelens_insight_fallbacks_total",
        "Insight fields that fell back to a default value",
        ["field"],
    ),
    "cache_hits": Counter(
        "pagelens_cache_hits_total",
        "Analysis requests answered from the URL cache",
    ),
}


def export_prometheus() -> bytes:
    """Export metrics in Prometheus text format."""
    return generate_latest()
