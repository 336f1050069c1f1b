"""
PageLens - web page content extraction and analysis.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .container import PageLensContainer
from .pipeline import AnalysisPipeline

__all__ = ["__version__", "Config", "PageLensContainer", "AnalysisPipeline"]
