"""Configuration models and loaders."""

from __future__ import annotations

from .config import (
    Config,
    InsightConfig,
    MonitoringConfig,
    RendererConfig,
    StorageConfig,
    WebConfig,
    find_config_file,
)

__all__ = [
    "Config",
    "InsightConfig",
    "MonitoringConfig",
    "RendererConfig",
    "StorageConfig",
    "WebConfig",
    "find_config_file",
]
