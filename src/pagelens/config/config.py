"""
Configuration management for PageLens using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class RendererConfig(BaseModel):
    """Page rendering configuration."""

    backend: Literal["http", "playwright"] = Field(
        default="http", description="Renderer used to fetch pages (static HTTP or headless browser)."
    )
    timeout_ms: int = Field(default=60000, ge=1000, le=120000, description="Navigation timeout in milliseconds.")
    selector_timeout_ms: int = Field(default=10000, description="Maximum wait for an explicit selector.")
    settle_ms: int = Field(default=3000, description="Extra wait after the domcontentloaded fallback.")
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent string for page requests.",
    )
    headless: bool = Field(default=True, description="Run the browser headless.")


class InsightConfig(BaseModel):
    """Configuration for generated insights."""

    api_key: Optional[str] = Field(default=None, description="Gemini API key; required when AI analysis runs.")
    model: str = Field(default="gemini-2.0-flash-lite", description="Generative model name.")
    digest_paragraphs: int = Field(default=10, ge=1, description="Paragraphs included in the content digest.")
    prompt_char_budget: int = Field(default=3000, ge=100, description="Digest characters sent with long prompts.")
    short_prompt_char_budget: int = Field(
        default=2000, ge=100, description="Digest characters sent with sentiment and category prompts."
    )
    max_topics: int = Field(default=7, ge=1)
    max_categories: int = Field(default=4, ge=1)
    max_entities_per_kind: int = Field(default=5, ge=1)
    max_keywords: int = Field(default=10, ge=1)
    max_insights: int = Field(default=5, ge=1)
    summarized_paragraphs: int = Field(
        default=5, ge=0, description="Leading paragraphs eligible for generated summaries."
    )
    min_summary_length: int = Field(
        default=100, ge=0, description="Paragraphs shorter than this summarise to themselves."
    )
    truncation_length: int = Field(default=100, ge=1, description="Cutoff for mechanically truncated summaries.")
    paragraph_char_budget: int = Field(default=500, ge=50)


class StorageConfig(BaseModel):
    """Configuration for the in-memory result store."""

    max_results: int = Field(default=50, ge=1, description="Results kept before the oldest is evicted.")
    cache_ttl_seconds: int = Field(default=3600, ge=0, description="Lifetime of per-URL cache entries.")


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=3001, description="Port for the web server.")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "PageLens"
    version: str = "0.1.0"
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(env_prefix="PAGELENS_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.exists():
            return path
    return None
