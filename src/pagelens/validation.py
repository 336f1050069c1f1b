"""
Request validation for page analysis runs.

Accepts the camelCase wire shape (``waitForSelector``, ``includeAIAnalysis``,
``useCache``) as well as the snake_case field names.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ValidationFailure

ALLOWED_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048


class ScrapeOptions(BaseModel):
    """Per-run options."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    wait_for_selector: Optional[str] = Field(default=None, alias="waitForSelector")
    timeout: Optional[int] = Field(default=None, ge=1000, le=120000, description="Navigation timeout in ms.")
    include_ai_analysis: bool = Field(default=True, alias="includeAIAnalysis")
    use_cache: bool = Field(default=True, alias="useCache")


class ScrapeRequest(BaseModel):
    """A single page analysis request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str
    options: ScrapeOptions = Field(default_factory=ScrapeOptions)

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > MAX_URL_LENGTH:
            raise ValueError("Invalid URL format")
        parsed = urlparse(v)
        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
            raise ValueError("Invalid URL format")
        return v

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, v: Any) -> Any:
        return {} if v is None else v


def _format_errors(error: ValidationError) -> str:
    parts: List[str] = []
    for item in error.errors():
        path = ".".join(str(segment) for segment in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        # pydantic prefixes custom messages with "Value error, "
        message = message.removeprefix("Value error, ")
        parts.append(f"{path}: {message}" if path else message)
    return ", ".join(parts)


def validate_request(payload: Any) -> ScrapeRequest:
    """Coerce a request payload into a ``ScrapeRequest``.

    Raises:
        ValidationFailure: the payload is not a mapping or a field is invalid
    """
    if isinstance(payload, ScrapeRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationFailure("Validation error: request body must be an object")
    try:
        return ScrapeRequest.model_validate(dict(payload))
    except ValidationError as e:
        raise ValidationFailure(f"Validation error: {_format_errors(e)}") from e


__all__ = ["ScrapeOptions", "ScrapeRequest", "validate_request"]
