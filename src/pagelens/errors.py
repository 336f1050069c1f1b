"""
Typed failures surfaced to callers of the analysis pipeline.

Field-level problems inside insight synthesis never reach this module; they
are recovered where they happen. Everything here is user-presentable.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from .protocols import ErrorSeverity


class ErrorCategory(Enum):
    """Coarse failure category reported alongside the message."""

    VALIDATION = "validation"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    EXTRACTION = "extraction"
    ANALYSIS = "analysis"
    CANCELLED = "cancelled"


class PageLensError(Exception):
    """Base class for all typed PageLens failures."""

    status_code: int = 500
    category: ErrorCategory = ErrorCategory.EXTRACTION
    severity: ErrorSeverity = ErrorSeverity.MEDIUM

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if category is not None:
            self.category = category
        if severity is not None:
            self.severity = severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "statusCode": self.status_code,
            "category": self.category.value,
            "severity": self.severity.value,
        }


class ValidationFailure(PageLensError):
    """Malformed URL or options, caught before any extraction attempt."""

    status_code = 400
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW


class ExtractionFailure(PageLensError):
    """Rendering or DOM query failed."""

    status_code = 500
    category = ErrorCategory.EXTRACTION
    severity = ErrorSeverity.HIGH

    @classmethod
    def timeout(cls, detail: str = "") -> ExtractionFailure:
        message = "Request timeout: The website took too long to respond"
        if detail:
            message = f"{message} ({detail})"
        return cls(message, status_code=408, category=ErrorCategory.TIMEOUT, severity=ErrorSeverity.MEDIUM)

    @classmethod
    def unreachable(cls, detail: str = "") -> ExtractionFailure:
        message = "Invalid URL or website is unreachable"
        if detail:
            message = f"{message} ({detail})"
        return cls(message, status_code=400, category=ErrorCategory.UNREACHABLE, severity=ErrorSeverity.MEDIUM)

    @classmethod
    def unexpected(cls, detail: str) -> ExtractionFailure:
        return cls(f"Scraping failed: {detail}")


class AnalysisFailure(PageLensError):
    """The mandatory digest or summary step of insight synthesis failed."""

    status_code = 500
    category = ErrorCategory.ANALYSIS
    severity = ErrorSeverity.HIGH


class ScrapeCancelled(PageLensError):
    """The run was cancelled by the caller at a run boundary."""

    status_code = 499
    category = ErrorCategory.CANCELLED
    severity = ErrorSeverity.LOW

    def __init__(self, message: str = "Scraping cancelled") -> None:
        super().__init__(message)


__all__ = [
    "ErrorCategory",
    "PageLensError",
    "ValidationFailure",
    "ExtractionFailure",
    "AnalysisFailure",
    "ScrapeCancelled",
]
