"""Transient storage of finished analysis results."""

from __future__ import annotations

from .result_store import CacheEntry, HistoryEntry, InMemoryResultStore

__all__ = ["CacheEntry", "HistoryEntry", "InMemoryResultStore"]
