"""
Contracts between the ingestion core and its collaborators.

The orchestrator only depends on these protocols, so the DuckDB store,
the save queue and the HTTP downloader can be swapped for test doubles.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, Protocol, runtime_checkable

from quoterecorder.core.models.analysis import DailyAnalysis, RawPayload


@runtime_checkable
class RawPayloadSink(Protocol):
    """Persistence side of the fetch step."""

    def exists(self, market: str, code: str, day: date) -> bool:
        """Return whether the day is already stored; raise StoreLookupError if unknown."""
        ...

    def enqueue(self, payload: RawPayload) -> None:
        """Hand ``payload`` over for eventual durable storage without blocking."""
        ...


@runtime_checkable
class AnalysisSink(Protocol):
    """Receiver of classified daily results."""

    def save(self, analysis: DailyAnalysis) -> None:
        ...


@runtime_checkable
class TextFetcher(Protocol):
    """Resilient text download primitive."""

    async def download_text(self, url: str, params: Mapping[str, Any] | None = None) -> str:
        """Return the body of ``url``; raise FetchError when retries are exhausted."""
        ...


__all__ = ["AnalysisSink", "RawPayloadSink", "TextFetcher"]
