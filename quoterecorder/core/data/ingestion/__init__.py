"""Parse, validate and classify pipeline for raw chart payloads."""

from __future__ import annotations

from quoterecorder.core.data.ingestion.classifier import classify_sessions, match_session
from quoterecorder.core.data.ingestion.parser import decode_chart, parse_daily_chart
from quoterecorder.core.data.ingestion.validator import ValidationIssue, validate_chart

__all__ = [
    "ValidationIssue",
    "classify_sessions",
    "decode_chart",
    "match_session",
    "parse_daily_chart",
    "validate_chart",
]
