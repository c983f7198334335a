"""Structural validation of decoded chart payloads."""

from __future__ import annotations

from dataclasses import dataclass

from quoterecorder.core.exceptions.codes import ErrorCode
from quoterecorder.core.models.chart import ChartEnvelope
from quoterecorder.core.models.market import TradingSession


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    """Represents the first structural problem found in a payload."""

    field: str
    code: ErrorCode
    message: str


def validate_chart(envelope: ChartEnvelope) -> ValidationIssue | None:
    """Check a decoded payload before classification.

    Checks run in a fixed order and stop at the first failure: upstream
    error, empty result, empty quotes, quote array lengths, trading periods.
    """

    chart = envelope.chart
    if chart.error is not None:
        return ValidationIssue(
            field="chart.error",
            code=ErrorCode.UPSTREAM_ERROR,
            message=f"[{chart.error.code or ''}] {chart.error.description or ''}",
        )

    if not chart.result:
        return ValidationIssue(field="chart.result", code=ErrorCode.EMPTY_RESULT, message="empty result")

    result = chart.result[0]
    if not result.indicators.quote:
        return ValidationIssue(field="indicators.quote", code=ErrorCode.EMPTY_QUOTES, message="empty quotes")

    quote = result.indicators.quote[0]
    expected = len(result.timestamp)
    for name in ("open", "close", "high", "low", "volume"):
        if len(getattr(quote, name)) != expected:
            return ValidationIssue(
                field=f"indicators.quote.{name}",
                code=ErrorCode.QUOTE_COUNT_MISMATCH,
                message="quote count mismatch",
            )

    periods = result.meta.trading_periods
    for session in TradingSession:
        groups = periods.groups(session)
        if not groups or not groups[0]:
            return ValidationIssue(
                field=f"meta.tradingPeriods.{session.value}",
                code=ErrorCode.TRADING_PERIODS_INCORRECT,
                message="trading periods count incorrect",
            )

    return None


__all__ = ["ValidationIssue", "validate_chart"]
