"""Core data models."""

from quoterecorder.core.models.analysis import DailyAnalysis, MinuteBar, RawPayload
from quoterecorder.core.models.chart import (
    Chart,
    ChartEnvelope,
    ChartError,
    ChartMeta,
    ChartResult,
    QuoteSeries,
    TradingPeriods,
    TradingWindow,
)
from quoterecorder.core.models.market import BAR_SECONDS, INTERVAL_1M, RawStatus, TradingSession

__all__ = [
    "BAR_SECONDS",
    "INTERVAL_1M",
    "Chart",
    "ChartEnvelope",
    "ChartError",
    "ChartMeta",
    "ChartResult",
    "DailyAnalysis",
    "MinuteBar",
    "QuoteSeries",
    "RawPayload",
    "RawStatus",
    "TradingPeriods",
    "TradingSession",
    "TradingWindow",
]
