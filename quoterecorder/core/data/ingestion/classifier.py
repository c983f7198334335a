"""Assign minute bars to trading sessions."""

from __future__ import annotations

from quoterecorder.core.models.analysis import DailyAnalysis, MinuteBar
from quoterecorder.core.models.chart import ChartResult, TradingWindow
from quoterecorder.core.models.market import TradingSession

# Pre wins over regular, regular over post.
SESSION_PRIORITY = (TradingSession.PRE, TradingSession.REGULAR, TradingSession.POST)


def _price(value: float | None) -> float:
    return 0.0 if value is None else float(value)


def match_session(ts: int, windows: dict[TradingSession, TradingWindow]) -> TradingSession | None:
    """Return the first session whose window contains ``ts``."""

    for session in SESSION_PRIORITY:
        if windows[session].contains(ts):
            return session
    return None


def classify_sessions(analysis: DailyAnalysis, result: ChartResult) -> DailyAnalysis:
    """Append one bar per timestamp to the session it falls in.

    ``result`` must already have passed validation. Timestamps outside all
    three first windows are dropped.
    """

    periods = result.meta.trading_periods
    windows = {session: periods.first_window(session) for session in SESSION_PRIORITY}
    quote = result.indicators.quote[0]

    for index, ts in enumerate(result.timestamp):
        session = match_session(ts, windows)
        if session is None:
            continue

        volume = quote.volume[index]
        bar = MinuteBar.at(
            analysis.code,
            analysis.market,
            ts,
            open=_price(quote.open[index]),
            close=_price(quote.close[index]),
            high=_price(quote.high[index]),
            low=_price(quote.low[index]),
            volume=0 if volume is None else int(volume),
        )
        analysis.bars(session).append(bar)

    return analysis


__all__ = ["SESSION_PRIORITY", "classify_sessions", "match_session"]
