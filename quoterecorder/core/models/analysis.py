"""Data models produced by the fetch and parse pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from quoterecorder.core.models.market import BAR_SECONDS, RawStatus, TradingSession


@dataclass(slots=True, frozen=True)
class RawPayload:
    """One day's unparsed fetch result as handed to persistence."""

    market: str
    code: str
    date: date
    json_text: str
    status: RawStatus = RawStatus.UNPROCESSED
    message: str = ""

    @property
    def key(self) -> tuple[str, str, date]:
        return (self.market, self.code, self.date)


@dataclass(slots=True, frozen=True)
class MinuteBar:
    """OHLCV aggregate for the 60 second interval starting at ``start``."""

    code: str
    market: str
    start: int
    end: int
    open: float
    close: float
    high: float
    low: float
    volume: int

    @classmethod
    def at(
        cls,
        code: str,
        market: str,
        start: int,
        *,
        open: float,
        close: float,
        high: float,
        low: float,
        volume: int,
    ) -> MinuteBar:
        return cls(
            code=code,
            market=market,
            start=start,
            end=start + BAR_SECONDS,
            open=open,
            close=close,
            high=high,
            low=low,
            volume=volume,
        )

    @property
    def start_time(self) -> datetime:
        return datetime.fromtimestamp(self.start, tz=UTC)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class DailyAnalysis:
    """Classified minute bars of one (market, code, date).

    ``error`` marks a day whose payload decoded but failed validation; such a
    result carries the reason in ``message`` and no bars.
    """

    code: str
    market: str
    date: date
    error: bool = False
    message: str = ""
    pre: list[MinuteBar] = field(default_factory=list)
    regular: list[MinuteBar] = field(default_factory=list)
    post: list[MinuteBar] = field(default_factory=list)

    def bars(self, session: TradingSession) -> list[MinuteBar]:
        return getattr(self, session.value)

    def mark_invalid(self, message: str) -> None:
        self.error = True
        self.message = message

    @property
    def bar_count(self) -> int:
        return len(self.pre) + len(self.regular) + len(self.post)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "market": self.market,
            "date": self.date.isoformat(),
            "error": self.error,
            "message": self.message,
            **{session.value: [bar.to_dict() for bar in self.bars(session)] for session in TradingSession},
        }


__all__ = ["DailyAnalysis", "MinuteBar", "RawPayload"]
