"""Transfer models for the upstream v7 chart payload.

Every nested list is optional upstream and may be missing or ``null``; the
models normalise those to empty lists so callers can test lengths instead of
presence.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quoterecorder.core.models.market import TradingSession


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TradingWindow(_Payload):
    """单个交易时段窗口, 半开区间 [start, end)."""

    timezone: str | None = None
    start: int = 0
    end: int = 0
    gmtoffset: int = 0

    def contains(self, ts: int) -> bool:
        return self.start <= ts < self.end


class TradingPeriods(_Payload):
    """盘前/盘中/盘后窗口分组, 每个时段为窗口列表的列表."""

    pre: list[list[TradingWindow]] = Field(default_factory=list)
    regular: list[list[TradingWindow]] = Field(default_factory=list)
    post: list[list[TradingWindow]] = Field(default_factory=list)

    @field_validator("pre", "regular", "post", mode="before")
    @classmethod
    def _coerce_groups(cls, value: Any) -> Any:
        value = _none_to_list(value)
        if isinstance(value, list):
            return [_none_to_list(group) for group in value]
        return value

    def groups(self, session: TradingSession) -> list[list[TradingWindow]]:
        return getattr(self, session.value)

    def first_window(self, session: TradingSession) -> TradingWindow:
        """Return window ``[0][0]`` of ``session``; only that window is consulted."""

        return self.groups(session)[0][0]


class ChartMeta(_Payload):
    currency: str | None = None
    symbol: str | None = None
    exchange_name: str | None = Field(default=None, alias="exchangeName")
    instrument_type: str | None = Field(default=None, alias="instrumentType")
    timezone: str | None = None
    gmtoffset: int | None = None
    data_granularity: str | None = Field(default=None, alias="dataGranularity")
    trading_periods: TradingPeriods = Field(default_factory=TradingPeriods, alias="tradingPeriods")

    @field_validator("trading_periods", mode="before")
    @classmethod
    def _coerce_periods(cls, value: Any) -> Any:
        if value is None:
            return {}
        # Without pre/post inclusion upstream sends a bare list of regular groups.
        if isinstance(value, list):
            return {"regular": value}
        return value


class QuoteSeries(_Payload):
    """Parallel OHLCV arrays; ``None`` marks a minute without trades."""

    open: list[float | None] = Field(default_factory=list)
    close: list[float | None] = Field(default_factory=list)
    high: list[float | None] = Field(default_factory=list)
    low: list[float | None] = Field(default_factory=list)
    volume: list[int | None] = Field(default_factory=list)

    @field_validator("open", "close", "high", "low", "volume", mode="before")
    @classmethod
    def _coerce_series(cls, value: Any) -> Any:
        return _none_to_list(value)


class Indicators(_Payload):
    quote: list[QuoteSeries] = Field(default_factory=list)

    @field_validator("quote", mode="before")
    @classmethod
    def _coerce_quote(cls, value: Any) -> Any:
        return _none_to_list(value)


class ChartResult(_Payload):
    meta: ChartMeta = Field(default_factory=ChartMeta)
    timestamp: list[int] = Field(default_factory=list)
    indicators: Indicators = Field(default_factory=Indicators)

    @field_validator("meta", "indicators", mode="before")
    @classmethod
    def _coerce_objects(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return _none_to_list(value)


class ChartError(_Payload):
    code: str | None = None
    description: str | None = None

    @field_validator("code", "description", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return value if value is None or isinstance(value, str) else str(value)


class Chart(_Payload):
    result: list[ChartResult] = Field(default_factory=list)
    error: ChartError | None = None

    @field_validator("result", mode="before")
    @classmethod
    def _coerce_result(cls, value: Any) -> Any:
        return _none_to_list(value)


class ChartEnvelope(_Payload):
    """Top-level ``{"chart": {...}}`` document."""

    chart: Chart = Field(default_factory=Chart)

    @field_validator("chart", mode="before")
    @classmethod
    def _coerce_chart(cls, value: Any) -> Any:
        return {} if value is None else value


__all__ = [
    "Chart",
    "ChartEnvelope",
    "ChartError",
    "ChartMeta",
    "ChartResult",
    "Indicators",
    "QuoteSeries",
    "TradingPeriods",
    "TradingWindow",
]
